from __future__ import annotations

from dataclasses import dataclass, field
from typing import List

from ..attendance.model import AttendanceSummary
from ..groups.model import GroupDTO
from ..payments.model import PaymentStats
from ..users.model import UserDTO


@dataclass(frozen=True)
class AdminDashboard:
    total_users: int
    total_groups: int
    active_groups: int
    total_students: int
    total_teachers: int
    payment_stats: PaymentStats
    recent_users: List[UserDTO] = field(default_factory=list)


@dataclass(frozen=True)
class TeacherDashboard:
    teacher_id: int
    total_groups: int
    active_groups: int
    total_students: int
    coins_awarded: int
    payment_stats: PaymentStats
    groups: List[GroupDTO] = field(default_factory=list)


@dataclass(frozen=True)
class StudentDashboard:
    student_id: int
    total_coins: int
    attendance: AttendanceSummary
    payments: PaymentStats
    groups: List[GroupDTO] = field(default_factory=list)
