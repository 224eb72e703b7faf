from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import AttendanceStatus


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one student's attendance at one lesson of a group."""

    attendance_id: int
    student_id: int
    group_id: int
    marked_by_id: int
    lesson_date: date
    status: AttendanceStatus
    notes: Optional[str] = None
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class AttendanceDTO:
    attendance_id: int
    student_id: int
    student_name: Optional[str]
    group_id: int
    group_name: Optional[str]
    marked_by_id: int
    lesson_date: date
    status: AttendanceStatus
    notes: Optional[str] = None
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class MarkAttendanceRequest:
    student_id: int
    group_id: int
    status: AttendanceStatus
    lesson_date: Optional[date] = None
    notes: Optional[str] = None


@dataclass(frozen=True)
class UpdateAttendanceRequest:
    status: Optional[AttendanceStatus] = None
    notes: Optional[str] = None


@dataclass(frozen=True)
class AttendanceSummary:
    student_id: int
    total_lessons: int
    present: int
    absent: int
    late: int
    excused: int
    attendance_rate: float
