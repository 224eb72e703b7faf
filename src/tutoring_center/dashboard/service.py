from __future__ import annotations

from ..attendance.service import AttendanceService
from ..coins.repository import CoinRepository
from ..coins.service import CoinService
from ..core.constants import RECENT_USERS_LIMIT
from ..core.enums import GroupStatus, Role
from ..groups.repository import GroupRepository
from ..groups.service import GroupService
from ..payments.service import PaymentService
from ..users.model import to_user_dto
from ..users.repository import UserRepository
from .model import AdminDashboard, StudentDashboard, TeacherDashboard


class DashboardService:
    """Read-only aggregates for the three landing pages."""

    def __init__(
        self,
        users: UserRepository,
        groups: GroupRepository,
        coins: CoinRepository,
        group_service: GroupService,
        attendance_service: AttendanceService,
        payment_service: PaymentService,
        coin_service: CoinService,
    ):
        self._users = users
        self._groups = groups
        self._coins = coins
        self._group_service = group_service
        self._attendance_service = attendance_service
        self._payment_service = payment_service
        self._coin_service = coin_service

    def admin_dashboard(self) -> AdminDashboard:
        return AdminDashboard(
            total_users=self._users.count_by_role(),
            total_groups=self._groups.count_by_status(),
            active_groups=self._groups.count_by_status(GroupStatus.ACTIVE),
            total_students=self._users.count_by_role(Role.STUDENT),
            total_teachers=self._users.count_by_role(Role.TEACHER),
            payment_stats=self._payment_service.stats(),
            recent_users=[to_user_dto(u) for u in self._users.list_recent(RECENT_USERS_LIMIT)],
        )

    def teacher_dashboard(self, teacher_id: int) -> TeacherDashboard:
        groups = self._group_service.list_groups_by_teacher(teacher_id)
        return TeacherDashboard(
            teacher_id=int(teacher_id),
            total_groups=len(groups),
            active_groups=sum(1 for g in groups if g.status == GroupStatus.ACTIVE),
            total_students=len(self._group_service.list_teacher_students(teacher_id)),
            coins_awarded=self._coins.count_by_teacher(int(teacher_id)),
            payment_stats=self._payment_service.stats(teacher_id=int(teacher_id)),
            groups=groups,
        )

    def student_dashboard(self, student_id: int) -> StudentDashboard:
        return StudentDashboard(
            student_id=int(student_id),
            total_coins=self._coin_service.total_for_student(student_id),
            attendance=self._attendance_service.summary(student_id),
            payments=self._payment_service.total_paid_by_student(student_id),
            groups=self._group_service.list_groups_by_student(student_id),
        )
