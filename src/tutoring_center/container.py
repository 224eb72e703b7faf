from __future__ import annotations

from dataclasses import dataclass

from .attendance.service import AttendanceService
from .attendance.sql_attendance_repository import SQLAttendanceRepository
from .coins.service import CoinService
from .coins.sql_coin_repository import SQLCoinRepository
from .dashboard.service import DashboardService
from .database.session import atomic
from .enrollments.sql_enrollment_repository import SQLEnrollmentRepository
from .groups.access import GroupAccess
from .groups.service import GroupService
from .groups.sql_group_repository import SQLGroupRepository
from .payments.service import PaymentService
from .payments.sql_payment_repository import SQLPaymentRepository
from .users.service import AuthService, UserService
from .users.sql_user_repository import SQLUserRepository


@dataclass(frozen=True)
class Container:
    users_repo: SQLUserRepository
    groups_repo: SQLGroupRepository
    enrollments_repo: SQLEnrollmentRepository
    attendance_repo: SQLAttendanceRepository
    payments_repo: SQLPaymentRepository
    coins_repo: SQLCoinRepository

    access: GroupAccess
    auth_service: AuthService
    user_service: UserService
    group_service: GroupService
    attendance_service: AttendanceService
    payment_service: PaymentService
    coin_service: CoinService
    dashboard_service: DashboardService


def build_container(*, max_coins_per_award: int | None = None) -> Container:
    """Wire repositories and services. Repositories use the Flask-SQLAlchemy session."""
    users_repo = SQLUserRepository()
    groups_repo = SQLGroupRepository()
    enrollments_repo = SQLEnrollmentRepository()
    attendance_repo = SQLAttendanceRepository()
    payments_repo = SQLPaymentRepository()
    coins_repo = SQLCoinRepository()

    access = GroupAccess(users_repo, groups_repo, enrollments_repo)

    auth_service = AuthService(users_repo)
    group_service = GroupService(
        groups_repo,
        enrollments_repo,
        users_repo,
        attendance_repo,
        payments_repo,
        coins_repo,
        access=access,
        transaction=atomic,
    )
    user_service = UserService(
        users_repo,
        groups_repo,
        enrollments_repo,
        attendance_repo,
        payments_repo,
        coins_repo,
        group_service,
        access=access,
        transaction=atomic,
    )
    attendance_service = AttendanceService(attendance_repo, users_repo, groups_repo, access)
    payment_service = PaymentService(payments_repo, users_repo, groups_repo, access)
    coin_kwargs = {"max_per_award": max_coins_per_award} if max_coins_per_award else {}
    coin_service = CoinService(coins_repo, users_repo, groups_repo, enrollments_repo, access, **coin_kwargs)
    dashboard_service = DashboardService(
        users_repo,
        groups_repo,
        coins_repo,
        group_service,
        attendance_service,
        payment_service,
        coin_service,
    )

    return Container(
        users_repo=users_repo,
        groups_repo=groups_repo,
        enrollments_repo=enrollments_repo,
        attendance_repo=attendance_repo,
        payments_repo=payments_repo,
        coins_repo=coins_repo,
        access=access,
        auth_service=auth_service,
        user_service=user_service,
        group_service=group_service,
        attendance_service=attendance_service,
        payment_service=payment_service,
        coin_service=coin_service,
        dashboard_service=dashboard_service,
    )
