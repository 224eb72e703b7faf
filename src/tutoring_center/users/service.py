from __future__ import annotations

import logging
from contextlib import nullcontext
from dataclasses import replace
from typing import TYPE_CHECKING, Callable, ContextManager, List, Optional

from werkzeug.security import check_password_hash, generate_password_hash

from ..attendance.repository import AttendanceRepository
from ..coins.repository import CoinRepository
from ..common.validators import optional_text, require_email, require_min_length, require_non_empty
from ..core.constants import MIN_PASSWORD_LENGTH
from ..core.enums import EnrollmentStatus, Role
from ..core.exceptions import AuthenticationError, AuthorizationError, ResourceNotFoundError, ValidationError
from ..enrollments.repository import EnrollmentRepository
from ..groups.access import GroupAccess
from ..groups.repository import GroupRepository
from ..payments.repository import PaymentRepository
from .model import CreateUserRequest, LoginResult, UpdateUserRequest, User, UserDTO, to_user_dto
from .repository import UserRepository

if TYPE_CHECKING:
    from ..groups.service import GroupService

logger = logging.getLogger(__name__)


class AuthService:
    """Use case: authenticate user (login)."""

    def __init__(self, users: UserRepository):
        self._users = users

    def authenticate(self, email: str, password: str) -> LoginResult:
        user = self._users.get_by_email((email or "").strip())
        if not user:
            raise AuthenticationError("Invalid email or password")

        try:
            ok = check_password_hash(user.password_hash, password or "")
        except ValueError:
            # e.g. placeholder hashes like 'CHANGE_ME' or corrupted values
            ok = False

        if not ok:
            raise AuthenticationError("Invalid email or password")

        logger.info("User %s logged in", user.user_id)
        return LoginResult(user_id=user.user_id, email=user.email, full_name=user.full_name, role=user.role)


class UserService:
    """Use case: manage user accounts."""

    def __init__(
        self,
        users: UserRepository,
        groups: GroupRepository,
        enrollments: EnrollmentRepository,
        attendance: AttendanceRepository,
        payments: PaymentRepository,
        coins: CoinRepository,
        group_service: "GroupService",
        *,
        access: GroupAccess | None = None,
        transaction: Callable[[], ContextManager] = nullcontext,
    ):
        self._users = users
        self._groups = groups
        self._enrollments = enrollments
        self._attendance = attendance
        self._payments = payments
        self._coins = coins
        self._group_service = group_service
        self._access = access or GroupAccess(users, groups, enrollments)
        self._transaction = transaction

    def list_users(self) -> List[UserDTO]:
        return [to_user_dto(u) for u in self._users.list_all()]

    def list_by_role(self, role: Role) -> List[UserDTO]:
        return [to_user_dto(u) for u in self._users.list_by_role(role)]

    def list_orphaned_students(self) -> List[UserDTO]:
        """Students that exist but sit in no active group."""
        logger.info("Fetching students without an active enrollment")
        return [
            to_user_dto(s)
            for s in self._users.list_by_role(Role.STUDENT)
            if not self._enrollments.list_by_student(s.user_id, EnrollmentStatus.ACTIVE)
        ]

    def get_user(self, user_id: int) -> UserDTO:
        return to_user_dto(self._access.require_user(user_id))

    def create_user(self, request: CreateUserRequest, *, current_user_id: Optional[int] = None) -> UserDTO:
        email = require_email(request.email)
        full_name = require_non_empty(request.full_name, "Full name")
        require_min_length(request.password, "Password", MIN_PASSWORD_LENGTH)

        if current_user_id is not None:
            current = self._access.require_user(current_user_id)
            if current.role == Role.TEACHER and request.role != Role.STUDENT:
                raise AuthorizationError("Teachers can only create student accounts")
            if current.role == Role.STUDENT:
                raise AuthorizationError("You don't have permission to create users")

        if self._users.get_by_email(email):
            raise ValidationError("Email already exists")

        user_id = self._users.create_user(
            email=email,
            password_hash=generate_password_hash(request.password),
            full_name=full_name,
            phone=optional_text(request.phone),
            role=request.role,
        )
        logger.info("User %s created with role %s", user_id, request.role.value)
        return self.get_user(user_id)

    def update_user(self, user_id: int, request: UpdateUserRequest, *, current_user_id: int) -> UserDTO:
        user = self._access.require_user(user_id)

        if int(current_user_id) == user.user_id:
            # Self-service: only profile basics.
            updated = self._apply_basic_fields(user, request)
        else:
            current = self._access.require_user(current_user_id)
            if current.role == Role.ADMIN:
                updated = self._apply_all_fields(user, request, allow_role=True)
            elif current.role == Role.TEACHER and user.role == Role.STUDENT:
                if not self._access.is_student_of_teacher(current.user_id, user.user_id):
                    raise AuthorizationError("You can only update your own students")
                if request.role is not None and request.role != user.role:
                    raise AuthorizationError("Only admins can change roles")
                updated = self._apply_all_fields(user, request, allow_role=False)
            else:
                raise AuthorizationError("You don't have permission to update this user")

        if updated != user:
            self._users.update(updated)
        logger.info("User %s updated by user %s", user_id, current_user_id)
        return to_user_dto(updated)

    def delete_user(self, user_id: int, *, current_user_id: int) -> None:
        user = self._access.require_user(user_id)
        current = self._access.require_user(current_user_id)

        if current.user_id == user.user_id:
            raise ValidationError("You cannot delete your own account")

        if current.role == Role.ADMIN:
            pass
        elif current.role == Role.TEACHER and user.role == Role.STUDENT:
            if not self._access.is_student_of_teacher(current.user_id, user.user_id):
                raise AuthorizationError("You can only delete your own students")
        else:
            raise AuthorizationError("You don't have permission to delete this user")

        with self._transaction():
            self._cascade_delete(user)
        logger.info("User %s deleted by user %s", user_id, current_user_id)

    def _cascade_delete(self, user: User) -> None:
        user_id = user.user_id

        # Rows where the user is the student
        self._payments.delete_by_student(user_id)
        self._attendance.delete_by_student(user_id)
        self._coins.delete_by_student(user_id)
        self._enrollments.delete_by_student(user_id)

        # Rows the user recorded or owns, whatever their current role
        self._payments.delete_by_teacher(user_id)
        self._attendance.delete_by_marked_by(user_id)
        self._coins.delete_by_teacher(user_id)
        for group in self._groups.list_by_teacher(user_id):
            self._group_service.purge_group(group.group_id)

        if not self._users.delete_by_id(user_id):
            raise ResourceNotFoundError("User", "id", user_id)

    @staticmethod
    def _apply_basic_fields(user: User, request: UpdateUserRequest) -> User:
        changes = {}
        if request.full_name is not None:
            changes["full_name"] = require_non_empty(request.full_name, "Full name")
        if request.phone is not None:
            changes["phone"] = optional_text(request.phone)
        return replace(user, **changes)

    def _apply_all_fields(self, user: User, request: UpdateUserRequest, *, allow_role: bool) -> User:
        updated = self._apply_basic_fields(user, request)
        changes = {}

        if request.email is not None:
            email = require_email(request.email)
            if email != user.email.lower():
                if self._users.get_by_email(email):
                    raise ValidationError("Email already exists")
                changes["email"] = email

        if request.password:
            require_min_length(request.password, "Password", MIN_PASSWORD_LENGTH)
            changes["password_hash"] = generate_password_hash(request.password)

        if allow_role and request.role is not None:
            changes["role"] = request.role

        return replace(updated, **changes)
