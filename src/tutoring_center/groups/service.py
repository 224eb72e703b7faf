from __future__ import annotations

import logging
from contextlib import nullcontext
from dataclasses import replace
from datetime import datetime
from typing import Callable, ContextManager, List

from ..attendance.repository import AttendanceRepository
from ..coins.repository import CoinRepository
from ..common.datetime_utils import now_local
from ..common.validators import optional_text, require_non_empty
from ..core.enums import EnrollmentStatus, GroupStatus, Role
from ..core.exceptions import AuthorizationError, ResourceNotFoundError, ValidationError
from ..enrollments.repository import EnrollmentRepository
from ..payments.repository import PaymentRepository
from ..users.model import UserDTO, to_user_dto
from ..users.repository import UserRepository
from .access import GroupAccess
from .model import CreateGroupRequest, Group, GroupDTO, UpdateGroupRequest
from .repository import GroupRepository

logger = logging.getLogger(__name__)


class GroupService:
    """Use cases: groups (classes) and the enrollment of students into them."""

    def __init__(
        self,
        groups: GroupRepository,
        enrollments: EnrollmentRepository,
        users: UserRepository,
        attendance: AttendanceRepository,
        payments: PaymentRepository,
        coins: CoinRepository,
        *,
        access: GroupAccess | None = None,
        transaction: Callable[[], ContextManager] = nullcontext,
        clock: Callable[[], datetime] = now_local,
    ):
        self._groups = groups
        self._enrollments = enrollments
        self._users = users
        self._attendance = attendance
        self._payments = payments
        self._coins = coins
        self._access = access or GroupAccess(users, groups, enrollments)
        self._transaction = transaction
        self._clock = clock

    def create_group(self, request: CreateGroupRequest, *, current_user_id: int) -> GroupDTO:
        name = require_non_empty(request.name, "Group name")
        teacher = self._access.require_teacher(request.teacher_id)

        current = self._access.require_user(current_user_id)
        if current.role == Role.STUDENT:
            raise AuthorizationError("Students cannot create groups")
        if current.role == Role.TEACHER and current.user_id != teacher.user_id:
            raise AuthorizationError("Teachers can only create groups for themselves")

        group_id = self._groups.create_group(
            name=name,
            description=optional_text(request.description),
            teacher_id=teacher.user_id,
            schedule=optional_text(request.schedule),
            status=GroupStatus.ACTIVE,
        )
        logger.info("Group %s created for teacher %s by user %s", group_id, teacher.user_id, current_user_id)
        return self.get_group(group_id)

    def update_group(self, group_id: int, request: UpdateGroupRequest, *, current_user_id: int) -> GroupDTO:
        group = self._access.require_group(group_id)
        current = self._access.require_user(current_user_id)
        self._access.ensure_can_manage(current, group, "You can only update your own groups")

        changes = {}
        if request.name is not None:
            changes["name"] = require_non_empty(request.name, "Group name")
        if request.description is not None:
            changes["description"] = optional_text(request.description)
        if request.schedule is not None:
            changes["schedule"] = optional_text(request.schedule)
        if request.status is not None:
            changes["status"] = request.status

        if changes:
            self._groups.update(replace(group, **changes))
            logger.info("Group %s updated by user %s (%s)", group_id, current_user_id, ", ".join(sorted(changes)))
        return self.get_group(group_id)

    def delete_group(self, group_id: int, *, current_user_id: int) -> None:
        group = self._access.require_group(group_id)
        current = self._access.require_user(current_user_id)
        self._access.ensure_can_manage(current, group, "You can only delete your own groups")

        with self._transaction():
            self.purge_group(group.group_id)
        logger.info("Group %s deleted by user %s", group_id, current_user_id)

    def purge_group(self, group_id: int) -> None:
        """Hard delete a group and every row hanging off it. No permission check."""
        self._attendance.delete_by_group(group_id)
        self._payments.delete_by_group(group_id)
        self._coins.delete_by_group(group_id)
        self._enrollments.delete_by_group(group_id)
        self._groups.delete_by_id(group_id)

    def enroll_student(self, group_id: int, student_id: int, *, current_user_id: int) -> None:
        logger.info("Enrolling student %s in group %s", student_id, group_id)

        group = self._access.require_group(group_id)
        student = self._access.require_student(student_id)
        current = self._access.require_user(current_user_id)
        self._access.ensure_can_manage(current, group, "You can only enroll students in your own groups")

        existing = self._enrollments.get(group.group_id, student.user_id)
        if existing and existing.status == EnrollmentStatus.ACTIVE:
            raise ValidationError("Student is already enrolled in this group")

        now = self._clock()
        if existing:
            # Re-enrolling a dropped student reuses the row (unique per group/student).
            self._enrollments.set_status(
                enrollment_id=existing.enrollment_id,
                status=EnrollmentStatus.ACTIVE,
                enrolled_at=now,
                completed_at=None,
            )
        else:
            self._enrollments.create(group_id=group.group_id, student_id=student.user_id, enrolled_at=now)
        logger.info("Student %s enrolled in group %s", student_id, group_id)

    def remove_student(self, group_id: int, student_id: int, *, current_user_id: int) -> None:
        group = self._access.require_group(group_id)
        current = self._access.require_user(current_user_id)
        self._access.ensure_can_manage(current, group, "You can only remove students from your own groups")

        enrollment = self._enrollments.get(group.group_id, int(student_id))
        if not enrollment or enrollment.status != EnrollmentStatus.ACTIVE:
            raise ResourceNotFoundError("Enrollment", "groupId-studentId", f"{group_id}-{student_id}")

        self._enrollments.set_status(
            enrollment_id=enrollment.enrollment_id,
            status=EnrollmentStatus.DROPPED,
            completed_at=self._clock(),
        )
        logger.info("Student %s removed from group %s", student_id, group_id)

    def list_groups(self) -> List[GroupDTO]:
        return [self._to_dto(g) for g in self._groups.list_all()]

    def get_group(self, group_id: int) -> GroupDTO:
        return self._to_dto(self._access.require_group(group_id))

    def get_managed_group(self, group_id: int, *, current_user_id: int) -> GroupDTO:
        group = self._access.require_group(group_id)
        current = self._access.require_user(current_user_id)
        self._access.ensure_can_manage(current, group, "You can only view your own groups")
        return self._to_dto(group)

    def list_groups_by_teacher(self, teacher_id: int) -> List[GroupDTO]:
        return [self._to_dto(g) for g in self._groups.list_by_teacher(int(teacher_id))]

    def list_groups_by_student(self, student_id: int) -> List[GroupDTO]:
        out: List[GroupDTO] = []
        for enrollment in self._enrollments.list_by_student(int(student_id), EnrollmentStatus.ACTIVE):
            group = self._groups.get_by_id(enrollment.group_id)
            if group:
                out.append(self._to_dto(group))
        return out

    def list_group_students(self, group_id: int) -> List[UserDTO]:
        self._access.require_group(group_id)
        out: List[UserDTO] = []
        for enrollment in self._enrollments.list_by_group(int(group_id), EnrollmentStatus.ACTIVE):
            student = self._users.get_by_id(enrollment.student_id)
            if student:
                out.append(to_user_dto(student))
        return out

    def list_teacher_students(self, teacher_id: int) -> List[UserDTO]:
        """Distinct active students across every group of the teacher."""
        seen: dict[int, UserDTO] = {}
        for group in self._groups.list_by_teacher(int(teacher_id)):
            for student in self.list_group_students(group.group_id):
                seen.setdefault(student.user_id, student)
        return sorted(seen.values(), key=lambda s: (s.full_name.lower(), s.user_id))

    def get_student_for_teacher(self, student_id: int, *, teacher_id: int) -> UserDTO:
        student = self._access.require_student(student_id)
        if not self._access.is_student_of_teacher(int(teacher_id), student.user_id):
            raise AuthorizationError("You can only view your own students")
        return to_user_dto(student)

    def _to_dto(self, group: Group) -> GroupDTO:
        teacher = self._users.get_by_id(group.teacher_id)
        return GroupDTO(
            group_id=group.group_id,
            name=group.name,
            description=group.description,
            teacher_id=group.teacher_id,
            teacher_name=teacher.full_name if teacher else None,
            schedule=group.schedule,
            status=group.status,
            student_count=self._enrollments.count_by_group(group.group_id, EnrollmentStatus.ACTIVE),
            created_at=group.created_at,
        )
