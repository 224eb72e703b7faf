"""Ownership checks shared by every service that touches a group.

An ADMIN may act on any group. A TEACHER may act only on groups they teach.
Students never manage groups.
"""
from __future__ import annotations

from ..core.enums import EnrollmentStatus, Role
from ..core.exceptions import AuthorizationError, ResourceNotFoundError, ValidationError
from ..enrollments.model import Enrollment
from ..enrollments.repository import EnrollmentRepository
from ..users.model import User
from ..users.repository import UserRepository
from .model import Group
from .repository import GroupRepository


class GroupAccess:
    def __init__(self, users: UserRepository, groups: GroupRepository, enrollments: EnrollmentRepository):
        self._users = users
        self._groups = groups
        self._enrollments = enrollments

    def require_user(self, user_id: int, resource: str = "User") -> User:
        user = self._users.get_by_id(int(user_id))
        if not user:
            raise ResourceNotFoundError(resource, "id", user_id)
        return user

    def require_group(self, group_id: int) -> Group:
        group = self._groups.get_by_id(int(group_id))
        if not group:
            raise ResourceNotFoundError("Group", "id", group_id)
        return group

    def require_student(self, student_id: int) -> User:
        student = self.require_user(student_id, "Student")
        if student.role != Role.STUDENT:
            raise ValidationError("User is not a student")
        return student

    def require_teacher(self, teacher_id: int) -> User:
        teacher = self.require_user(teacher_id, "Teacher")
        if teacher.role != Role.TEACHER:
            raise ValidationError("User is not a teacher")
        return teacher

    def ensure_can_manage(self, actor: User, group: Group, message: str = "You can only manage your own groups") -> None:
        if actor.role == Role.ADMIN:
            return
        if actor.role == Role.TEACHER and group.teacher_id == actor.user_id:
            return
        raise AuthorizationError(message)

    def require_active_member(self, group_id: int, student_id: int) -> Enrollment:
        enrollment = self._enrollments.get(int(group_id), int(student_id))
        if not enrollment or enrollment.status != EnrollmentStatus.ACTIVE:
            raise ValidationError("Student is not enrolled in this group")
        return enrollment

    def is_student_of_teacher(self, teacher_id: int, student_id: int) -> bool:
        # Any enrollment counts, dropped ones included.
        for enrollment in self._enrollments.list_by_student(int(student_id)):
            group = self._groups.get_by_id(enrollment.group_id)
            if group and group.teacher_id == int(teacher_id):
                return True
        return False
