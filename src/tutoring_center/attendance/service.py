from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date
from typing import Callable, List, Optional

from ..common.datetime_utils import now_local
from ..common.validators import optional_text
from ..core.enums import AttendanceStatus
from ..core.exceptions import ResourceNotFoundError, ValidationError
from ..groups.access import GroupAccess
from ..groups.repository import GroupRepository
from ..users.repository import UserRepository
from .model import (
    AttendanceDTO,
    AttendanceRecord,
    AttendanceSummary,
    MarkAttendanceRequest,
    UpdateAttendanceRequest,
)
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


class AttendanceService:
    def __init__(
        self,
        attendance: AttendanceRepository,
        users: UserRepository,
        groups: GroupRepository,
        access: GroupAccess,
        *,
        today: Callable[[], date] = lambda: now_local().date(),
    ):
        self._attendance = attendance
        self._users = users
        self._groups = groups
        self._access = access
        self._today = today

    def mark_attendance(self, request: MarkAttendanceRequest, *, current_user_id: int) -> AttendanceDTO:
        group = self._access.require_group(request.group_id)
        student = self._access.require_student(request.student_id)
        current = self._access.require_user(current_user_id)
        self._access.ensure_can_manage(current, group, "You can only mark attendance in your own groups")
        self._access.require_active_member(group.group_id, student.user_id)

        lesson_date = request.lesson_date or self._today()
        if self._attendance.get_for_lesson(student_id=student.user_id, group_id=group.group_id, lesson_date=lesson_date):
            raise ValidationError("Attendance already marked for this lesson")

        attendance_id = self._attendance.create(
            student_id=student.user_id,
            group_id=group.group_id,
            marked_by_id=current.user_id,
            lesson_date=lesson_date,
            status=request.status,
            notes=optional_text(request.notes),
        )
        logger.info(
            "Attendance %s marked %s for student %s in group %s on %s",
            attendance_id,
            request.status.value,
            student.user_id,
            group.group_id,
            lesson_date.isoformat(),
        )
        return self._to_dto(self._require_record(attendance_id))

    def update_attendance(
        self, attendance_id: int, request: UpdateAttendanceRequest, *, current_user_id: int
    ) -> AttendanceDTO:
        record = self._require_record(attendance_id)
        group = self._access.require_group(record.group_id)
        current = self._access.require_user(current_user_id)
        self._access.ensure_can_manage(current, group, "You can only update attendance in your own groups")

        changes = {}
        if request.status is not None:
            changes["status"] = request.status
        if request.notes is not None:
            changes["notes"] = optional_text(request.notes)

        updated = replace(record, **changes)
        self._attendance.update(updated)
        logger.info("Attendance %s updated by user %s", attendance_id, current_user_id)
        return self._to_dto(updated)

    def delete_attendance(self, attendance_id: int, *, current_user_id: int) -> None:
        record = self._require_record(attendance_id)
        group = self._access.require_group(record.group_id)
        current = self._access.require_user(current_user_id)
        self._access.ensure_can_manage(current, group, "You can only delete attendance in your own groups")

        self._attendance.delete_by_id(record.attendance_id)
        logger.info("Attendance %s deleted by user %s", attendance_id, current_user_id)

    def list_by_group(self, group_id: int) -> List[AttendanceDTO]:
        self._access.require_group(group_id)
        return [self._to_dto(r) for r in self._attendance.list_by_group(int(group_id))]

    def list_by_student(self, student_id: int, group_id: Optional[int] = None) -> List[AttendanceDTO]:
        return [self._to_dto(r) for r in self._attendance.list_by_student(int(student_id), group_id)]

    def summary(self, student_id: int) -> AttendanceSummary:
        records = self._attendance.list_by_student(int(student_id))
        counts = {status: 0 for status in AttendanceStatus}
        for r in records:
            counts[r.status] += 1

        total = len(records)
        attended = counts[AttendanceStatus.PRESENT] + counts[AttendanceStatus.LATE]
        rate = round(attended * 100.0 / total, 2) if total else 0.0

        return AttendanceSummary(
            student_id=int(student_id),
            total_lessons=total,
            present=counts[AttendanceStatus.PRESENT],
            absent=counts[AttendanceStatus.ABSENT],
            late=counts[AttendanceStatus.LATE],
            excused=counts[AttendanceStatus.EXCUSED],
            attendance_rate=rate,
        )

    def _require_record(self, attendance_id: int) -> AttendanceRecord:
        record = self._attendance.get_by_id(int(attendance_id))
        if not record:
            raise ResourceNotFoundError("Attendance", "id", attendance_id)
        return record

    def _to_dto(self, r: AttendanceRecord) -> AttendanceDTO:
        student = self._users.get_by_id(r.student_id)
        group = self._groups.get_by_id(r.group_id)
        return AttendanceDTO(
            attendance_id=r.attendance_id,
            student_id=r.student_id,
            student_name=student.full_name if student else None,
            group_id=r.group_id,
            group_name=group.name if group else None,
            marked_by_id=r.marked_by_id,
            lesson_date=r.lesson_date,
            status=r.status,
            notes=r.notes,
            created_at=r.created_at,
        )
