from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from ..core.enums import AttendanceStatus
from .model import AttendanceRecord


class AttendanceRepository(Protocol):
    def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def get_for_lesson(self, *, student_id: int, group_id: int, lesson_date: date) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def list_by_group(self, group_id: int) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def list_by_student(self, student_id: int, group_id: Optional[int] = None) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def create(
        self,
        *,
        student_id: int,
        group_id: int,
        marked_by_id: int,
        lesson_date: date,
        status: AttendanceStatus,
        notes: Optional[str] = None,
    ) -> int:
        raise NotImplementedError

    def update(self, record: AttendanceRecord) -> bool:
        raise NotImplementedError

    def delete_by_id(self, attendance_id: int) -> bool:
        raise NotImplementedError

    def delete_by_student(self, student_id: int) -> int:
        raise NotImplementedError

    def delete_by_marked_by(self, user_id: int) -> int:
        raise NotImplementedError

    def delete_by_group(self, group_id: int) -> int:
        raise NotImplementedError
