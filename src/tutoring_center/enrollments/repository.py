from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import EnrollmentStatus
from .model import Enrollment


class EnrollmentRepository(Protocol):
    def get(self, group_id: int, student_id: int) -> Optional[Enrollment]:
        raise NotImplementedError

    def list_by_student(self, student_id: int, status: Optional[EnrollmentStatus] = None) -> Sequence[Enrollment]:
        raise NotImplementedError

    def list_by_group(self, group_id: int, status: Optional[EnrollmentStatus] = None) -> Sequence[Enrollment]:
        raise NotImplementedError

    def count_by_group(self, group_id: int, status: Optional[EnrollmentStatus] = None) -> int:
        raise NotImplementedError

    def create(self, *, group_id: int, student_id: int, enrolled_at: datetime) -> int:
        raise NotImplementedError

    def set_status(
        self,
        *,
        enrollment_id: int,
        status: EnrollmentStatus,
        enrolled_at: Optional[datetime] = None,
        completed_at: Optional[datetime] = None,
    ) -> bool:
        raise NotImplementedError

    def delete_by_student(self, student_id: int) -> int:
        raise NotImplementedError

    def delete_by_group(self, group_id: int) -> int:
        raise NotImplementedError
