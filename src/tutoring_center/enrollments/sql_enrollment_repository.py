from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from ..core.enums import EnrollmentStatus
from ..database.session import atomic
from ..database.tables import EnrollmentRow
from .model import Enrollment
from .repository import EnrollmentRepository


def _to_enrollment(row: EnrollmentRow) -> Enrollment:
    return Enrollment(
        enrollment_id=int(row.enrollment_id),
        group_id=int(row.group_id),
        student_id=int(row.student_id),
        status=EnrollmentStatus(row.status),
        enrolled_at=row.enrolled_at,
        completed_at=row.completed_at,
    )


class SQLEnrollmentRepository(EnrollmentRepository):
    def get(self, group_id: int, student_id: int) -> Optional[Enrollment]:
        row = EnrollmentRow.query.filter_by(group_id=int(group_id), student_id=int(student_id)).first()
        return _to_enrollment(row) if row else None

    def list_by_student(self, student_id: int, status: Optional[EnrollmentStatus] = None) -> Sequence[Enrollment]:
        query = EnrollmentRow.query.filter_by(student_id=int(student_id))
        if status is not None:
            query = query.filter_by(status=status.value)
        return [_to_enrollment(r) for r in query.order_by(EnrollmentRow.enrolled_at.asc()).all()]

    def list_by_group(self, group_id: int, status: Optional[EnrollmentStatus] = None) -> Sequence[Enrollment]:
        query = EnrollmentRow.query.filter_by(group_id=int(group_id))
        if status is not None:
            query = query.filter_by(status=status.value)
        return [_to_enrollment(r) for r in query.order_by(EnrollmentRow.enrolled_at.asc()).all()]

    def count_by_group(self, group_id: int, status: Optional[EnrollmentStatus] = None) -> int:
        query = EnrollmentRow.query.filter_by(group_id=int(group_id))
        if status is not None:
            query = query.filter_by(status=status.value)
        return int(query.count())

    def create(self, *, group_id: int, student_id: int, enrolled_at: datetime) -> int:
        with atomic() as session:
            row = EnrollmentRow(
                group_id=int(group_id),
                student_id=int(student_id),
                status=EnrollmentStatus.ACTIVE.value,
                enrolled_at=enrolled_at,
            )
            session.add(row)
            session.flush()
            return int(row.enrollment_id)

    def set_status(
        self,
        *,
        enrollment_id: int,
        status: EnrollmentStatus,
        enrolled_at: Optional[datetime] = None,
        completed_at: Optional[datetime] = None,
    ) -> bool:
        with atomic() as session:
            row = session.get(EnrollmentRow, int(enrollment_id))
            if row is None:
                return False
            row.status = status.value
            if enrolled_at is not None:
                row.enrolled_at = enrolled_at
            row.completed_at = completed_at
            return True

    def delete_by_student(self, student_id: int) -> int:
        with atomic():
            return EnrollmentRow.query.filter_by(student_id=int(student_id)).delete()

    def delete_by_group(self, group_id: int) -> int:
        with atomic():
            return EnrollmentRow.query.filter_by(group_id=int(group_id)).delete()
