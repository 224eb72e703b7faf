from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..core.enums import AttendanceStatus
from ..database.session import atomic
from ..database.tables import AttendanceRow
from ..extensions import db
from .model import AttendanceRecord
from .repository import AttendanceRepository


def _to_record(row: AttendanceRow) -> AttendanceRecord:
    return AttendanceRecord(
        attendance_id=int(row.attendance_id),
        student_id=int(row.student_id),
        group_id=int(row.group_id),
        marked_by_id=int(row.marked_by_id),
        lesson_date=row.lesson_date,
        status=AttendanceStatus(row.status),
        notes=row.notes,
        created_at=row.created_at,
    )


class SQLAttendanceRepository(AttendanceRepository):
    def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        row = db.session.get(AttendanceRow, int(attendance_id))
        return _to_record(row) if row else None

    def get_for_lesson(self, *, student_id: int, group_id: int, lesson_date: date) -> Optional[AttendanceRecord]:
        row = AttendanceRow.query.filter_by(
            student_id=int(student_id), group_id=int(group_id), lesson_date=lesson_date
        ).first()
        return _to_record(row) if row else None

    def list_by_group(self, group_id: int) -> Sequence[AttendanceRecord]:
        rows = (
            AttendanceRow.query.filter_by(group_id=int(group_id))
            .order_by(AttendanceRow.lesson_date.desc(), AttendanceRow.student_id.asc())
            .all()
        )
        return [_to_record(r) for r in rows]

    def list_by_student(self, student_id: int, group_id: Optional[int] = None) -> Sequence[AttendanceRecord]:
        query = AttendanceRow.query.filter_by(student_id=int(student_id))
        if group_id is not None:
            query = query.filter_by(group_id=int(group_id))
        rows = query.order_by(AttendanceRow.lesson_date.desc()).all()
        return [_to_record(r) for r in rows]

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
        with atomic() as session:
            row = AttendanceRow(
                student_id=int(student_id),
                group_id=int(group_id),
                marked_by_id=int(marked_by_id),
                lesson_date=lesson_date,
                status=status.value,
                notes=notes,
            )
            session.add(row)
            session.flush()
            return int(row.attendance_id)

    def update(self, record: AttendanceRecord) -> bool:
        with atomic() as session:
            row = session.get(AttendanceRow, int(record.attendance_id))
            if row is None:
                return False
            row.status = record.status.value
            row.notes = record.notes
            row.marked_by_id = int(record.marked_by_id)
            return True

    def delete_by_id(self, attendance_id: int) -> bool:
        with atomic():
            return AttendanceRow.query.filter_by(attendance_id=int(attendance_id)).delete() > 0

    def delete_by_student(self, student_id: int) -> int:
        with atomic():
            return AttendanceRow.query.filter_by(student_id=int(student_id)).delete()

    def delete_by_marked_by(self, user_id: int) -> int:
        with atomic():
            return AttendanceRow.query.filter_by(marked_by_id=int(user_id)).delete()

    def delete_by_group(self, group_id: int) -> int:
        with atomic():
            return AttendanceRow.query.filter_by(group_id=int(group_id)).delete()
