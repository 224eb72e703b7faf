from __future__ import annotations

from typing import Dict, Optional, Sequence

from sqlalchemy import func

from ..database.session import atomic
from ..database.tables import CoinRow
from ..extensions import db
from .model import CoinAward
from .repository import CoinRepository


def _to_award(row: CoinRow) -> CoinAward:
    return CoinAward(
        coin_id=int(row.coin_id),
        student_id=int(row.student_id),
        teacher_id=int(row.teacher_id),
        group_id=int(row.group_id),
        amount=int(row.amount),
        reason=row.reason,
        awarded_at=row.awarded_at,
    )


class SQLCoinRepository(CoinRepository):
    def get_by_id(self, coin_id: int) -> Optional[CoinAward]:
        row = db.session.get(CoinRow, int(coin_id))
        return _to_award(row) if row else None

    def list_by_student(self, student_id: int, group_id: Optional[int] = None) -> Sequence[CoinAward]:
        query = CoinRow.query.filter_by(student_id=int(student_id))
        if group_id is not None:
            query = query.filter_by(group_id=int(group_id))
        return [_to_award(r) for r in query.order_by(CoinRow.awarded_at.desc(), CoinRow.coin_id.desc()).all()]

    def list_by_group(self, group_id: int) -> Sequence[CoinAward]:
        rows = (
            CoinRow.query.filter_by(group_id=int(group_id))
            .order_by(CoinRow.awarded_at.desc(), CoinRow.coin_id.desc())
            .all()
        )
        return [_to_award(r) for r in rows]

    def totals_by_student(self, group_id: int) -> Dict[int, int]:
        rows = (
            db.session.query(CoinRow.student_id, func.sum(CoinRow.amount))
            .filter(CoinRow.group_id == int(group_id))
            .group_by(CoinRow.student_id)
            .all()
        )
        return {int(student_id): int(total or 0) for student_id, total in rows}

    def total_for_student(self, student_id: int) -> int:
        total = db.session.query(func.sum(CoinRow.amount)).filter(CoinRow.student_id == int(student_id)).scalar()
        return int(total or 0)

    def count_by_teacher(self, teacher_id: int) -> int:
        return int(CoinRow.query.filter_by(teacher_id=int(teacher_id)).count())

    def create(self, *, student_id: int, teacher_id: int, group_id: int, amount: int, reason: str) -> int:
        with atomic() as session:
            row = CoinRow(
                student_id=int(student_id),
                teacher_id=int(teacher_id),
                group_id=int(group_id),
                amount=int(amount),
                reason=reason,
            )
            session.add(row)
            session.flush()
            return int(row.coin_id)

    def delete_by_student(self, student_id: int) -> int:
        with atomic():
            return CoinRow.query.filter_by(student_id=int(student_id)).delete()

    def delete_by_teacher(self, teacher_id: int) -> int:
        with atomic():
            return CoinRow.query.filter_by(teacher_id=int(teacher_id)).delete()

    def delete_by_group(self, group_id: int) -> int:
        with atomic():
            return CoinRow.query.filter_by(group_id=int(group_id)).delete()
