from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Optional, Sequence, Tuple

from sqlalchemy import func

from ..core.enums import PaymentMethod, PaymentStatus
from ..database.session import atomic
from ..database.tables import PaymentRow
from ..extensions import db
from .model import Payment
from .repository import PaymentRepository


def _to_payment(row: PaymentRow) -> Payment:
    return Payment(
        payment_id=int(row.payment_id),
        student_id=int(row.student_id),
        teacher_id=int(row.teacher_id),
        group_id=int(row.group_id),
        amount=Decimal(row.amount).quantize(Decimal("0.01")),
        payment_date=row.payment_date,
        method=PaymentMethod(row.method),
        status=PaymentStatus(row.status),
        notes=row.notes,
        created_at=row.created_at,
    )


class SQLPaymentRepository(PaymentRepository):
    def get_by_id(self, payment_id: int) -> Optional[Payment]:
        row = db.session.get(PaymentRow, int(payment_id))
        return _to_payment(row) if row else None

    def list_by_student(self, student_id: int, group_id: Optional[int] = None) -> Sequence[Payment]:
        query = PaymentRow.query.filter_by(student_id=int(student_id))
        if group_id is not None:
            query = query.filter_by(group_id=int(group_id))
        return [_to_payment(r) for r in query.order_by(PaymentRow.payment_date.desc()).all()]

    def list_by_teacher(self, teacher_id: int) -> Sequence[Payment]:
        rows = PaymentRow.query.filter_by(teacher_id=int(teacher_id)).order_by(PaymentRow.payment_date.desc()).all()
        return [_to_payment(r) for r in rows]

    def list_by_group(self, group_id: int) -> Sequence[Payment]:
        rows = PaymentRow.query.filter_by(group_id=int(group_id)).order_by(PaymentRow.payment_date.desc()).all()
        return [_to_payment(r) for r in rows]

    def totals(
        self,
        *,
        teacher_id: Optional[int] = None,
        student_id: Optional[int] = None,
        status: PaymentStatus = PaymentStatus.CONFIRMED,
    ) -> Tuple[int, Decimal]:
        query = db.session.query(func.count(PaymentRow.payment_id), func.sum(PaymentRow.amount)).filter(
            PaymentRow.status == status.value
        )
        if teacher_id is not None:
            query = query.filter(PaymentRow.teacher_id == int(teacher_id))
        if student_id is not None:
            query = query.filter(PaymentRow.student_id == int(student_id))
        count, total = query.one()
        return int(count or 0), Decimal(total or 0).quantize(Decimal("0.01"))

    def create(
        self,
        *,
        student_id: int,
        teacher_id: int,
        group_id: int,
        amount: Decimal,
        payment_date: datetime,
        method: PaymentMethod,
        status: PaymentStatus,
        notes: Optional[str] = None,
    ) -> int:
        with atomic() as session:
            row = PaymentRow(
                student_id=int(student_id),
                teacher_id=int(teacher_id),
                group_id=int(group_id),
                amount=amount,
                payment_date=payment_date,
                method=method.value,
                status=status.value,
                notes=notes,
            )
            session.add(row)
            session.flush()
            return int(row.payment_id)

    def update(self, payment: Payment) -> bool:
        with atomic() as session:
            row = session.get(PaymentRow, int(payment.payment_id))
            if row is None:
                return False
            row.amount = payment.amount
            row.payment_date = payment.payment_date
            row.method = payment.method.value
            row.status = payment.status.value
            row.notes = payment.notes
            return True

    def delete_by_id(self, payment_id: int) -> bool:
        with atomic():
            return PaymentRow.query.filter_by(payment_id=int(payment_id)).delete() > 0

    def delete_by_student(self, student_id: int) -> int:
        with atomic():
            return PaymentRow.query.filter_by(student_id=int(student_id)).delete()

    def delete_by_teacher(self, teacher_id: int) -> int:
        with atomic():
            return PaymentRow.query.filter_by(teacher_id=int(teacher_id)).delete()

    def delete_by_group(self, group_id: int) -> int:
        with atomic():
            return PaymentRow.query.filter_by(group_id=int(group_id)).delete()
