from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Optional, Protocol, Sequence, Tuple

from ..core.enums import PaymentMethod, PaymentStatus
from .model import Payment


class PaymentRepository(Protocol):
    def get_by_id(self, payment_id: int) -> Optional[Payment]:
        raise NotImplementedError

    def list_by_student(self, student_id: int, group_id: Optional[int] = None) -> Sequence[Payment]:
        raise NotImplementedError

    def list_by_teacher(self, teacher_id: int) -> Sequence[Payment]:
        raise NotImplementedError

    def list_by_group(self, group_id: int) -> Sequence[Payment]:
        raise NotImplementedError

    def totals(
        self,
        *,
        teacher_id: Optional[int] = None,
        student_id: Optional[int] = None,
        status: PaymentStatus = PaymentStatus.CONFIRMED,
    ) -> Tuple[int, Decimal]:
        """(count, sum of amount) for the matching payments."""

        raise NotImplementedError

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
        raise NotImplementedError

    def update(self, payment: Payment) -> bool:
        raise NotImplementedError

    def delete_by_id(self, payment_id: int) -> bool:
        raise NotImplementedError

    def delete_by_student(self, student_id: int) -> int:
        raise NotImplementedError

    def delete_by_teacher(self, teacher_id: int) -> int:
        raise NotImplementedError

    def delete_by_group(self, group_id: int) -> int:
        raise NotImplementedError
