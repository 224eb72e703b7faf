from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Optional

from ..core.enums import PaymentMethod, PaymentStatus


@dataclass(frozen=True)
class Payment:
    """Domain entity: money received from a student for a group."""

    payment_id: int
    student_id: int
    teacher_id: int
    group_id: int
    amount: Decimal
    payment_date: datetime
    method: PaymentMethod
    status: PaymentStatus
    notes: Optional[str] = None
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class PaymentDTO:
    payment_id: int
    student_id: int
    student_name: Optional[str]
    teacher_id: int
    group_id: int
    group_name: Optional[str]
    amount: Decimal
    payment_date: datetime
    method: PaymentMethod
    status: PaymentStatus
    notes: Optional[str] = None
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class CreatePaymentRequest:
    student_id: int
    group_id: int
    amount: Decimal
    method: PaymentMethod = PaymentMethod.CASH
    payment_date: Optional[datetime] = None
    notes: Optional[str] = None


@dataclass(frozen=True)
class UpdatePaymentRequest:
    amount: Optional[Decimal] = None
    payment_date: Optional[datetime] = None
    method: Optional[PaymentMethod] = None
    notes: Optional[str] = None


@dataclass(frozen=True)
class PaymentStats:
    total_payments: int
    total_amount: Decimal
