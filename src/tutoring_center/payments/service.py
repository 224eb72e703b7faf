from __future__ import annotations

import logging
from dataclasses import replace
from datetime import datetime
from typing import Callable, List, Optional

from ..common.datetime_utils import now_local
from ..common.validators import optional_text, require_positive_amount
from ..core.enums import PaymentStatus, Role
from ..core.exceptions import AuthorizationError, ResourceNotFoundError
from ..groups.access import GroupAccess
from ..groups.repository import GroupRepository
from ..users.repository import UserRepository
from .model import CreatePaymentRequest, Payment, PaymentDTO, PaymentStats, UpdatePaymentRequest
from .repository import PaymentRepository

logger = logging.getLogger(__name__)


class PaymentService:
    """Use case: record student payments. Teacher-recorded payments need no approval."""

    def __init__(
        self,
        payments: PaymentRepository,
        users: UserRepository,
        groups: GroupRepository,
        access: GroupAccess,
        *,
        clock: Callable[[], datetime] = now_local,
    ):
        self._payments = payments
        self._users = users
        self._groups = groups
        self._access = access
        self._clock = clock

    def create_payment(self, request: CreatePaymentRequest, *, current_user_id: int) -> PaymentDTO:
        amount = require_positive_amount(request.amount)
        group = self._access.require_group(request.group_id)
        student = self._access.require_student(request.student_id)
        current = self._access.require_user(current_user_id)
        self._access.ensure_can_manage(current, group, "You can only record payments for your own groups")
        self._access.require_active_member(group.group_id, student.user_id)

        payment_id = self._payments.create(
            student_id=student.user_id,
            teacher_id=group.teacher_id,
            group_id=group.group_id,
            amount=amount,
            payment_date=request.payment_date or self._clock(),
            method=request.method,
            status=PaymentStatus.CONFIRMED,
            notes=optional_text(request.notes),
        )
        logger.info(
            "Payment %s of %s recorded for student %s in group %s by user %s",
            payment_id,
            amount,
            student.user_id,
            group.group_id,
            current_user_id,
        )
        return self._to_dto(self._require_payment(payment_id))

    def update_payment(self, payment_id: int, request: UpdatePaymentRequest, *, current_user_id: int) -> PaymentDTO:
        payment = self._require_payment(payment_id)
        current = self._access.require_user(current_user_id)
        if current.role != Role.ADMIN and not (
            current.role == Role.TEACHER and payment.teacher_id == current.user_id
        ):
            raise AuthorizationError("You can only update payments you recorded")

        changes = {}
        if request.amount is not None:
            changes["amount"] = require_positive_amount(request.amount)
        if request.payment_date is not None:
            changes["payment_date"] = request.payment_date
        if request.method is not None:
            changes["method"] = request.method
        if request.notes is not None:
            changes["notes"] = optional_text(request.notes)

        updated = replace(payment, **changes)
        if changes:
            self._payments.update(updated)
            logger.info("Payment %s updated by user %s (%s)", payment_id, current_user_id, ", ".join(sorted(changes)))
        return self._to_dto(updated)

    def delete_payment(self, payment_id: int, *, current_user_id: int) -> None:
        payment = self._require_payment(payment_id)
        current = self._access.require_user(current_user_id)
        if current.role != Role.ADMIN:
            raise AuthorizationError("Only admins can delete payments")

        self._payments.delete_by_id(payment.payment_id)
        logger.info("Payment %s deleted by user %s", payment_id, current_user_id)

    def list_by_student(self, student_id: int, group_id: Optional[int] = None) -> List[PaymentDTO]:
        return [self._to_dto(p) for p in self._payments.list_by_student(int(student_id), group_id)]

    def list_by_teacher(self, teacher_id: int) -> List[PaymentDTO]:
        return [self._to_dto(p) for p in self._payments.list_by_teacher(int(teacher_id))]

    def list_by_group(self, group_id: int) -> List[PaymentDTO]:
        self._access.require_group(group_id)
        return [self._to_dto(p) for p in self._payments.list_by_group(int(group_id))]

    def stats(self, teacher_id: Optional[int] = None) -> PaymentStats:
        count, total = self._payments.totals(teacher_id=teacher_id)
        return PaymentStats(total_payments=count, total_amount=total)

    def total_paid_by_student(self, student_id: int) -> PaymentStats:
        count, total = self._payments.totals(student_id=int(student_id))
        return PaymentStats(total_payments=count, total_amount=total)

    def _require_payment(self, payment_id: int) -> Payment:
        payment = self._payments.get_by_id(int(payment_id))
        if not payment:
            raise ResourceNotFoundError("Payment", "id", payment_id)
        return payment

    def _to_dto(self, p: Payment) -> PaymentDTO:
        student = self._users.get_by_id(p.student_id)
        group = self._groups.get_by_id(p.group_id)
        return PaymentDTO(
            payment_id=p.payment_id,
            student_id=p.student_id,
            student_name=student.full_name if student else None,
            teacher_id=p.teacher_id,
            group_id=p.group_id,
            group_name=group.name if group else None,
            amount=p.amount,
            payment_date=p.payment_date,
            method=p.method,
            status=p.status,
            notes=p.notes,
            created_at=p.created_at,
        )
