from __future__ import annotations

import re
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Optional, Type, TypeVar

from ..core.constants import MAX_AMOUNT
from ..core.exceptions import ValidationError

E = TypeVar("E", bound=Enum)

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
_MAX_AMOUNT = Decimal(MAX_AMOUNT)


def require_non_empty(value: str, field_name: str) -> str:
    if not value or not str(value).strip():
        raise ValidationError(f"{field_name} must not be empty")
    return str(value).strip()


def require_min_length(value: str, field_name: str, min_len: int) -> str:
    if value is None or len(value) < min_len:
        raise ValidationError(f"{field_name} must be at least {min_len} characters")
    return value


def require_email(value: str) -> str:
    email = require_non_empty(value, "Email").lower()
    if not _EMAIL_RE.match(email):
        raise ValidationError("Email is not valid")
    return email


def require_positive_amount(value, field_name: str = "Amount") -> Decimal:
    try:
        amount = Decimal(str(value))
    except (InvalidOperation, TypeError, ValueError):
        raise ValidationError(f"{field_name} is not a number")
    if not amount.is_finite():
        raise ValidationError(f"{field_name} is not a number")
    if amount > _MAX_AMOUNT:
        raise ValidationError(f"{field_name} must not exceed {MAX_AMOUNT}")
    # Sign check runs on the stored (cent) value
    amount = amount.quantize(Decimal("0.01"))
    if amount <= 0:
        raise ValidationError(f"{field_name} must be greater than zero")
    return amount


def require_positive_int(value, field_name: str, *, maximum: Optional[int] = None) -> int:
    if isinstance(value, bool):
        raise ValidationError(f"{field_name} is not a whole number")
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} is not a whole number")
    if number != value and str(number) != str(value).strip():
        raise ValidationError(f"{field_name} is not a whole number")
    if number <= 0:
        raise ValidationError(f"{field_name} must be greater than zero")
    if maximum is not None and number > maximum:
        raise ValidationError(f"{field_name} must not exceed {maximum}")
    return number


def parse_enum(enum_cls: Type[E], value, field_name: str) -> E:
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(str(value).strip().upper())
    except ValueError:
        allowed = ", ".join(m.value for m in enum_cls)
        raise ValidationError(f"{field_name} must be one of: {allowed}")


def optional_text(value) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None
