from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import Role


@dataclass(frozen=True)
class User:
    """Domain entity: an account of any role.

    Plain data object, no database access here.
    """

    user_id: int
    email: str
    password_hash: str
    full_name: str
    phone: Optional[str]
    role: Role
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class UserDTO:
    user_id: int
    email: str
    full_name: str
    phone: Optional[str]
    role: Role
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class CreateUserRequest:
    email: str
    password: str
    full_name: str
    phone: Optional[str] = None
    role: Role = Role.STUDENT


@dataclass(frozen=True)
class UpdateUserRequest:
    """Partial update; None means "leave as is"."""

    full_name: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None
    role: Optional[Role] = None


@dataclass(frozen=True)
class LoginResult:
    """What we store into the Flask session after login."""

    user_id: int
    email: str
    full_name: str
    role: Role


def to_user_dto(user: User) -> UserDTO:
    return UserDTO(
        user_id=user.user_id,
        email=user.email,
        full_name=user.full_name,
        phone=user.phone,
        role=user.role,
        created_at=user.created_at,
    )
