from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import Role
from ..database.session import atomic
from ..database.tables import UserRow
from ..extensions import db
from .model import User
from .repository import UserRepository


def _to_user(row: UserRow) -> User:
    return User(
        user_id=int(row.user_id),
        email=row.email,
        password_hash=row.password_hash,
        full_name=row.full_name,
        phone=row.phone,
        role=Role(row.role),
        created_at=row.created_at,
    )


class SQLUserRepository(UserRepository):
    def get_by_id(self, user_id: int) -> Optional[User]:
        row = db.session.get(UserRow, int(user_id))
        return _to_user(row) if row else None

    def get_by_email(self, email: str) -> Optional[User]:
        row = UserRow.query.filter(db.func.lower(UserRow.email) == email.lower()).first()
        return _to_user(row) if row else None

    def list_all(self) -> Sequence[User]:
        return [_to_user(r) for r in UserRow.query.order_by(UserRow.user_id.asc()).all()]

    def list_by_role(self, role: Role) -> Sequence[User]:
        rows = UserRow.query.filter_by(role=role.value).order_by(UserRow.full_name.asc()).all()
        return [_to_user(r) for r in rows]

    def list_recent(self, limit: int) -> Sequence[User]:
        rows = (
            UserRow.query.order_by(UserRow.created_at.desc(), UserRow.user_id.desc())
            .limit(int(limit))
            .all()
        )
        return [_to_user(r) for r in rows]

    def count_by_role(self, role: Optional[Role] = None) -> int:
        query = UserRow.query
        if role is not None:
            query = query.filter_by(role=role.value)
        return int(query.count())

    def create_user(
        self,
        *,
        email: str,
        password_hash: str,
        full_name: str,
        phone: Optional[str],
        role: Role,
    ) -> int:
        with atomic() as session:
            row = UserRow(
                email=email,
                password_hash=password_hash,
                full_name=full_name,
                phone=phone,
                role=role.value,
            )
            session.add(row)
            session.flush()
            return int(row.user_id)

    def update(self, user: User) -> bool:
        with atomic() as session:
            row = session.get(UserRow, int(user.user_id))
            if row is None:
                return False
            row.email = user.email
            row.password_hash = user.password_hash
            row.full_name = user.full_name
            row.phone = user.phone
            row.role = user.role.value
            return True

    def delete_by_id(self, user_id: int) -> bool:
        with atomic():
            return UserRow.query.filter_by(user_id=int(user_id)).delete() > 0
