from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import GroupStatus
from ..database.session import atomic
from ..database.tables import GroupRow
from ..extensions import db
from .model import Group
from .repository import GroupRepository


def _to_group(row: GroupRow) -> Group:
    return Group(
        group_id=int(row.group_id),
        name=row.name,
        description=row.description,
        teacher_id=int(row.teacher_id),
        schedule=row.schedule,
        status=GroupStatus(row.status),
        created_at=row.created_at,
    )


class SQLGroupRepository(GroupRepository):
    def get_by_id(self, group_id: int) -> Optional[Group]:
        row = db.session.get(GroupRow, int(group_id))
        return _to_group(row) if row else None

    def list_all(self) -> Sequence[Group]:
        return [_to_group(r) for r in GroupRow.query.order_by(GroupRow.group_id.asc()).all()]

    def list_by_teacher(self, teacher_id: int) -> Sequence[Group]:
        rows = GroupRow.query.filter_by(teacher_id=int(teacher_id)).order_by(GroupRow.group_id.asc()).all()
        return [_to_group(r) for r in rows]

    def count_by_status(self, status: Optional[GroupStatus] = None) -> int:
        query = GroupRow.query
        if status is not None:
            query = query.filter_by(status=status.value)
        return int(query.count())

    def create_group(
        self,
        *,
        name: str,
        description: Optional[str],
        teacher_id: int,
        schedule: Optional[str],
        status: GroupStatus,
    ) -> int:
        with atomic() as session:
            row = GroupRow(
                name=name,
                description=description,
                teacher_id=int(teacher_id),
                schedule=schedule,
                status=status.value,
            )
            session.add(row)
            session.flush()
            return int(row.group_id)

    def update(self, group: Group) -> bool:
        with atomic() as session:
            row = session.get(GroupRow, int(group.group_id))
            if row is None:
                return False
            row.name = group.name
            row.description = group.description
            row.schedule = group.schedule
            row.status = group.status.value
            return True

    def delete_by_id(self, group_id: int) -> bool:
        with atomic():
            return GroupRow.query.filter_by(group_id=int(group_id)).delete() > 0
