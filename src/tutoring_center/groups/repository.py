from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import GroupStatus
from .model import Group


class GroupRepository(Protocol):
    def get_by_id(self, group_id: int) -> Optional[Group]:
        raise NotImplementedError

    def list_all(self) -> Sequence[Group]:
        raise NotImplementedError

    def list_by_teacher(self, teacher_id: int) -> Sequence[Group]:
        raise NotImplementedError

    def count_by_status(self, status: Optional[GroupStatus] = None) -> int:
        raise NotImplementedError

    def create_group(
        self,
        *,
        name: str,
        description: Optional[str],
        teacher_id: int,
        schedule: Optional[str],
        status: GroupStatus,
    ) -> int:
        raise NotImplementedError

    def update(self, group: Group) -> bool:
        raise NotImplementedError

    def delete_by_id(self, group_id: int) -> bool:
        raise NotImplementedError
