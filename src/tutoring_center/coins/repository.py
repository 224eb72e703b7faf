from __future__ import annotations

from typing import Dict, Optional, Protocol, Sequence

from .model import CoinAward


class CoinRepository(Protocol):
    def get_by_id(self, coin_id: int) -> Optional[CoinAward]:
        raise NotImplementedError

    def list_by_student(self, student_id: int, group_id: Optional[int] = None) -> Sequence[CoinAward]:
        raise NotImplementedError

    def list_by_group(self, group_id: int) -> Sequence[CoinAward]:
        raise NotImplementedError

    def totals_by_student(self, group_id: int) -> Dict[int, int]:
        """student_id -> summed coins inside one group."""

        raise NotImplementedError

    def total_for_student(self, student_id: int) -> int:
        raise NotImplementedError

    def count_by_teacher(self, teacher_id: int) -> int:
        raise NotImplementedError

    def create(self, *, student_id: int, teacher_id: int, group_id: int, amount: int, reason: str) -> int:
        raise NotImplementedError

    def delete_by_student(self, student_id: int) -> int:
        raise NotImplementedError

    def delete_by_teacher(self, teacher_id: int) -> int:
        raise NotImplementedError

    def delete_by_group(self, group_id: int) -> int:
        raise NotImplementedError
