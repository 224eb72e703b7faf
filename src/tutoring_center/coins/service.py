from __future__ import annotations

import logging
from typing import List, Optional

from ..common.validators import require_non_empty, require_positive_int
from ..core.constants import MAX_COINS_PER_AWARD
from ..core.enums import EnrollmentStatus
from ..core.exceptions import AuthorizationError
from ..enrollments.repository import EnrollmentRepository
from ..groups.access import GroupAccess
from ..groups.repository import GroupRepository
from ..users.repository import UserRepository
from .model import (
    AwardCoinsRequest,
    CoinAward,
    CoinDTO,
    CoinsByGroup,
    CoinSummary,
    GroupCoinTotal,
    LeaderboardEntry,
)
from .repository import CoinRepository

logger = logging.getLogger(__name__)


def rank_entries(totals: list[tuple[int, str, int]]) -> List[LeaderboardEntry]:
    """Competition ranking ("1224"): equal totals share a rank, the next rank skips.

    ``totals`` holds (student_id, student_name, total_coins) tuples in any order.
    """
    ordered = sorted(totals, key=lambda t: (-t[2], t[1].lower(), t[0]))
    entries: List[LeaderboardEntry] = []
    rank = 0
    previous: Optional[int] = None
    for position, (student_id, name, total) in enumerate(ordered, start=1):
        if total != previous:
            rank = position
            previous = total
        entries.append(LeaderboardEntry(rank=rank, student_id=student_id, student_name=name, total_coins=total))
    return entries


class CoinService:
    """Use case: coin awards and group leaderboards."""

    def __init__(
        self,
        coins: CoinRepository,
        users: UserRepository,
        groups: GroupRepository,
        enrollments: EnrollmentRepository,
        access: GroupAccess,
        *,
        max_per_award: int = MAX_COINS_PER_AWARD,
    ):
        self._coins = coins
        self._users = users
        self._groups = groups
        self._enrollments = enrollments
        self._access = access
        self._max_per_award = int(max_per_award)

    def award_coins(self, request: AwardCoinsRequest, *, current_user_id: int) -> CoinDTO:
        amount = require_positive_int(request.amount, "Coin amount", maximum=self._max_per_award)
        reason = require_non_empty(request.reason, "Reason")
        group = self._access.require_group(request.group_id)
        student = self._access.require_student(request.student_id)
        current = self._access.require_user(current_user_id)
        self._access.ensure_can_manage(current, group, "You can only award coins in your own groups")
        self._access.require_active_member(group.group_id, student.user_id)

        coin_id = self._coins.create(
            student_id=student.user_id,
            teacher_id=current.user_id,
            group_id=group.group_id,
            amount=amount,
            reason=reason,
        )
        logger.info("Coins %s: %d awarded to student %s in group %s", coin_id, amount, student.user_id, group.group_id)

        return self._to_dto(self._coins.get_by_id(coin_id))

    def list_by_student(self, student_id: int, group_id: Optional[int] = None) -> List[CoinDTO]:
        return [self._to_dto(c) for c in self._coins.list_by_student(int(student_id), group_id)]

    def list_by_group(self, group_id: int) -> List[CoinDTO]:
        self._access.require_group(group_id)
        return [self._to_dto(c) for c in self._coins.list_by_group(int(group_id))]

    def total_for_student(self, student_id: int) -> int:
        return self._coins.total_for_student(int(student_id))

    def grouped_for_student(self, student_id: int) -> List[CoinsByGroup]:
        buckets: dict[int, list[CoinDTO]] = {}
        for award in self._coins.list_by_student(int(student_id)):
            buckets.setdefault(award.group_id, []).append(self._to_dto(award))

        out = [
            CoinsByGroup(
                group_id=group_id,
                group_name=awards[0].group_name,
                total_coins=sum(a.amount for a in awards),
                coins=awards,
            )
            for group_id, awards in buckets.items()
        ]
        out.sort(key=lambda g: (-g.total_coins, g.group_id))
        return out

    def summary(self, student_id: int) -> CoinSummary:
        grouped = self.grouped_for_student(student_id)
        return CoinSummary(
            student_id=int(student_id),
            total_coins=sum(g.total_coins for g in grouped),
            awards_count=sum(len(g.coins) for g in grouped),
            groups=[GroupCoinTotal(g.group_id, g.group_name, g.total_coins) for g in grouped],
        )

    def leaderboard(self, group_id: int) -> List[LeaderboardEntry]:
        group = self._access.require_group(group_id)
        totals = self._coins.totals_by_student(group.group_id)

        rows: list[tuple[int, str, int]] = []
        for enrollment in self._enrollments.list_by_group(group.group_id, EnrollmentStatus.ACTIVE):
            student = self._users.get_by_id(enrollment.student_id)
            if student:
                rows.append((student.user_id, student.full_name, totals.get(student.user_id, 0)))
        return rank_entries(rows)

    def leaderboard_for_student(self, student_id: int, group_id: int) -> List[LeaderboardEntry]:
        group = self._access.require_group(group_id)
        if not self._enrollments.get(group.group_id, int(student_id)):
            raise AuthorizationError("You are not a member of this group")
        return self.leaderboard(group.group_id)

    def _to_dto(self, c: CoinAward) -> CoinDTO:
        student = self._users.get_by_id(c.student_id)
        teacher = self._users.get_by_id(c.teacher_id)
        group = self._groups.get_by_id(c.group_id)
        return CoinDTO(
            coin_id=c.coin_id,
            student_id=c.student_id,
            student_name=student.full_name if student else None,
            teacher_id=c.teacher_id,
            teacher_name=teacher.full_name if teacher else None,
            group_id=c.group_id,
            group_name=group.name if group else None,
            amount=c.amount,
            reason=c.reason,
            awarded_at=c.awarded_at,
        )
