from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional


@dataclass(frozen=True)
class CoinAward:
    """Domain entity: coins a teacher gave a student within a group."""

    coin_id: int
    student_id: int
    teacher_id: int
    group_id: int
    amount: int
    reason: str
    awarded_at: datetime


@dataclass(frozen=True)
class CoinDTO:
    coin_id: int
    student_id: int
    student_name: Optional[str]
    teacher_id: int
    teacher_name: Optional[str]
    group_id: int
    group_name: Optional[str]
    amount: int
    reason: str
    awarded_at: datetime


@dataclass(frozen=True)
class AwardCoinsRequest:
    student_id: int
    group_id: int
    amount: int
    reason: str


@dataclass(frozen=True)
class CoinsByGroup:
    group_id: int
    group_name: Optional[str]
    total_coins: int
    coins: List[CoinDTO] = field(default_factory=list)


@dataclass(frozen=True)
class GroupCoinTotal:
    group_id: int
    group_name: Optional[str]
    total_coins: int


@dataclass(frozen=True)
class CoinSummary:
    student_id: int
    total_coins: int
    awards_count: int
    groups: List[GroupCoinTotal] = field(default_factory=list)


@dataclass(frozen=True)
class LeaderboardEntry:
    rank: int
    student_id: int
    student_name: str
    total_coins: int
