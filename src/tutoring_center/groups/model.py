from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import GroupStatus


@dataclass(frozen=True)
class Group:
    """Domain entity: a class/cohort taught by one teacher."""

    group_id: int
    name: str
    description: Optional[str]
    teacher_id: int
    schedule: Optional[str]
    status: GroupStatus
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class GroupDTO:
    group_id: int
    name: str
    description: Optional[str]
    teacher_id: int
    teacher_name: Optional[str]
    schedule: Optional[str]
    status: GroupStatus
    student_count: int
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class CreateGroupRequest:
    name: str
    teacher_id: int
    description: Optional[str] = None
    schedule: Optional[str] = None


@dataclass(frozen=True)
class UpdateGroupRequest:
    name: Optional[str] = None
    description: Optional[str] = None
    schedule: Optional[str] = None
    status: Optional[GroupStatus] = None
