"""Snapshots — plain immutable views of persisted rows handed to the pure core.

Invariants:
    - Frozen dataclasses: the core can read but never mutate caller data
    - All datetimes are timezone-aware UTC instants
    - ProjectSnapshot.limits has an entry for every Position (0 = unlimited)

Design Decisions:
    - Snapshots over ORM objects: eligibility never triggers a lazy query
      (ADR: callers own fetch/assemble, core owns decisions)
    - Built by infrastructure/repositories.py from ORM rows, and directly in tests
"""

from dataclasses import dataclass, field
from datetime import datetime

from teammatch.core.domain_types import (
    ApplicationStatus, Difficulty, Position, Proficiency, ProjectId, UserId,
)


def _no_limits() -> dict[Position, int]:
    return {p: 0 for p in Position}


@dataclass(frozen=True)
class ProjectSnapshot:
    """Project configuration as consumed by window, capacity and eligibility rules."""
    id: ProjectId
    owner_id: UserId
    project_start: datetime
    project_end: datetime
    name: str = ""
    description: str = ""
    difficulty: Difficulty = Difficulty.UNKNOWN
    recruitment_start: datetime | None = None
    recruitment_end: datetime | None = None
    limits: dict[Position, int] = field(default_factory=_no_limits)
    min_proficiency: Proficiency | None = None
    max_proficiency: Proficiency | None = None
    is_open: bool = True

    def limit_for(self, position: Position) -> int:
        return self.limits.get(position, 0)


@dataclass(frozen=True)
class UserSnapshot:
    """Read-only user profile fields the matching rules depend on."""
    id: UserId
    proficiency: Proficiency | str | None = Proficiency.UNKNOWN
    positions: tuple[Position, ...] = ()


@dataclass(frozen=True)
class MemberSnapshot:
    user_id: UserId
    project_id: ProjectId
    role: tuple[Position, ...]
    joined_at: datetime | None = None


@dataclass(frozen=True)
class ApplicationSnapshot:
    user_id: UserId
    project_id: ProjectId
    applied_position: tuple[Position, ...]
    status: ApplicationStatus = ApplicationStatus.PENDING
    cover_letter: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
