"""Capacity Accounting — per-position occupancy versus configured headcount limits.

Invariants:
    - All functions are PURE: operate only on data passed in, no persistence access
    - occupancy() has an entry for every Position, zero when nobody holds it
    - A member holding several roles counts once per role
    - limit 0 means unlimited: has_room is always True for it

Design Decisions:
    - Occupancy recomputed from the member list on every call, never cached on the
      project row: the member list fetched in the same transaction is the truth
"""

from collections.abc import Iterable

from teammatch.core.domain_types import Position
from teammatch.core.snapshots import MemberSnapshot, ProjectSnapshot

UNLIMITED = 0


def occupancy(members: Iterable[MemberSnapshot]) -> dict[Position, int]:
    """Count members per position across every member's role set."""
    counts = {p: 0 for p in Position}
    for member in members:
        for role in set(member.role):
            if role in counts:
                counts[role] += 1
    return counts


def has_room(
    project: ProjectSnapshot,
    position: Position,
    members: Iterable[MemberSnapshot],
) -> bool:
    """True when the position is unlimited or still below its limit."""
    limit = project.limit_for(position)
    if limit == UNLIMITED:
        return True
    return occupancy(members)[position] < limit


def full_positions(
    project: ProjectSnapshot,
    positions: Iterable[Position],
    members: Iterable[MemberSnapshot],
) -> list[Position]:
    """Requested positions that have no remaining capacity, in request order."""
    counts = occupancy(members)
    full = []
    for position in positions:
        limit = project.limit_for(position)
        if limit != UNLIMITED and counts[position] >= limit:
            full.append(position)
    return full


def exceeded_positions(
    project: ProjectSnapshot, members: Iterable[MemberSnapshot],
) -> list[Position]:
    """Positions whose occupancy is strictly above the limit (post-write check)."""
    counts = occupancy(members)
    return [
        p for p in Position
        if project.limit_for(p) != UNLIMITED and counts[p] > project.limit_for(p)
    ]


def remaining_slots(
    project: ProjectSnapshot, members: Iterable[MemberSnapshot],
) -> dict[Position, int | None]:
    """Open seats per position; None for unlimited positions."""
    counts = occupancy(members)
    remaining: dict[Position, int | None] = {}
    for position in Position:
        limit = project.limit_for(position)
        remaining[position] = (
            None if limit == UNLIMITED else max(limit - counts[position], 0)
        )
    return remaining
