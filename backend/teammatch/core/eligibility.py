"""Eligibility Evaluation — may this user apply to this project for these positions?

Invariants:
    - All functions are PURE: no IO, no async, no DB, no side effects
    - Reasons ACCUMULATE (no short-circuit), always in this order:
        1. owner applying to own project
        2. existing application
        3. existing membership
        4. recruitment window closed (window reason verbatim)
        5. one "<POSITION> is full" per requested position without room
        6. proficiency outside [min, max]
    - ok == (reasons is empty)
    - Window is recomputed live from now, never taken from the cached is_open flag

Design Decisions:
    - Accumulate over fail-fast: the caller can surface every blocking condition
      in one round trip
    - Result is a frozen dataclass with to_dict(): routes return it as-is
"""

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from datetime import datetime

from teammatch.core.capacity import full_positions
from teammatch.core.domain_types import Position
from teammatch.core.proficiency_scale import in_range
from teammatch.core.recruitment_window import is_open_now
from teammatch.core.snapshots import (
    ApplicationSnapshot, MemberSnapshot, ProjectSnapshot, UserSnapshot,
)

REASON_OWNER = "owner cannot apply to own project"
REASON_ALREADY_APPLIED = "already applied"
REASON_ALREADY_MEMBER = "already a member"
REASON_PROFICIENCY = "proficiency out of accepted range"


def position_full_reason(position: Position) -> str:
    return f"{position.value} is full"


@dataclass(frozen=True)
class EligibilityResult:
    ok: bool
    reasons: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {"ok": self.ok, "reasons": list(self.reasons)}


def evaluate(
    user: UserSnapshot,
    project: ProjectSnapshot,
    requested_positions: Sequence[Position],
    members: Iterable[MemberSnapshot],
    existing_application: ApplicationSnapshot | None,
    existing_membership: MemberSnapshot | None,
    now: datetime,
) -> EligibilityResult:
    """Collect every reason blocking the application; ok when there are none."""
    members = list(members)
    reasons: list[str] = []

    if project.owner_id == user.id:
        reasons.append(REASON_OWNER)
    if existing_application is not None:
        reasons.append(REASON_ALREADY_APPLIED)
    if existing_membership is not None:
        reasons.append(REASON_ALREADY_MEMBER)

    window = is_open_now(project, now)
    if not window.open:
        reasons.append(window.reason)

    for position in full_positions(project, requested_positions, members):
        reasons.append(position_full_reason(position))

    if not in_range(
        user.proficiency, project.min_proficiency, project.max_proficiency,
    ):
        reasons.append(REASON_PROFICIENCY)

    return EligibilityResult(ok=not reasons, reasons=reasons)
