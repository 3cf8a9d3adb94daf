"""Recruitment Window — decides whether a project is open for applications at an instant.

Invariants:
    - Pure function of (project, now): same inputs, same WindowStatus
    - Rules evaluated in order, first failing rule wins:
        1. now < recruitment_start  -> "recruitment not yet started"
        2. now > recruitment_end    -> "recruitment period ended"
        3. now >= project_start     -> "project already started"
    - Capacity and proficiency are NOT considered here
    - The persisted is_open flag is never read: it is a cache this function refreshes

Design Decisions:
    - Boundaries inclusive for the recruitment window, exclusive for project start
    - now must be timezone-aware; naive datetimes are rejected rather than guessed
"""

from dataclasses import dataclass
from datetime import datetime

from teammatch.core.snapshots import ProjectSnapshot

REASON_NOT_STARTED = "recruitment not yet started"
REASON_ENDED = "recruitment period ended"
REASON_PROJECT_STARTED = "project already started"


@dataclass(frozen=True)
class WindowStatus:
    open: bool
    reason: str | None = None


def _require_aware(value: datetime, name: str) -> None:
    if value.tzinfo is None or value.utcoffset() is None:
        raise ValueError(f"{name} must be timezone-aware, got naive datetime")


def is_open_now(project: ProjectSnapshot, now: datetime) -> WindowStatus:
    """Evaluate the recruitment window for project at now."""
    _require_aware(now, "now")
    if project.recruitment_start is not None and now < project.recruitment_start:
        return WindowStatus(False, REASON_NOT_STARTED)
    if project.recruitment_end is not None and now > project.recruitment_end:
        return WindowStatus(False, REASON_ENDED)
    if now >= project.project_start:
        return WindowStatus(False, REASON_PROJECT_STARTED)
    return WindowStatus(True)
