"""Project Rules — structural validation of a project's recruiting configuration.

Invariants:
    - project_end > project_start
    - recruitment_start <= recruitment_end when both are set
    - rank(min_proficiency) <= rank(max_proficiency) (unset bounds are open)
    - every limit is a non-negative integer (0 = unlimited)
    - Raises ProjectValidationError naming the offending field; first violation wins

Design Decisions:
    - Runs on the MERGED configuration: partial updates are validated against
      the stored values they do not touch
"""

from collections.abc import Mapping
from datetime import datetime

from teammatch.core.domain_types import Position, Proficiency
from teammatch.core.errors import ProjectValidationError
from teammatch.core.proficiency_scale import rank_lower_bound, rank_upper_bound
from teammatch.core.recruitment_window import is_open_now
from teammatch.core.snapshots import ProjectSnapshot


def validate_project_config(
    project_start: datetime,
    project_end: datetime,
    recruitment_start: datetime | None,
    recruitment_end: datetime | None,
    min_proficiency: Proficiency | str | None,
    max_proficiency: Proficiency | str | None,
    limits: Mapping[Position, int],
) -> None:
    if project_end <= project_start:
        raise ProjectValidationError(
            "project_end must be after project_start", "project_end",
        )
    if (
        recruitment_start is not None
        and recruitment_end is not None
        and recruitment_start > recruitment_end
    ):
        raise ProjectValidationError(
            "recruitment_start must not be after recruitment_end",
            "recruitment_start",
        )
    if rank_lower_bound(min_proficiency) > rank_upper_bound(max_proficiency):
        raise ProjectValidationError(
            "min_proficiency must not exceed max_proficiency", "min_proficiency",
        )
    for position, limit in limits.items():
        if not isinstance(limit, int) or isinstance(limit, bool) or limit < 0:
            raise ProjectValidationError(
                f"limit for {Position(position).value} must be a non-negative integer",
                "limits",
            )


def validate_snapshot(project: ProjectSnapshot) -> None:
    validate_project_config(
        project.project_start, project.project_end,
        project.recruitment_start, project.recruitment_end,
        project.min_proficiency, project.max_proficiency,
        project.limits,
    )


def refreshed_open_flag(project: ProjectSnapshot, now: datetime) -> bool | None:
    """New value for the is_open cache, or None when it is already current."""
    is_open = is_open_now(project, now).open
    return None if is_open == project.is_open else is_open
