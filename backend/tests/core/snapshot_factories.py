"""Snapshot builders shared by the pure core tests."""

from datetime import datetime, timedelta, timezone
from uuid import uuid4

from teammatch.core.domain_types import (
    ApplicationStatus, Position, Proficiency, ProjectId, UserId,
)
from teammatch.core.snapshots import (
    ApplicationSnapshot, MemberSnapshot, ProjectSnapshot, UserSnapshot,
)

NOW = datetime(2026, 3, 10, 12, 0, tzinfo=timezone.utc)


def new_user_id() -> UserId:
    return UserId(uuid4())


def make_project(**overrides) -> ProjectSnapshot:
    """Open project: recruiting around NOW, starting in 30 days, no limits."""
    limits = {p: 0 for p in Position}
    limits.update(overrides.pop("limits", {}))
    values = dict(
        id=ProjectId(uuid4()),
        owner_id=new_user_id(),
        name="Matching service",
        recruitment_start=NOW - timedelta(days=5),
        recruitment_end=NOW + timedelta(days=5),
        project_start=NOW + timedelta(days=30),
        project_end=NOW + timedelta(days=120),
        limits=limits,
    )
    values.update(overrides)
    return ProjectSnapshot(**values)


def make_user(
    proficiency=Proficiency.GOLD, positions=(Position.BACKEND,), user_id=None,
) -> UserSnapshot:
    return UserSnapshot(
        id=user_id or new_user_id(),
        proficiency=proficiency,
        positions=tuple(positions),
    )


def make_member(project: ProjectSnapshot, *roles: Position, user_id=None) -> MemberSnapshot:
    return MemberSnapshot(
        user_id=user_id or new_user_id(), project_id=project.id, role=tuple(roles),
    )


def make_application(
    project: ProjectSnapshot,
    *positions: Position,
    user_id=None,
    status: ApplicationStatus = ApplicationStatus.PENDING,
) -> ApplicationSnapshot:
    return ApplicationSnapshot(
        user_id=user_id or new_user_id(),
        project_id=project.id,
        applied_position=tuple(positions or (Position.BACKEND,)),
        status=status,
    )
