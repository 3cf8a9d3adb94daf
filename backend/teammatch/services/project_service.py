"""Project Service — create, read, update, delete projects and refresh their open flag.

Invariants:
    - Only the owner may update or delete a project, or list its applications
    - Every write validates the MERGED configuration (core/project_rules.py)
    - is_open is recomputed from the recruitment window on create and update
    - Service commits; repositories only flush

Design Decisions:
    - Views built by core/dashboard.py so list, detail and dashboard share one shape
    - Project detail for a known actor includes that actor's eligibility verdict,
      computed for all the actor's declared positions
"""

import dataclasses
import logging

from sqlalchemy.ext.asyncio import AsyncSession

from teammatch.core.application_lifecycle import ensure_owner
from teammatch.core.dashboard import application_view, project_detail, project_summary
from teammatch.core.domain_types import Position, ProjectId, UserId
from teammatch.core.eligibility import evaluate
from teammatch.core.errors import ResourceNotFoundError
from teammatch.core.project_rules import refreshed_open_flag, validate_snapshot
from teammatch.core.repository_protocols import (
    ApplicationRepository, ProjectRepository, UserRepository,
)
from teammatch.core.recruitment_window import is_open_now
from teammatch.core.snapshots import ProjectSnapshot
from teammatch.infrastructure.repositories import (
    SqlApplicationRepository, SqlProjectRepository, SqlUserRepository,
)
from teammatch.services.clock import Clock, utc_now

logger = logging.getLogger(__name__)

_SNAPSHOT_FIELDS = {f.name for f in dataclasses.fields(ProjectSnapshot)}


def _merge(project: ProjectSnapshot, fields: dict) -> ProjectSnapshot:
    """Project as it would look after applying fields."""
    changes = {
        k: v for k, v in fields.items()
        if k in _SNAPSHOT_FIELDS and k != "limits"
    }
    if "limits" in fields:
        changes["limits"] = {
            **project.limits,
            **{Position(p): v for p, v in fields["limits"].items()},
        }
    return dataclasses.replace(project, **changes)


class ProjectService:
    """Project management on top of the SQL repositories."""

    def __init__(self, db: AsyncSession, clock: Clock = utc_now):
        self.db = db
        self.clock = clock
        self.projects: ProjectRepository = SqlProjectRepository(db)
        self.applications: ApplicationRepository = SqlApplicationRepository(db)
        self.users: UserRepository = SqlUserRepository(db)

    async def _require_user(self, user_id: UserId):
        user = await self.users.get(user_id)
        if user is None:
            raise ResourceNotFoundError("User", str(user_id))
        return user

    async def _require_project(self, project_id: ProjectId) -> ProjectSnapshot:
        project = await self.projects.get(project_id)
        if project is None:
            raise ResourceNotFoundError("Project", str(project_id))
        return project

    async def create_project(self, actor_id: UserId, fields: dict) -> dict:
        """Create a project owned by actor; returns its detail view."""
        await self._require_user(actor_id)
        draft = _merge(
            ProjectSnapshot(
                id=None, owner_id=actor_id,
                project_start=fields["project_start"],
                project_end=fields["project_end"],
            ),
            fields,
        )
        validate_snapshot(draft)
        is_open = is_open_now(draft, self.clock()).open
        created = await self.projects.create(actor_id, {**fields, "is_open": is_open})
        await self.db.commit()
        logger.info(
            f"Project created: {created.name}",
            extra={"project_id": str(created.id), "actor_id": str(actor_id)},
        )
        bundle = await self.projects.get_bundle(created.id)
        return project_detail(bundle)

    async def list_projects(self, skip: int, limit: int) -> list[dict]:
        bundles = await self.projects.list_bundles(skip, limit)
        return [project_summary(b) for b in bundles]

    async def get_project(
        self, project_id: ProjectId, actor_id: UserId | None = None,
    ) -> dict:
        """Detail view; with an actor, also that actor's eligibility."""
        bundle = await self.projects.get_bundle(project_id)
        if bundle is None:
            raise ResourceNotFoundError("Project", str(project_id))
        view = project_detail(bundle)
        view["is_open_for_user"] = None
        view["user_block_reasons"] = None
        if actor_id is None:
            return view
        user = await self.users.get(actor_id)
        if user is None:
            return view
        existing_application = next(
            (a for a in bundle.applications if a.user_id == actor_id), None,
        )
        membership = next(
            (m for m in bundle.members if m.user_id == actor_id), None,
        )
        verdict = evaluate(
            user, bundle.project, list(user.positions), bundle.members,
            existing_application, membership, self.clock(),
        )
        view["is_open_for_user"] = verdict.ok
        view["user_block_reasons"] = verdict.reasons
        return view

    async def update_project(
        self, actor_id: UserId, project_id: ProjectId, fields: dict,
    ) -> dict:
        """Owner-only partial update; returns the summary view."""
        project = await self._require_project(project_id)
        ensure_owner(project, actor_id, "update this project")
        merged = _merge(project, fields)
        validate_snapshot(merged)
        fields = {**fields, "is_open": is_open_now(merged, self.clock()).open}
        await self.projects.update(project_id, fields)
        await self.db.commit()
        logger.info(
            "Project updated",
            extra={"project_id": str(project_id), "actor_id": str(actor_id)},
        )
        bundle = await self.projects.get_bundle(project_id)
        return project_summary(bundle)

    async def delete_project(self, actor_id: UserId, project_id: ProjectId) -> None:
        project = await self._require_project(project_id)
        ensure_owner(project, actor_id, "delete this project")
        await self.projects.delete(project_id)
        await self.db.commit()
        logger.info(
            "Project deleted",
            extra={"project_id": str(project_id), "actor_id": str(actor_id)},
        )

    async def refresh_open_status(self, project_id: ProjectId) -> bool:
        """Recompute the window and persist is_open only when it changed."""
        project = await self._require_project(project_id)
        new_value = refreshed_open_flag(project, self.clock())
        if new_value is None:
            return project.is_open
        await self.projects.set_open(project_id, new_value)
        await self.db.commit()
        logger.info(
            f"Project open flag changed to {new_value}",
            extra={"project_id": str(project_id)},
        )
        return new_value

    async def list_project_applications(
        self, actor_id: UserId, project_id: ProjectId,
    ) -> list[dict]:
        """Owner-only applicant list, newest first, with applicant profiles."""
        project = await self._require_project(project_id)
        ensure_owner(project, actor_id, "view applications of this project")
        applications = await self.applications.list_by_project(project_id)
        applicants = await self.users.get_many([a.user_id for a in applications])
        logger.debug(
            f"Listing {len(applications)} applications",
            extra={"project_id": str(project_id)},
        )
        return [
            application_view(a, applicant=applicants.get(a.user_id))
            for a in applications
        ]

