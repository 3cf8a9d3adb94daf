"""Dashboard Service — per-user read views over current persisted state.

Invariants:
    - Read-only: never writes, never commits
    - No filtering beyond ownership/membership/applicant identity
    - Each application is paired with its parent project's summary

Design Decisions:
    - Parent projects of applications fetched in one list_by_ids call
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from teammatch.core.dashboard import (
    build_dashboard, build_member_dashboard, build_owner_dashboard,
)
from teammatch.core.domain_types import UserId
from teammatch.core.repository_protocols import (
    ApplicationRepository, ProjectRepository,
)
from teammatch.infrastructure.repositories import (
    SqlApplicationRepository, SqlProjectRepository,
)

logger = logging.getLogger(__name__)


class DashboardService:
    """Aggregates owned projects, memberships and applications for one user."""

    def __init__(self, db: AsyncSession):
        self.projects: ProjectRepository = SqlProjectRepository(db)
        self.applications: ApplicationRepository = SqlApplicationRepository(db)

    async def _applications_with_parents(self, user_id: UserId) -> list[tuple]:
        applications = await self.applications.list_by_user(user_id)
        parents = await self.projects.list_by_ids(
            [a.project_id for a in applications],
        )
        by_id = {b.project.id: b for b in parents}
        return [(a, by_id.get(a.project_id)) for a in applications]

    async def aggregate(self, user_id: UserId) -> dict:
        owned = await self.projects.list_owned_by(user_id)
        member_of = await self.projects.list_member_of(user_id)
        applications = await self._applications_with_parents(user_id)
        logger.debug(
            f"Dashboard: {len(owned)} owned, {len(member_of)} member, "
            f"{len(applications)} applications",
            extra={"user_id": str(user_id)},
        )
        return build_dashboard(owned, member_of, applications)

    async def owner_dashboard(self, user_id: UserId) -> dict:
        return build_owner_dashboard(await self.projects.list_owned_by(user_id))

    async def member_dashboard(self, user_id: UserId) -> dict:
        member_of = await self.projects.list_member_of(user_id)
        applications = await self._applications_with_parents(user_id)
        return build_member_dashboard(member_of, applications)
