"""Application Service — eligibility checks and lifecycle transitions against storage.

Invariants:
    - apply never creates an Application unless evaluate() returned ok
    - apply over an existing application or membership is a Conflict (409)
    - apply and owner decisions lock the project row first, so decisions for one
      project are serialized for the length of the transaction
    - accept re-reads occupancy after inserting the member and rolls back with
      PositionFullError when any limit is exceeded
    - Authorization checked before state: a non-owner gets Forbidden even for a
      non-pending application

Design Decisions:
    - Impureim sandwich: fetch snapshots -> pure decision (core/) -> write Transition
    - One commit per public operation; repository conflicts (IntegrityError on the
      composite primary key) arrive as ConflictError after rollback
"""

import logging
from collections.abc import Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from teammatch.core.application_lifecycle import (
    Transition, ensure_applicant, ensure_owner,
    plan_create, plan_reject, plan_status_change, plan_withdraw,
)
from teammatch.core.capacity import exceeded_positions
from teammatch.core.dashboard import application_view
from teammatch.core.domain_types import ApplicationStatus, Position, ProjectId, UserId
from teammatch.core.eligibility import EligibilityResult, evaluate
from teammatch.core.errors import (
    DuplicateApplicationError, ErrorContext, IneligibleApplicationError,
    PositionFullError, ResourceNotFoundError,
)
from teammatch.core.repository_protocols import (
    ApplicationRepository, MemberRepository, ProjectRepository, UserRepository,
)
from teammatch.core.snapshots import ApplicationSnapshot, ProjectSnapshot
from teammatch.infrastructure.repositories import (
    SqlApplicationRepository, SqlMemberRepository,
    SqlProjectRepository, SqlUserRepository,
)
from teammatch.services.clock import Clock, utc_now

logger = logging.getLogger(__name__)


class ApplicationService:
    """Apply / accept / reject / withdraw on top of the SQL repositories."""

    def __init__(self, db: AsyncSession, clock: Clock = utc_now):
        self.db = db
        self.clock = clock
        self.projects: ProjectRepository = SqlProjectRepository(db)
        self.applications: ApplicationRepository = SqlApplicationRepository(db)
        self.members: MemberRepository = SqlMemberRepository(db)
        self.users: UserRepository = SqlUserRepository(db)

    # ─── Eligibility ────────────────────────────────────────────

    async def _evaluate(
        self,
        user_id: UserId,
        project_id: ProjectId,
        positions: Sequence[Position],
        for_update: bool,
    ) -> EligibilityResult:
        user = await self.users.get(user_id)
        if user is None:
            raise ResourceNotFoundError("User", str(user_id))
        bundle = await self.projects.get_bundle(project_id, for_update=for_update)
        if bundle is None:
            raise ResourceNotFoundError("Project", str(project_id))
        existing_application = await self.applications.get(user_id, project_id)
        membership = await self.members.get(user_id, project_id)
        return evaluate(
            user, bundle.project, positions, bundle.members,
            existing_application, membership, self.clock(),
        )

    async def check_eligibility(
        self, user_id: UserId, project_id: ProjectId, positions: Sequence[Position],
    ) -> EligibilityResult:
        """Verdict only; nothing is written."""
        return await self._evaluate(user_id, project_id, positions, for_update=False)

    # ─── Create ─────────────────────────────────────────────────

    async def apply(
        self,
        user_id: UserId,
        project_id: ProjectId,
        positions: Sequence[Position],
        cover_letter: str | None = None,
    ) -> dict:
        """Create a PENDING application when the user is eligible."""
        verdict = await self._evaluate(user_id, project_id, positions, for_update=True)
        try:
            plan_create(verdict)
        except (DuplicateApplicationError, IneligibleApplicationError) as e:
            e.context.user_id = str(user_id)
            e.context.project_id = str(project_id)
            logger.info(
                "Application refused",
                extra={
                    "user_id": str(user_id), "project_id": str(project_id),
                    "reasons": verdict.reasons,
                },
            )
            await self.db.rollback()
            raise
        created = await self.applications.create(
            user_id, project_id, positions, cover_letter,
        )
        await self.db.commit()
        logger.info(
            "Application created",
            extra={
                "user_id": str(user_id), "project_id": str(project_id),
                "positions": [p.value for p in positions],
            },
        )
        return application_view(created)

    # ─── Owner decisions ────────────────────────────────────────

    async def _load_for_decision(
        self, actor_id: UserId, project_id: ProjectId, applicant_id: UserId,
    ) -> tuple[ProjectSnapshot, ApplicationSnapshot]:
        project = await self.projects.get(project_id, for_update=True)
        if project is None:
            raise ResourceNotFoundError("Project", str(project_id))
        ensure_owner(project, actor_id, "change application status")
        application = await self.applications.get(applicant_id, project_id)
        if application is None:
            raise ResourceNotFoundError(
                "Application", f"{applicant_id}/{project_id}",
                ErrorContext(user_id=str(applicant_id), project_id=str(project_id)),
            )
        return project, application

    async def _apply_transition(
        self,
        project: ProjectSnapshot,
        application: ApplicationSnapshot,
        transition: Transition,
    ) -> ApplicationSnapshot:
        updated = application
        if transition.new_status is not None:
            updated = await self.applications.update_status(
                application.user_id, application.project_id, transition.new_status,
            )
        if transition.create_member:
            await self.members.create(
                application.user_id, application.project_id, transition.member_role,
            )
            members_after = await self.members.list_by_project(project.id)
            exceeded = [
                p for p in exceeded_positions(project, members_after)
                if p in transition.member_role
            ]
            if exceeded:
                await self.db.rollback()
                logger.warning(
                    "Capacity exceeded after member insert, rolled back",
                    extra={
                        "user_id": str(application.user_id),
                        "project_id": str(project.id),
                        "positions": [p.value for p in exceeded],
                    },
                )
                raise PositionFullError([p.value for p in exceeded], ErrorContext(
                    user_id=str(application.user_id), project_id=str(project.id),
                ))
        if not transition.is_noop:
            await self.db.commit()
        return updated

    async def _decide(
        self,
        actor_id: UserId,
        project_id: ProjectId,
        applicant_id: UserId,
        target: ApplicationStatus,
    ) -> dict:
        project, application = await self._load_for_decision(
            actor_id, project_id, applicant_id,
        )
        if target == ApplicationStatus.REJECTED:
            transition = plan_reject(application)
        else:
            members = await self.members.list_by_project(project_id)
            membership = await self.members.get(applicant_id, project_id)
            transition = plan_status_change(
                target, application, project, members, membership,
            )
        updated = await self._apply_transition(project, application, transition)
        logger.info(
            f"Application {updated.status.value.lower()}",
            extra={
                "user_id": str(applicant_id), "project_id": str(project_id),
                "actor_id": str(actor_id), "status": updated.status.value,
            },
        )
        return application_view(updated)

    async def accept(
        self, actor_id: UserId, project_id: ProjectId, applicant_id: UserId,
    ) -> dict:
        """Owner accepts; the applicant becomes a member exactly once."""
        return await self._decide(
            actor_id, project_id, applicant_id, ApplicationStatus.ACCEPTED,
        )

    async def reject(
        self, actor_id: UserId, project_id: ProjectId, applicant_id: UserId,
    ) -> dict:
        return await self._decide(
            actor_id, project_id, applicant_id, ApplicationStatus.REJECTED,
        )

    async def update_status(
        self,
        actor_id: UserId,
        project_id: ProjectId,
        applicant_id: UserId,
        status: ApplicationStatus,
    ) -> dict:
        return await self._decide(actor_id, project_id, applicant_id, status)

    # ─── Applicant withdrawal ───────────────────────────────────

    async def withdraw(
        self,
        actor_id: UserId,
        project_id: ProjectId,
        applicant_id: UserId | None = None,
    ) -> None:
        """Applicant deletes their own PENDING application."""
        applicant_id = actor_id if applicant_id is None else applicant_id
        application = await self.applications.get(applicant_id, project_id)
        if application is None:
            raise ResourceNotFoundError(
                "Application", f"{applicant_id}/{project_id}",
                ErrorContext(user_id=str(applicant_id), project_id=str(project_id)),
            )
        ensure_applicant(application, actor_id)
        plan_withdraw(application)
        await self.applications.delete(applicant_id, project_id)
        await self.db.commit()
        logger.info(
            "Application withdrawn",
            extra={"user_id": str(applicant_id), "project_id": str(project_id)},
        )
