"""SQL Repositories — SQLAlchemy implementations of core/repository_protocols.py.

Invariants:
    - Repositories never commit: the calling service owns the transaction
    - Every value leaving this module is a core snapshot with UTC-aware datetimes
    - Duplicate (user_id, project_id) inserts surface as ConflictError, detected by
      the primary key at flush time rather than by a prior read
    - get(..., for_update=True) locks the project row for the rest of the transaction
      (SELECT ... FOR UPDATE; SQLite ignores the clause)

Design Decisions:
    - Bundles are assembled with one query per child table for the whole page,
      not one per project
    - Unknown enum strings in legacy rows degrade (UNKNOWN / dropped position)
      instead of failing the read
"""

import logging
from collections import defaultdict
from collections.abc import Sequence
from datetime import datetime, timezone

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from teammatch.core.dashboard import ProjectBundle
from teammatch.core.domain_types import (
    ApplicationStatus, Difficulty, Position, Proficiency, ProjectId, UserId,
    normalize_positions,
)
from teammatch.core.errors import ConflictError, ErrorContext, ResourceNotFoundError
from teammatch.core.snapshots import (
    ApplicationSnapshot, MemberSnapshot, ProjectSnapshot, UserSnapshot,
)
from teammatch.models.application import Application
from teammatch.models.project import LIMIT_COLUMNS, Project
from teammatch.models.project_member import ProjectMember
from teammatch.models.user import User

logger = logging.getLogger(__name__)

_PROJECT_SCALAR_FIELDS = (
    "name", "description", "github_repo_url",
    "recruitment_start", "recruitment_end", "project_start", "project_end",
    "is_open",
)


# ─── Row → snapshot conversion ──────────────────────────────────

def as_utc(value: datetime | None) -> datetime | None:
    """Attach UTC to naive values (SQLite drops tzinfo) and normalise aware ones."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _proficiency(value: str | None) -> Proficiency:
    try:
        return Proficiency(value)
    except ValueError:
        return Proficiency.UNKNOWN


def _difficulty(value: str | None) -> Difficulty:
    try:
        return Difficulty(value)
    except ValueError:
        return Difficulty.UNKNOWN


def project_snapshot(row: Project) -> ProjectSnapshot:
    return ProjectSnapshot(
        id=ProjectId(row.id),
        owner_id=UserId(row.owner_id),
        name=row.name,
        description=row.description,
        difficulty=_difficulty(row.difficulty),
        recruitment_start=as_utc(row.recruitment_start),
        recruitment_end=as_utc(row.recruitment_end),
        project_start=as_utc(row.project_start),
        project_end=as_utc(row.project_end),
        limits=row.limits(),
        min_proficiency=_proficiency(row.min_proficiency),
        max_proficiency=_proficiency(row.max_proficiency),
        is_open=row.is_open,
    )


def member_snapshot(row: ProjectMember) -> MemberSnapshot:
    return MemberSnapshot(
        user_id=UserId(row.user_id),
        project_id=ProjectId(row.project_id),
        role=tuple(normalize_positions(row.role)),
        joined_at=as_utc(row.joined_at),
    )


def application_snapshot(row: Application) -> ApplicationSnapshot:
    return ApplicationSnapshot(
        user_id=UserId(row.user_id),
        project_id=ProjectId(row.project_id),
        applied_position=tuple(normalize_positions(row.applied_position)),
        status=ApplicationStatus(row.status),
        cover_letter=row.cover_letter,
        created_at=as_utc(row.created_at),
        updated_at=as_utc(row.updated_at),
    )


def user_snapshot(row: User) -> UserSnapshot:
    return UserSnapshot(
        id=UserId(row.id),
        proficiency=_proficiency(row.proficiency),
        positions=tuple(normalize_positions(row.positions)),
    )


# ─── Users ──────────────────────────────────────────────────────

class SqlUserRepository:
    """Read-only access to user profiles."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get(self, user_id: UserId) -> UserSnapshot | None:
        row = await self.db.get(User, user_id)
        return user_snapshot(row) if row else None

    async def get_many(
        self, user_ids: Sequence[UserId],
    ) -> dict[UserId, UserSnapshot]:
        if not user_ids:
            return {}
        result = await self.db.execute(
            select(User).where(User.id.in_(set(user_ids))),
        )
        return {
            UserId(row.id): user_snapshot(row) for row in result.scalars().all()
        }


# ─── Projects ───────────────────────────────────────────────────

class SqlProjectRepository:
    """Project persistence plus bundle assembly for read views."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def _get_row(
        self, project_id: ProjectId, for_update: bool = False,
    ) -> Project | None:
        query = (
            select(Project)
            .where(Project.id == project_id)
            .execution_options(populate_existing=True)
        )
        if for_update:
            query = query.with_for_update()
        result = await self.db.execute(query)
        return result.scalar_one_or_none()

    async def _require_row(self, project_id: ProjectId) -> Project:
        row = await self._get_row(project_id)
        if row is None:
            raise ResourceNotFoundError("Project", str(project_id))
        return row

    async def get(
        self, project_id: ProjectId, *, for_update: bool = False,
    ) -> ProjectSnapshot | None:
        row = await self._get_row(project_id, for_update)
        return project_snapshot(row) if row else None

    async def get_bundle(
        self, project_id: ProjectId, *, for_update: bool = False,
    ) -> ProjectBundle | None:
        row = await self._get_row(project_id, for_update)
        if row is None:
            return None
        bundles = await self._bundles([row], with_applicants=True)
        return bundles[0]

    async def _bundles(
        self, rows: Sequence[Project], with_applicants: bool = False,
    ) -> list[ProjectBundle]:
        if not rows:
            return []
        ids = [row.id for row in rows]
        member_rows = await self.db.execute(
            select(ProjectMember)
            .where(ProjectMember.project_id.in_(ids))
            .order_by(ProjectMember.joined_at)
        )
        app_rows = await self.db.execute(
            select(Application)
            .where(Application.project_id.in_(ids))
            .order_by(Application.created_at.desc())
        )
        members: dict = defaultdict(list)
        for m in member_rows.scalars().all():
            members[m.project_id].append(member_snapshot(m))
        applications: dict = defaultdict(list)
        for a in app_rows.scalars().all():
            applications[a.project_id].append(application_snapshot(a))

        applicants: dict[UserId, UserSnapshot] = {}
        if with_applicants:
            applicant_ids = [
                a.user_id for apps in applications.values() for a in apps
            ]
            applicants = await SqlUserRepository(self.db).get_many(applicant_ids)

        return [
            ProjectBundle(
                project=project_snapshot(row),
                members=tuple(members[row.id]),
                applications=tuple(applications[row.id]),
                applicants={
                    a.user_id: applicants[a.user_id]
                    for a in applications[row.id] if a.user_id in applicants
                },
            )
            for row in rows
        ]

    async def list_bundles(self, skip: int, limit: int) -> list[ProjectBundle]:
        result = await self.db.execute(
            select(Project)
            .order_by(Project.created_at.desc())
            .offset(skip)
            .limit(limit)
        )
        return await self._bundles(result.scalars().all())

    async def list_by_ids(
        self, project_ids: Sequence[ProjectId],
    ) -> list[ProjectBundle]:
        if not project_ids:
            return []
        result = await self.db.execute(
            select(Project).where(Project.id.in_(set(project_ids)))
        )
        return await self._bundles(result.scalars().all())

    async def list_owned_by(self, user_id: UserId) -> list[ProjectBundle]:
        result = await self.db.execute(
            select(Project)
            .where(Project.owner_id == user_id)
            .order_by(Project.created_at.desc())
        )
        return await self._bundles(result.scalars().all(), with_applicants=True)

    async def list_member_of(self, user_id: UserId) -> list[ProjectBundle]:
        result = await self.db.execute(
            select(Project)
            .join(ProjectMember, ProjectMember.project_id == Project.id)
            .where(ProjectMember.user_id == user_id)
            .order_by(Project.created_at.desc())
        )
        return await self._bundles(result.scalars().all())

    def _apply_fields(self, row: Project, fields: dict) -> None:
        for name in _PROJECT_SCALAR_FIELDS:
            if name in fields:
                value = fields[name]
                if isinstance(value, datetime):
                    value = as_utc(value)
                setattr(row, name, value)
        if "difficulty" in fields:
            row.difficulty = Difficulty(fields["difficulty"]).value
        for bound in ("min_proficiency", "max_proficiency"):
            if bound in fields:
                value = fields[bound]
                setattr(
                    row, bound,
                    Proficiency(value).value if value is not None
                    else Proficiency.UNKNOWN.value,
                )
        for position, limit in (fields.get("limits") or {}).items():
            setattr(row, LIMIT_COLUMNS[Position(position)], limit)

    async def create(self, owner_id: UserId, fields: dict) -> ProjectSnapshot:
        row = Project(owner_id=owner_id)
        for column in LIMIT_COLUMNS.values():
            setattr(row, column, 0)
        self._apply_fields(row, fields)
        self.db.add(row)
        await self.db.flush()
        await self.db.refresh(row)
        return project_snapshot(row)

    async def update(self, project_id: ProjectId, fields: dict) -> ProjectSnapshot:
        row = await self._require_row(project_id)
        self._apply_fields(row, fields)
        await self.db.flush()
        await self.db.refresh(row)
        return project_snapshot(row)

    async def set_open(self, project_id: ProjectId, is_open: bool) -> None:
        row = await self._require_row(project_id)
        row.is_open = is_open
        await self.db.flush()

    async def delete(self, project_id: ProjectId) -> None:
        """Delete the project with its applications and memberships."""
        await self._require_row(project_id)
        # children first: SQLite does not enforce ON DELETE CASCADE by default
        await self.db.execute(
            delete(Application).where(Application.project_id == project_id)
        )
        await self.db.execute(
            delete(ProjectMember).where(ProjectMember.project_id == project_id)
        )
        await self.db.execute(delete(Project).where(Project.id == project_id))
        await self.db.flush()


# ─── Applications ───────────────────────────────────────────────

class SqlApplicationRepository:
    """Application persistence keyed by (user_id, project_id)."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def _get_row(
        self, user_id: UserId, project_id: ProjectId,
    ) -> Application | None:
        result = await self.db.execute(
            select(Application)
            .where(Application.user_id == user_id)
            .where(Application.project_id == project_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def _require_row(
        self, user_id: UserId, project_id: ProjectId,
    ) -> Application:
        row = await self._get_row(user_id, project_id)
        if row is None:
            raise ResourceNotFoundError(
                "Application", f"{user_id}/{project_id}",
                ErrorContext(user_id=str(user_id), project_id=str(project_id)),
            )
        return row

    async def get(
        self, user_id: UserId, project_id: ProjectId,
    ) -> ApplicationSnapshot | None:
        row = await self._get_row(user_id, project_id)
        return application_snapshot(row) if row else None

    async def list_by_user(self, user_id: UserId) -> list[ApplicationSnapshot]:
        result = await self.db.execute(
            select(Application)
            .where(Application.user_id == user_id)
            .order_by(Application.created_at.desc())
        )
        return [application_snapshot(r) for r in result.scalars().all()]

    async def list_by_project(
        self, project_id: ProjectId,
    ) -> list[ApplicationSnapshot]:
        result = await self.db.execute(
            select(Application)
            .where(Application.project_id == project_id)
            .order_by(Application.created_at.desc())
        )
        return [application_snapshot(r) for r in result.scalars().all()]

    async def create(
        self,
        user_id: UserId,
        project_id: ProjectId,
        positions: Sequence[Position],
        cover_letter: str | None,
    ) -> ApplicationSnapshot:
        row = Application(
            user_id=user_id,
            project_id=project_id,
            applied_position=[Position(p).value for p in positions],
            status=ApplicationStatus.PENDING.value,
            cover_letter=cover_letter,
        )
        self.db.add(row)
        try:
            await self.db.flush()
        except IntegrityError:
            await self.db.rollback()
            logger.info(
                "Duplicate application rejected by storage",
                extra={"user_id": str(user_id), "project_id": str(project_id)},
            )
            raise ConflictError(
                "already applied",
                context=ErrorContext(
                    user_id=str(user_id), project_id=str(project_id),
                ),
            )
        return application_snapshot(row)

    async def update_status(
        self, user_id: UserId, project_id: ProjectId, status: ApplicationStatus,
    ) -> ApplicationSnapshot:
        row = await self._require_row(user_id, project_id)
        row.status = status.value
        await self.db.flush()
        await self.db.refresh(row)
        return application_snapshot(row)

    async def delete(self, user_id: UserId, project_id: ProjectId) -> None:
        row = await self._require_row(user_id, project_id)
        await self.db.delete(row)
        await self.db.flush()


# ─── Members ────────────────────────────────────────────────────

class SqlMemberRepository:
    """Membership persistence keyed by (user_id, project_id)."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get(
        self, user_id: UserId, project_id: ProjectId,
    ) -> MemberSnapshot | None:
        result = await self.db.execute(
            select(ProjectMember)
            .where(ProjectMember.user_id == user_id)
            .where(ProjectMember.project_id == project_id)
        )
        row = result.scalar_one_or_none()
        return member_snapshot(row) if row else None

    async def list_by_project(self, project_id: ProjectId) -> list[MemberSnapshot]:
        result = await self.db.execute(
            select(ProjectMember)
            .where(ProjectMember.project_id == project_id)
            .order_by(ProjectMember.joined_at)
        )
        return [member_snapshot(r) for r in result.scalars().all()]

    async def create(
        self, user_id: UserId, project_id: ProjectId, role: Sequence[Position],
    ) -> MemberSnapshot:
        row = ProjectMember(
            user_id=user_id,
            project_id=project_id,
            role=[Position(p).value for p in role],
        )
        self.db.add(row)
        try:
            await self.db.flush()
        except IntegrityError:
            await self.db.rollback()
            raise ConflictError(
                "already a member",
                context=ErrorContext(
                    user_id=str(user_id), project_id=str(project_id),
                ),
            )
        return member_snapshot(row)
