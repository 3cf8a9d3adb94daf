"""Boundary Protocols — contracts between core and shell.

Invariants:
    - Core NEVER imports from shell — dependency arrows point inward only
    - All IO operations accessed through Protocol types
    - Implementations provided by shell via dependency injection
    - Repositories return snapshots (core/snapshots.py), never ORM rows
    - create() on applications/members raises ConflictError when the
      (user_id, project_id) pair already exists — enforced by storage, not by a read

Design Decisions:
    - Protocol over ABC: structural subtyping, no inheritance hierarchy
    - Async in Protocol: boundary methods are async because implementations do IO,
      but core pure functions that USE these results are never async themselves —
      the shell orchestrates the async calls around the pure logic
"""

from collections.abc import Sequence
from typing import Protocol

from teammatch.core.dashboard import ProjectBundle
from teammatch.core.domain_types import (
    ApplicationStatus, Position, ProjectId, UserId,
)
from teammatch.core.snapshots import (
    ApplicationSnapshot, MemberSnapshot, ProjectSnapshot, UserSnapshot,
)


class UserRepository(Protocol):
    """Contract for read-only user profile access — implemented by shell."""
    async def get(self, user_id: UserId) -> UserSnapshot | None: ...
    async def get_many(
        self, user_ids: Sequence[UserId],
    ) -> dict[UserId, UserSnapshot]: ...


class ProjectRepository(Protocol):
    """Contract for project persistence — implemented by shell."""
    async def get(
        self, project_id: ProjectId, *, for_update: bool = False,
    ) -> ProjectSnapshot | None: ...
    async def get_bundle(
        self, project_id: ProjectId, *, for_update: bool = False,
    ) -> ProjectBundle | None: ...
    async def list_bundles(
        self, skip: int, limit: int,
    ) -> list[ProjectBundle]: ...
    async def list_by_ids(
        self, project_ids: Sequence[ProjectId],
    ) -> list[ProjectBundle]: ...
    async def list_owned_by(self, user_id: UserId) -> list[ProjectBundle]: ...
    async def list_member_of(self, user_id: UserId) -> list[ProjectBundle]: ...
    async def create(self, owner_id: UserId, fields: dict) -> ProjectSnapshot: ...
    async def update(
        self, project_id: ProjectId, fields: dict,
    ) -> ProjectSnapshot: ...
    async def set_open(self, project_id: ProjectId, is_open: bool) -> None: ...
    async def delete(self, project_id: ProjectId) -> None: ...


class ApplicationRepository(Protocol):
    """Contract for application persistence — implemented by shell."""
    async def get(
        self, user_id: UserId, project_id: ProjectId,
    ) -> ApplicationSnapshot | None: ...
    async def list_by_user(self, user_id: UserId) -> list[ApplicationSnapshot]: ...
    async def list_by_project(
        self, project_id: ProjectId,
    ) -> list[ApplicationSnapshot]: ...
    async def create(
        self,
        user_id: UserId,
        project_id: ProjectId,
        positions: Sequence[Position],
        cover_letter: str | None,
    ) -> ApplicationSnapshot: ...
    async def update_status(
        self, user_id: UserId, project_id: ProjectId, status: ApplicationStatus,
    ) -> ApplicationSnapshot: ...
    async def delete(self, user_id: UserId, project_id: ProjectId) -> None: ...


class MemberRepository(Protocol):
    """Contract for membership persistence — implemented by shell."""
    async def get(
        self, user_id: UserId, project_id: ProjectId,
    ) -> MemberSnapshot | None: ...
    async def list_by_project(
        self, project_id: ProjectId,
    ) -> list[MemberSnapshot]: ...
    async def create(
        self, user_id: UserId, project_id: ProjectId, role: Sequence[Position],
    ) -> MemberSnapshot: ...
