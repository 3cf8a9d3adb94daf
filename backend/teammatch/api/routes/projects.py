"""Project Routes — CRUD, open-flag refresh and per-actor detail.

Invariants:
    - Writes require an actor (X-User-Id); reads accept anonymous callers
    - Ownership is checked in ProjectService, not here
    - skip/limit bounded by settings.max_page_size

Design Decisions:
    - Detail view for an identified actor carries is_open_for_user and
      user_block_reasons so clients do not need a second eligibility call
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Response, status

from teammatch.api.deps import (
    get_actor_id, get_optional_actor_id, get_project_service,
)
from teammatch.config import get_settings
from teammatch.core.domain_types import ProjectId, UserId
from teammatch.schemas.project import (
    OpenStatusResponse, ProjectCreate, ProjectDetailResponse,
    ProjectSummaryResponse, ProjectUpdate,
)
from teammatch.services.project_service import ProjectService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/projects", tags=["projects"])

_settings = get_settings()


@router.post(
    "", response_model=ProjectDetailResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_project(
    body: ProjectCreate,
    actor_id: UserId = Depends(get_actor_id),
    service: ProjectService = Depends(get_project_service),
):
    """Create a project owned by the caller."""
    return await service.create_project(actor_id, body.to_fields())


@router.get("", response_model=list[ProjectSummaryResponse])
async def list_projects(
    skip: int = Query(0, ge=0),
    limit: int = Query(
        _settings.default_page_size, ge=1, le=_settings.max_page_size,
    ),
    service: ProjectService = Depends(get_project_service),
):
    """List projects, newest first."""
    return await service.list_projects(skip, limit)


@router.get("/{project_id}", response_model=ProjectDetailResponse)
async def get_project(
    project_id: UUID,
    actor_id: UserId | None = Depends(get_optional_actor_id),
    service: ProjectService = Depends(get_project_service),
):
    return await service.get_project(ProjectId(project_id), actor_id)


@router.patch("/{project_id}", response_model=ProjectSummaryResponse)
async def update_project(
    project_id: UUID,
    body: ProjectUpdate,
    actor_id: UserId = Depends(get_actor_id),
    service: ProjectService = Depends(get_project_service),
):
    """Partial update — owner only."""
    return await service.update_project(
        actor_id, ProjectId(project_id), body.to_fields(),
    )


@router.delete("/{project_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_project(
    project_id: UUID,
    actor_id: UserId = Depends(get_actor_id),
    service: ProjectService = Depends(get_project_service),
):
    """Delete a project with its members and applications — owner only."""
    await service.delete_project(actor_id, ProjectId(project_id))
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{project_id}/refresh-status", response_model=OpenStatusResponse)
async def refresh_status(
    project_id: UUID,
    service: ProjectService = Depends(get_project_service),
):
    """Recompute is_open from the recruitment window at the current time."""
    is_open = await service.refresh_open_status(ProjectId(project_id))
    return {"project_id": project_id, "is_open": is_open}
