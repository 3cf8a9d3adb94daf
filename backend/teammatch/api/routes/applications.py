"""Application Routes — eligibility pre-check, apply, owner decisions, withdrawal.

Invariants:
    - Every endpoint requires an actor (X-User-Id)
    - Refused applications return 422 with the full reasons list
    - /applications/me routes are declared before /applications/{applicant_id}

Design Decisions:
    - Both a generic PATCH (status in body) and explicit /accept, /reject actions:
      same service path, different client ergonomics
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Response, status

from teammatch.api.deps import get_actor_id, get_application_service, get_project_service
from teammatch.core.domain_types import Position, ProjectId, UserId
from teammatch.schemas.application import ApplyRequest, EligibilityResponse, StatusUpdate
from teammatch.schemas.project import ApplicationResponse
from teammatch.services.application_service import ApplicationService
from teammatch.services.project_service import ProjectService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/projects", tags=["applications"])


@router.get("/{project_id}/eligibility", response_model=EligibilityResponse)
async def check_eligibility(
    project_id: UUID,
    positions: list[Position] = Query(...),
    actor_id: UserId = Depends(get_actor_id),
    service: ApplicationService = Depends(get_application_service),
):
    """Would the caller be allowed to apply for these positions right now?"""
    verdict = await service.check_eligibility(
        actor_id, ProjectId(project_id), list(dict.fromkeys(positions)),
    )
    return verdict.to_dict()


@router.post(
    "/{project_id}/applications", response_model=ApplicationResponse,
    status_code=status.HTTP_201_CREATED,
)
async def apply(
    project_id: UUID,
    body: ApplyRequest,
    actor_id: UserId = Depends(get_actor_id),
    service: ApplicationService = Depends(get_application_service),
):
    """Apply to a project; creates a PENDING application."""
    return await service.apply(
        actor_id, ProjectId(project_id), body.applied_position, body.cover_letter,
    )


@router.get("/{project_id}/applications", response_model=list[ApplicationResponse])
async def list_applications(
    project_id: UUID,
    actor_id: UserId = Depends(get_actor_id),
    service: ProjectService = Depends(get_project_service),
):
    """Applicants of a project — owner only."""
    return await service.list_project_applications(actor_id, ProjectId(project_id))


@router.delete(
    "/{project_id}/applications/me", status_code=status.HTTP_204_NO_CONTENT,
)
async def withdraw_own(
    project_id: UUID,
    actor_id: UserId = Depends(get_actor_id),
    service: ApplicationService = Depends(get_application_service),
):
    """Withdraw the caller's own PENDING application."""
    await service.withdraw(actor_id, ProjectId(project_id))
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete(
    "/{project_id}/applications/{applicant_id}",
    status_code=status.HTTP_204_NO_CONTENT,
)
async def withdraw(
    project_id: UUID,
    applicant_id: UUID,
    actor_id: UserId = Depends(get_actor_id),
    service: ApplicationService = Depends(get_application_service),
):
    """Withdraw by explicit applicant id; only the applicant may do this."""
    await service.withdraw(actor_id, ProjectId(project_id), UserId(applicant_id))
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.patch(
    "/{project_id}/applications/{applicant_id}",
    response_model=ApplicationResponse,
)
async def update_status(
    project_id: UUID,
    applicant_id: UUID,
    body: StatusUpdate,
    actor_id: UserId = Depends(get_actor_id),
    service: ApplicationService = Depends(get_application_service),
):
    """Owner decision with the target status in the body."""
    return await service.update_status(
        actor_id, ProjectId(project_id), UserId(applicant_id), body.status,
    )


@router.post(
    "/{project_id}/applications/{applicant_id}/accept",
    response_model=ApplicationResponse,
)
async def accept(
    project_id: UUID,
    applicant_id: UUID,
    actor_id: UserId = Depends(get_actor_id),
    service: ApplicationService = Depends(get_application_service),
):
    return await service.accept(actor_id, ProjectId(project_id), UserId(applicant_id))


@router.post(
    "/{project_id}/applications/{applicant_id}/reject",
    response_model=ApplicationResponse,
)
async def reject(
    project_id: UUID,
    applicant_id: UUID,
    actor_id: UserId = Depends(get_actor_id),
    service: ApplicationService = Depends(get_application_service),
):
    return await service.reject(actor_id, ProjectId(project_id), UserId(applicant_id))
