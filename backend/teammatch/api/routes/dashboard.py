"""Dashboard Routes — the caller's owned projects, memberships and applications."""

from fastapi import APIRouter, Depends

from teammatch.api.deps import get_actor_id, get_dashboard_service
from teammatch.core.domain_types import UserId
from teammatch.schemas.dashboard import (
    DashboardResponse, MemberDashboardResponse, OwnerDashboardResponse,
)
from teammatch.services.dashboard_service import DashboardService

router = APIRouter(prefix="/api/v1/dashboard", tags=["dashboard"])


@router.get("", response_model=DashboardResponse)
async def dashboard(
    actor_id: UserId = Depends(get_actor_id),
    service: DashboardService = Depends(get_dashboard_service),
):
    return await service.aggregate(actor_id)


@router.get("/owner", response_model=OwnerDashboardResponse)
async def owner_dashboard(
    actor_id: UserId = Depends(get_actor_id),
    service: DashboardService = Depends(get_dashboard_service),
):
    return await service.owner_dashboard(actor_id)


@router.get("/member", response_model=MemberDashboardResponse)
async def member_dashboard(
    actor_id: UserId = Depends(get_actor_id),
    service: DashboardService = Depends(get_dashboard_service),
):
    return await service.member_dashboard(actor_id)
