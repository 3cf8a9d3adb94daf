"""Dashboard Schemas — per-user aggregate views."""

from pydantic import BaseModel, Field

from teammatch.schemas.project import (
    ApplicationResponse, ProjectDetailResponse, ProjectSummaryResponse,
)


class OwnerDashboardResponse(BaseModel):
    owned_projects: list[ProjectDetailResponse] = Field(default_factory=list)


class MemberDashboardResponse(BaseModel):
    member_projects: list[ProjectSummaryResponse] = Field(default_factory=list)
    my_applications: list[ApplicationResponse] = Field(default_factory=list)


class DashboardResponse(OwnerDashboardResponse, MemberDashboardResponse):
    """Everything a user sees on their home screen."""
