"""Project Schemas — create/update payloads and read views.

Invariants:
    - ProjectCreate: name 1-200 chars stripped, project_end > project_start,
      limits are non-negative per Position (0 = unlimited)
    - ProjectUpdate: every field optional; only fields actually sent are applied
    - Response models mirror core/dashboard.py view dicts

Design Decisions:
    - limits as a Position-keyed object instead of five flat columns: payloads stay
      stable if a position is added
    - Cross-field checks that need stored values (partial updates) run in
      core/project_rules.py, not here
"""

from datetime import datetime
from typing import Annotated
from uuid import UUID

from pydantic import BaseModel, Field, field_validator, model_validator

from teammatch.core.domain_types import Difficulty, Position, Proficiency
from teammatch.schemas._time import require_utc

Limit = Annotated[int, Field(ge=0)]

_DATETIME_FIELDS = (
    "recruitment_start", "recruitment_end", "project_start", "project_end",
)


class ProjectCreate(BaseModel):
    """Project creation — the actor becomes owner."""
    name: str = Field(min_length=1, max_length=200)
    description: str = Field("", max_length=10_000)
    difficulty: Difficulty = Difficulty.UNKNOWN
    github_repo_url: str | None = Field(None, max_length=500)
    recruitment_start: datetime | None = None
    recruitment_end: datetime | None = None
    project_start: datetime
    project_end: datetime
    limits: dict[Position, Limit] = Field(default_factory=dict)
    min_proficiency: Proficiency | None = None
    max_proficiency: Proficiency | None = None

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("name cannot be empty or whitespace")
        return v

    @field_validator(*_DATETIME_FIELDS)
    @classmethod
    def normalise_datetimes(cls, v: datetime | None) -> datetime | None:
        return require_utc(v)

    @model_validator(mode="after")
    def validate_dates(self):
        if self.project_end <= self.project_start:
            raise ValueError("project_end must be after project_start")
        return self

    def to_fields(self) -> dict:
        return self.model_dump()


class ProjectUpdate(BaseModel):
    """Partial project update — owner only."""
    name: str | None = Field(None, min_length=1, max_length=200)
    description: str | None = Field(None, max_length=10_000)
    difficulty: Difficulty | None = None
    github_repo_url: str | None = Field(None, max_length=500)
    recruitment_start: datetime | None = None
    recruitment_end: datetime | None = None
    project_start: datetime | None = None
    project_end: datetime | None = None
    limits: dict[Position, Limit] | None = None
    min_proficiency: Proficiency | None = None
    max_proficiency: Proficiency | None = None

    @field_validator(*_DATETIME_FIELDS)
    @classmethod
    def normalise_datetimes(cls, v: datetime | None) -> datetime | None:
        return require_utc(v)

    @model_validator(mode="after")
    def reject_null_required(self):
        for name in ("name", "project_start", "project_end", "difficulty", "limits"):
            if name in self.model_fields_set and getattr(self, name) is None:
                raise ValueError(f"{name} cannot be null")
        return self

    def to_fields(self) -> dict:
        return self.model_dump(exclude_unset=True)


# --- Read views ---------------------------------------------------------------

class MemberResponse(BaseModel):
    user_id: UUID
    project_id: UUID
    role: list[Position]
    joined_at: datetime | None = None


class ApplicantProfile(BaseModel):
    id: UUID
    positions: list[Position]
    proficiency: Proficiency | None = None


class ProjectSummaryResponse(BaseModel):
    """Project summary — configuration plus occupancy counters."""
    id: UUID
    name: str
    description: str
    difficulty: Difficulty
    is_open: bool
    recruitment_start: datetime | None = None
    recruitment_end: datetime | None = None
    project_start: datetime
    project_end: datetime
    limits: dict[Position, int]
    current: dict[Position, int]
    min_proficiency: Proficiency | None = None
    max_proficiency: Proficiency | None = None
    owner_id: UUID
    member_count: int
    application_count: int


class ApplicationResponse(BaseModel):
    user_id: UUID
    project_id: UUID
    applied_position: list[Position]
    status: str
    cover_letter: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    project: ProjectSummaryResponse | None = None
    applicant: ApplicantProfile | None = None


class ProjectDetailResponse(ProjectSummaryResponse):
    """Project detail — nested members/applications and the actor's verdict."""
    members: list[MemberResponse] = Field(default_factory=list)
    applications: list[ApplicationResponse] = Field(default_factory=list)
    is_open_for_user: bool | None = None
    user_block_reasons: list[str] | None = None


class OpenStatusResponse(BaseModel):
    project_id: UUID
    is_open: bool
