"""Application Schemas — apply payload, owner decisions, eligibility verdict.

Invariants:
    - ApplyRequest.applied_position: non-empty, duplicates removed, order kept
    - StatusUpdate accepts any ApplicationStatus; illegal targets are rejected by
      the lifecycle as InvalidState, not here

Design Decisions:
    - cover_letter stripped; blank becomes None
"""

from pydantic import BaseModel, Field, field_validator

from teammatch.core.domain_types import ApplicationStatus, Position


class ApplyRequest(BaseModel):
    """Apply to a project for one or more positions."""
    applied_position: list[Position] = Field(min_length=1)
    cover_letter: str | None = Field(None, max_length=5_000)

    @field_validator("applied_position")
    @classmethod
    def dedupe_positions(cls, v: list[Position]) -> list[Position]:
        return list(dict.fromkeys(v))

    @field_validator("cover_letter")
    @classmethod
    def strip_cover_letter(cls, v: str | None) -> str | None:
        if v is None:
            return None
        return v.strip() or None


class StatusUpdate(BaseModel):
    """Owner decision on an application."""
    status: ApplicationStatus


class EligibilityResponse(BaseModel):
    ok: bool
    reasons: list[str]
