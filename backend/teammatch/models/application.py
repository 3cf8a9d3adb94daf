"""Application ORM — a user's request to fill positions on a project.

Invariants:
    - Primary key (user_id, project_id): at most one application per pair
    - applied_position is a non-empty JSON list of Position values
    - status transitions: PENDING -> ACCEPTED | REJECTED (core/application_lifecycle.py)

Design Decisions:
    - Withdrawal deletes the row instead of adding a WITHDRAWN status,
      so the user can apply again later
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import String, Text, DateTime, ForeignKey, JSON
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.dialects.postgresql import UUID

from teammatch.db.base import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Application(Base):
    """Application entity — pending until the owner decides."""
    __tablename__ = "applications"

    user_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        primary_key=True, index=True,
    )
    project_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("projects.id", ondelete="CASCADE"),
        primary_key=True, index=True,
    )
    applied_position: Mapped[list] = mapped_column(
        JSON, nullable=False, default=list,
    )
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default="PENDING",
    )
    cover_letter: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False,
        default=_utcnow, onupdate=_utcnow,
    )

    project: Mapped["Project"] = relationship(
        "Project", back_populates="applications",
    )
