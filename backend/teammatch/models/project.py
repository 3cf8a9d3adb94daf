"""Project ORM — recruiting configuration owned by exactly one user.

Invariants:
    - owner_id is set on create and never changed
    - limit_* columns are >= 0; 0 means unlimited
    - project_end > project_start (validated in core/project_rules.py)
    - is_open is a cache of the recruitment window, refreshed on create/update

Design Decisions:
    - One integer column per position (matches the legacy schema) with
      LIMIT_COLUMNS as the single Position -> column mapping
    - cascade delete for members and applications: project owns both
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import (
    Boolean, CheckConstraint, DateTime, ForeignKey, Integer, String, Text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.dialects.postgresql import UUID

from teammatch.core.domain_types import Position
from teammatch.db.base import Base

LIMIT_COLUMNS: dict[Position, str] = {
    Position.BACKEND: "limit_backend",
    Position.FRONTEND: "limit_frontend",
    Position.PM: "limit_pm",
    Position.MOBILE: "limit_mobile",
    Position.AI: "limit_ai",
}


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Project(Base):
    """Project aggregate root — owns its members and applications."""
    __tablename__ = "projects"
    __table_args__ = (
        CheckConstraint("project_end > project_start", name="ck_project_dates"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    owner_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False, index=True,
    )
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    difficulty: Mapped[str] = mapped_column(
        String(20), nullable=False, default="UNKNOWN",
    )
    github_repo_url: Mapped[str | None] = mapped_column(
        String(500), nullable=True,
    )
    recruitment_start: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True,
    )
    recruitment_end: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True,
    )
    project_start: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False,
    )
    project_end: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False,
    )

    limit_backend: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    limit_frontend: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    limit_pm: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    limit_mobile: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    limit_ai: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    min_proficiency: Mapped[str] = mapped_column(
        String(20), nullable=False, default="UNKNOWN",
    )
    max_proficiency: Mapped[str] = mapped_column(
        String(20), nullable=False, default="UNKNOWN",
    )
    is_open: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False,
        default=_utcnow, onupdate=_utcnow,
    )

    # Relationships — navigation only; reads and deletes go through repositories
    members: Mapped[list["ProjectMember"]] = relationship(
        "ProjectMember", back_populates="project",
        cascade="all, delete-orphan", lazy="selectin",
    )
    applications: Mapped[list["Application"]] = relationship(
        "Application", back_populates="project",
        cascade="all, delete-orphan", lazy="selectin",
    )

    def limits(self) -> dict[Position, int]:
        return {p: getattr(self, col) for p, col in LIMIT_COLUMNS.items()}
