"""ProjectMember ORM — a user occupying one or more positions on a project.

Invariants:
    - Primary key (user_id, project_id): at most one membership per pair
    - role is a non-empty JSON list of Position values
    - Created only by accepting an application; never removed automatically

Design Decisions:
    - Composite PK instead of surrogate id + unique index: the pair IS the identity
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import DateTime, ForeignKey, JSON
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.dialects.postgresql import UUID

from teammatch.db.base import Base


class ProjectMember(Base):
    """Membership row — counts toward per-position occupancy."""
    __tablename__ = "project_members"

    user_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        primary_key=True,
    )
    project_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("projects.id", ondelete="CASCADE"),
        primary_key=True, index=True,
    )
    role: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    joined_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    project: Mapped["Project"] = relationship(
        "Project", back_populates="members",
    )
