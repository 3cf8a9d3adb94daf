"""User ORM — read-only profile rows owned by the account service.

Invariants:
    - positions is a JSON list of Position values
    - proficiency is a Proficiency value, UNKNOWN when never assessed

Design Decisions:
    - Only the columns the matching rules and views read are mapped here;
      contact fields, avatars and credentials belong to the account service
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import String, DateTime, JSON
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.dialects.postgresql import UUID

from teammatch.db.base import Base


class User(Base):
    """User profile as consumed by eligibility and dashboards."""
    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    name: Mapped[str] = mapped_column(String(100), nullable=False, default="")
    positions: Mapped[list] = mapped_column(
        JSON, nullable=False, default=list,
    )
    proficiency: Mapped[str] = mapped_column(
        String(20), nullable=False, default="UNKNOWN",
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
