"""Initial schema — users, projects, project_members, applications.

Revision ID: 001_initial
Revises: None
Create Date: 2026-10-19

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import UUID

revision: str = "001_initial"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("name", sa.String(100), nullable=False, server_default=""),
        sa.Column("positions", sa.JSON, nullable=False),
        sa.Column("proficiency", sa.String(20), nullable=False, server_default="UNKNOWN"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )

    op.create_table(
        "projects",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("owner_id", UUID(as_uuid=True), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("description", sa.Text, nullable=False, server_default=""),
        sa.Column("difficulty", sa.String(20), nullable=False, server_default="UNKNOWN"),
        sa.Column("github_repo_url", sa.String(500), nullable=True),
        sa.Column("recruitment_start", sa.DateTime(timezone=True), nullable=True),
        sa.Column("recruitment_end", sa.DateTime(timezone=True), nullable=True),
        sa.Column("project_start", sa.DateTime(timezone=True), nullable=False),
        sa.Column("project_end", sa.DateTime(timezone=True), nullable=False),
        sa.Column("limit_backend", sa.Integer, nullable=False, server_default="0"),
        sa.Column("limit_frontend", sa.Integer, nullable=False, server_default="0"),
        sa.Column("limit_pm", sa.Integer, nullable=False, server_default="0"),
        sa.Column("limit_mobile", sa.Integer, nullable=False, server_default="0"),
        sa.Column("limit_ai", sa.Integer, nullable=False, server_default="0"),
        sa.Column("min_proficiency", sa.String(20), nullable=False, server_default="UNKNOWN"),
        sa.Column("max_proficiency", sa.String(20), nullable=False, server_default="UNKNOWN"),
        sa.Column("is_open", sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.CheckConstraint("project_end > project_start", name="ck_project_dates"),
    )
    op.create_index("ix_projects_owner_id", "projects", ["owner_id"])

    op.create_table(
        "project_members",
        sa.Column("user_id", UUID(as_uuid=True), sa.ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
        sa.Column("project_id", UUID(as_uuid=True), sa.ForeignKey("projects.id", ondelete="CASCADE"), primary_key=True),
        sa.Column("role", sa.JSON, nullable=False),
        sa.Column("joined_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_project_members_project_id", "project_members", ["project_id"])

    op.create_table(
        "applications",
        sa.Column("user_id", UUID(as_uuid=True), sa.ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
        sa.Column("project_id", UUID(as_uuid=True), sa.ForeignKey("projects.id", ondelete="CASCADE"), primary_key=True),
        sa.Column("applied_position", sa.JSON, nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default="PENDING"),
        sa.Column("cover_letter", sa.Text, nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_applications_user_id", "applications", ["user_id"])
    op.create_index("ix_applications_project_id", "applications", ["project_id"])


def downgrade() -> None:
    op.drop_index("ix_applications_project_id", "applications")
    op.drop_index("ix_applications_user_id", "applications")
    op.drop_table("applications")
    op.drop_index("ix_project_members_project_id", "project_members")
    op.drop_table("project_members")
    op.drop_index("ix_projects_owner_id", "projects")
    op.drop_table("projects")
    op.drop_table("users")
