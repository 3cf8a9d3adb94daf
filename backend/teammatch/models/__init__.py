"""ORM Models — SQLAlchemy declarative models for all domain entities.

Invariants:
    - All models inherit from Base (db/base.py)
    - (user_id, project_id) is the primary key of both applications and
      project_members: uniqueness is enforced by the database, not by a check

Design Decisions:
    - One file per entity for locality
    - All models imported here so SQLAlchemy resolves string-based relationship()
      references before any query runs
"""

from teammatch.models.user import User  # noqa: F401
from teammatch.models.project import Project  # noqa: F401
from teammatch.models.project_member import ProjectMember  # noqa: F401
from teammatch.models.application import Application  # noqa: F401
