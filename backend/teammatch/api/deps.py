"""Request Dependencies — actor identity, clock and service construction.

Invariants:
    - get_actor_id raises UnauthenticatedError (401) when the header is missing
      or not a UUID
    - get_optional_actor_id never raises; anonymous readers get None
    - Services receive the request-scoped session from get_db

Design Decisions:
    - Clock injected through get_clock so tests can pin "now" with
      app.dependency_overrides instead of patching datetime
"""

from uuid import UUID

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from teammatch.config import get_settings
from teammatch.core.domain_types import UserId
from teammatch.core.errors import UnauthenticatedError
from teammatch.infrastructure.database import get_db
from teammatch.services.application_service import ApplicationService
from teammatch.services.clock import Clock, utc_now
from teammatch.services.dashboard_service import DashboardService
from teammatch.services.project_service import ProjectService


def _parse_actor(raw: str | None) -> UserId | None:
    if not raw:
        return None
    try:
        return UserId(UUID(raw.strip()))
    except ValueError:
        return None


def get_actor_id(request: Request) -> UserId:
    """Acting user for endpoints that require one."""
    header = get_settings().actor_header
    actor_id = _parse_actor(request.headers.get(header))
    if actor_id is None:
        raise UnauthenticatedError(f"Missing or invalid {header} header")
    return actor_id


def get_optional_actor_id(request: Request) -> UserId | None:
    return _parse_actor(request.headers.get(get_settings().actor_header))


def get_clock() -> Clock:
    return utc_now


def get_project_service(
    db: AsyncSession = Depends(get_db), clock: Clock = Depends(get_clock),
) -> ProjectService:
    return ProjectService(db, clock)


def get_application_service(
    db: AsyncSession = Depends(get_db), clock: Clock = Depends(get_clock),
) -> ApplicationService:
    return ApplicationService(db, clock)


def get_dashboard_service(db: AsyncSession = Depends(get_db)) -> DashboardService:
    return DashboardService(db)
