"""Health Routes — is the matching API up, and can it reach project storage?

Invariants:
    - GET /api/v1/health/ returns 200 while the process serves requests
    - GET /api/v1/health/ready returns 503 until init_db has run and the
      database answers SELECT 1; eligibility and applications need both
"""

import logging

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

from teammatch.infrastructure import database

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/health", tags=["health"])

SERVICE_NAME = "teammatch-api"
SERVICE_VERSION = "1.0.0"


@router.get("/", status_code=status.HTTP_200_OK)
async def health_check():
    return {"status": "healthy", "service": SERVICE_NAME, "version": SERVICE_VERSION}


@router.get("/ready")
async def readiness_check():
    """503 with a reason when storage is not initialised or not reachable."""
    manager = database.db_manager
    if manager is None:
        reason = "database_not_initialised"
    elif not await manager.health_check():
        reason = "database_unavailable"
    else:
        return {"status": "ready", "checks": {"database": "healthy"}}
    logger.warning("Readiness check failed", extra={"status": reason})
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"status": "not_ready", "reason": reason},
    )
