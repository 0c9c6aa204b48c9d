"""
Blog API Backend - Health Check Route
======================================

What:  Health check endpoint for monitoring and load balancer health checks.
How:   Runs SELECT 1 through a request-scoped session and reports the result.

    Status levels:
    - healthy:   Database reachable
    - unhealthy: Database unreachable (still HTTP 200, body says why)
"""

import logging
import time

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from blogapi import __version__
from blogapi.database import get_db_session
from blogapi.schemas.common import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

# Initialized once when the module loads
_start_time = time.time()


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
)
async def health_check(db: AsyncSession = Depends(get_db_session, scope="function")) -> HealthResponse:
    db_status = "connected"
    overall = "healthy"

    try:
        await db.execute(text("SELECT 1"))
    except Exception as e:
        db_status = "disconnected"
        overall = "unhealthy"
        logger.warning("Health check: database unreachable: %s", str(e))

    return HealthResponse(
        status=overall,
        version=__version__,
        database=db_status,
        uptime_seconds=round(time.time() - _start_time, 2),
    )
