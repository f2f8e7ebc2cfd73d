"""
Bus Pass Backend - Health Check Route
=======================================

What:  Health check endpoint for monitoring and load balancer probes.
How:   Runs a lightweight count against the location table; an unreachable
       database marks the service unhealthy.

Status levels:
    - healthy:   database reachable
    - unhealthy: database unreachable (stop routing traffic)
"""

import logging
import time

from fastapi import APIRouter
from sqlalchemy import func, select

from buspass import __version__
from buspass.database import async_session_factory
from buspass.models.location import Location
from buspass.schemas.common import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

# Set once when the module loads
_start_time = time.time()


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
)
async def health_check() -> HealthResponse:
    """
    Check database connectivity and report the size of the location table.

    An empty table right after startup means seeding is still running or failed.
    """
    db_status = "connected"
    overall = "healthy"
    locations = 0

    try:
        async with async_session_factory() as session:
            result = await session.execute(select(func.count(Location.id)))
            locations = result.scalar() or 0
    except Exception as e:
        db_status = "disconnected"
        overall = "unhealthy"
        logger.warning("Health check: database unreachable: %s", str(e))

    return HealthResponse(
        status=overall,
        version=__version__,
        database=db_status,
        locations=locations,
        uptime_seconds=round(time.time() - _start_time, 2),
    )
