"""
Health check endpoint.
"""

import time

import structlog
from fastapi import APIRouter, Depends

from arc_scoring import __version__
from arc_scoring.api.dependencies import get_database
from arc_scoring.api.models import ComponentHealth, HealthResponse
from arc_scoring.storage.database import Database

router = APIRouter()
logger = structlog.get_logger(__name__)


async def _check_database(db: Database) -> ComponentHealth:
    """Check database connectivity and measure latency."""
    start = time.perf_counter()
    try:
        healthy = await db.health_check()
        latency_ms = (time.perf_counter() - start) * 1000
        return ComponentHealth(
            status="healthy" if healthy else "unhealthy",
            latency_ms=round(latency_ms, 2),
        )
    except Exception as e:
        latency_ms = (time.perf_counter() - start) * 1000
        logger.warning("Database health check failed", error=str(e))
        return ComponentHealth(
            status="unhealthy",
            latency_ms=round(latency_ms, 2),
            details={"error": str(e)},
        )


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
    description="Check the health of the service and its snapshot store.",
)
async def health_check(db: Database = Depends(get_database)) -> HealthResponse:
    """
    Check service health.

    The pure scoring endpoints work without the database, so a database
    outage only degrades the service (snapshot lookups fail).
    """
    db_health = await _check_database(db)
    status = "healthy" if db_health.status == "healthy" else "degraded"

    return HealthResponse(
        status=status,
        components={"database": db_health},
        version=__version__,
    )
