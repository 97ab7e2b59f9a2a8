"""
Notes API - Health Check Route
==============================

What:  Health check endpoint for monitoring and load balancer health checks.
How:   Runs `SELECT 1` against the application's engine and reports
       status, version and uptime.
Who:   Docker health checks, load balancers, monitoring.

Served at both /health and /v1/health.

Status levels:
    - healthy:   database reachable (HTTP 200)
    - unhealthy: database unreachable (HTTP 503, stop routing traffic)
"""

import logging
import time

from fastapi import APIRouter, Request, Response, status
from sqlalchemy import text

from notes_api import __version__
from notes_api.schemas.note import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

# Module-level: initialized once when the module loads
_start_time = time.time()


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
)
@router.get(
    "/v1/health",
    response_model=HealthResponse,
    include_in_schema=False,
)
async def health_check(request: Request, response: Response) -> HealthResponse:
    """Check database connectivity and return aggregate status."""
    db_status = "connected"
    overall = "healthy"

    try:
        async with request.app.state.engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except Exception as e:
        db_status = "disconnected"
        overall = "unhealthy"
        logger.warning("Health check: database unreachable: %s", str(e))
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE

    return HealthResponse(
        status=overall,
        version=__version__,
        database=db_status,
        uptime_seconds=round(time.time() - _start_time, 2),
    )
