"""
Postboard Backend - Health Routes
==================================

What:  Liveness probes.
    - GET /welcome: static JSON, no dependencies touched
    - GET /health:  checks the database with SELECT 1
Who:   Docker health checks, load balancers, smoke tests.
"""

import logging
import time

from fastapi import APIRouter
from sqlalchemy import text

from postboard import __version__
from postboard.schemas.common import HealthResponse, WelcomeResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

# Initialized once when the module loads
_start_time = time.time()


@router.get("/welcome", response_model=WelcomeResponse, summary="Welcome probe")
async def welcome() -> WelcomeResponse:
    return WelcomeResponse(status="success", message="Welcome!")


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
    description="Returns the health of the service and its database connection.",
)
async def health_check() -> HealthResponse:
    """
    Probe the database and report aggregate status.

    Always answers 200; `status` is "unhealthy" when the database is down.
    """
    db_status = "connected"
    overall = "healthy"

    try:
        from postboard.database import engine
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
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
