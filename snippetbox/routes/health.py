"""
Snippetbox — Health Check Route
=================================

What:  Health check endpoint for monitoring and load balancer probes.
How:   Runs SELECT 1 against the app's engine and reports uptime.

Status levels:
    healthy:   database reachable (HTTP 200)
    unhealthy: database unreachable (HTTP 503, stop routing traffic here)
"""

import logging
import time

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from snippetbox import __version__
from snippetbox.database import ping
from snippetbox.schemas.health import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

_start_time = time.time()


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
)
async def health_check(request: Request) -> JSONResponse:
    db_status = "connected"
    overall = "healthy"

    try:
        await ping(request.app.state.engine)
    except Exception as e:
        db_status = "disconnected"
        overall = "unhealthy"
        logger.warning("Health check: database unreachable: %s", str(e))

    body = HealthResponse(
        status=overall,
        version=__version__,
        database=db_status,
        uptime_seconds=round(time.time() - _start_time, 2),
    )
    return JSONResponse(
        status_code=200 if overall == "healthy" else 503,
        content=body.model_dump(),
    )
