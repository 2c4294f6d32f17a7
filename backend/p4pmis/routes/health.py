"""
P4P MIS Backend — Health Check Route
======================================

What:  GET /health for container and load balancer probes.
How:   Pings MongoDB and reports the aggregate status. Always HTTP 200; the
       `status` field carries healthy/unhealthy.
"""

import logging
import time

from fastapi import APIRouter, Request

from p4pmis import __version__
from p4pmis.database import ping
from p4pmis.schemas.dashboard import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

_start_time = time.time()


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
)
async def health_check(request: Request) -> HealthResponse:
    db = getattr(request.app.state, "mongo_db", None)
    connected = db is not None and await ping(db)
    if not connected:
        logger.warning("Health check: MongoDB unreachable")

    return HealthResponse(
        status="healthy" if connected else "unhealthy",
        version=__version__,
        database="connected" if connected else "disconnected",
        uptime_seconds=round(time.time() - _start_time, 2),
    )
