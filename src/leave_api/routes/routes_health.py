"""Health check endpoints for monitoring application status."""

from datetime import datetime
from datetime import timezone

from fastapi import APIRouter
from fastapi import Request
from fastapi import status
from fastapi.responses import JSONResponse
from loguru import logger

ROUTER_HEALTH = APIRouter(tags=["Health"])

SERVICE_NAME = "Leave Request API"
SERVICE_VERSION = "v1"


@ROUTER_HEALTH.get(
    "/health",
    summary="Health check endpoint",
    description="Basic health check that returns application status and metadata",
    responses={
        status.HTTP_200_OK: {
            "description": "Application is healthy",
            "content": {
                "application/json": {
                    "example": {
                        "status": "healthy",
                        "timestamp": "2026-01-05T12:00:00.000000Z",
                        "service": SERVICE_NAME,
                        "version": SERVICE_VERSION,
                    }
                }
            },
        }
    },
)
async def health_check():
    """
    Basic health check endpoint.

    Lightweight: does not touch the database.
    """
    response_data = {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "service": SERVICE_NAME,
        "version": SERVICE_VERSION,
    }

    logger.debug("Health check requested", status="healthy")

    return JSONResponse(status_code=status.HTTP_200_OK, content=response_data)


@ROUTER_HEALTH.get("/health/live", summary="Liveness probe")
async def liveness_check():
    return {"status": "alive", "timestamp": datetime.now(timezone.utc).isoformat()}


@ROUTER_HEALTH.get(
    "/health/ready",
    summary="Readiness probe",
    description="Returns 200 when the requests database answers, 503 otherwise",
    responses={status.HTTP_503_SERVICE_UNAVAILABLE: {"description": "Database not reachable"}},
)
async def readiness_check(request: Request):
    """Readiness probe - verifies database connectivity."""
    db_pool = getattr(request.app.state, "db_pool", None)
    database_ok = bool(db_pool) and await db_pool.health_check()

    response_data = {
        "status": "ready" if database_ok else "not_ready",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "service": SERVICE_NAME,
        "checks": {"database": "connected" if database_ok else "unavailable"},
    }

    if not database_ok:
        logger.warning("Readiness check failed", checks=response_data["checks"])
        return JSONResponse(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, content=response_data)

    return JSONResponse(status_code=status.HTTP_200_OK, content=response_data)
