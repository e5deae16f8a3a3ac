"""
Health Check Endpoints.

Endpoints:
- /health: Liveness check (process running)
- /health/ready: Readiness check (database reachable)
"""

import asyncio
from typing import Any

from fastapi import APIRouter, HTTPException, Request

from canvasnotes.backend.core.logging import get_logger
from canvasnotes.backend.core.utils import utc_now

router = APIRouter()
logger = get_logger(__name__)


async def check_database(request: Request) -> dict[str, Any]:
    """
    Check database connectivity.

    Returns:
        Dict with status, latency, and optional error message
    """
    database = getattr(request.app.state, "database", None)
    if database is None or not database.is_connected:
        return {"status": "not_configured"}

    try:
        from canvasnotes.backend.core.config import get_app_config

        timeout = get_app_config().application.timeouts.database

        start = utc_now()
        async with asyncio.timeout(timeout):
            await database.ping()
        latency_ms = int((utc_now() - start).total_seconds() * 1000)

        return {
            "status": "healthy",
            "latency_ms": latency_ms,
        }

    except Exception as e:
        logger.warning("Database health check failed", extra={"error": str(e)})
        return {
            "status": "unhealthy",
            "error": str(e),
        }


@router.get("/health")
async def health_check() -> dict[str, str]:
    """
    Liveness check.

    Returns 200 if the process is running. No dependency checks.
    """
    return {"status": "healthy"}


@router.get("/health/ready")
async def readiness_check(request: Request) -> dict[str, Any]:
    """
    Readiness check.

    Returns 503 if the database is configured but unreachable.
    """
    checks = {"database": await check_database(request)}

    if checks["database"].get("status") == "unhealthy":
        logger.warning("Readiness check failed", extra={"checks": checks})
        raise HTTPException(
            status_code=503,
            detail={
                "status": "unhealthy",
                "checks": checks,
                "timestamp": utc_now().isoformat(),
            },
        )

    return {
        "status": "healthy",
        "checks": checks,
        "timestamp": utc_now().isoformat(),
    }
