"""
Health Check Endpoints.

- /health: Liveness check (process running)
- /health/ready: Readiness check (database reachable)
"""

import asyncio
from typing import Any

from fastapi import APIRouter
from fastapi.responses import JSONResponse
from sqlalchemy import text

from notekeeper.backend.core.config import get_app_config
from notekeeper.backend.core.dependencies import DbSession
from notekeeper.backend.core.logging import get_logger
from notekeeper.backend.core.utils import utc_now

router = APIRouter()
logger = get_logger(__name__)


@router.get("/health", summary="Liveness check")
async def health() -> dict[str, Any]:
    """Report that the process is up."""
    return {"status": "healthy", "timestamp": utc_now().isoformat()}


@router.get("/health/ready", summary="Readiness check")
async def ready(db: DbSession) -> JSONResponse:
    """Report whether the note database answers."""
    timeout = get_app_config().application.timeouts.database
    start = utc_now()
    try:
        await asyncio.wait_for(db.execute(text("SELECT 1")), timeout=timeout)
    except Exception as e:
        logger.warning("Database health check failed", error=str(e))
        return JSONResponse(
            status_code=503,
            content={"status": "unhealthy", "checks": {"database": {"status": "unhealthy"}}},
        )

    latency_ms = int((utc_now() - start).total_seconds() * 1000)
    return JSONResponse(
        status_code=200,
        content={
            "status": "healthy",
            "checks": {"database": {"status": "healthy", "latency_ms": latency_ms}},
        },
    )
