"""
Health check endpoints.
"""

import time

from fastapi import APIRouter

from erp.application.dto.responses import HealthResponse
from erp.config import get_logger, get_settings

logger = get_logger(__name__)

router = APIRouter(prefix="/api/health", tags=["health"])

# Track startup time
_start_time = time.time()


@router.get("", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """
    Basic health check.

    Returns service status and uptime.
    """
    return HealthResponse(
        status="healthy",
        version=get_settings().app_version,
        uptime_seconds=time.time() - _start_time,
    )


@router.get("/db", response_model=HealthResponse)
async def db_health() -> HealthResponse:
    """
    Database health check.

    Runs a trivial query and reports the applied schema version.
    """
    from erp.infrastructure.storage.sqlite import get_pool
    from erp.infrastructure.storage.sqlite.migrations.migrator import (
        get_current_version,
    )

    database = "unavailable"
    schema_version = None
    try:
        pool = await get_pool()
        async with pool.acquire() as conn:
            await conn.execute("SELECT 1")
            schema_version = await get_current_version(conn)
        database = "sqlite"
    except Exception as e:
        logger.error("db_health_check_failed", error=str(e))

    return HealthResponse(
        status="healthy" if database == "sqlite" else "unhealthy",
        version=get_settings().app_version,
        uptime_seconds=time.time() - _start_time,
        database=database,
        schema_version=schema_version,
    )
