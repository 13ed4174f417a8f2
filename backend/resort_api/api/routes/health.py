"""
Health check with a live database round-trip.
"""

import time
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.ext.asyncio import async_sessionmaker

from resort_api.core.config import get_settings
from resort_api.core.exceptions import ErrorCode
from resort_api.core.logging import get_logger
from resort_api.db.session import get_session_factory
from resort_api.services.cache_service import get_cache_stats

logger = get_logger(__name__)
settings = get_settings()
router = APIRouter(tags=["Health"])

STARTED_AT = time.monotonic()


async def probe_database(session_factory: async_sessionmaker) -> bool:
    try:
        async with session_factory() as session:
            result = await session.execute(text("SELECT 1"))
            return result.scalar() == 1
    except Exception as e:
        logger.error("health_db_probe_failed", error_type=type(e).__name__)
        return False


@router.get("/health")
async def health_check(session_factory: async_sessionmaker = Depends(get_session_factory)):
    """Uptime and database status. 503 when the database does not answer."""
    if not await probe_database(session_factory):
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={
                "status": "DOWN",
                "error": "Database connection failed",
                "message": "Health check could not reach the database",
                "code": ErrorCode.DB_HEALTH_CHECK_FAILED.value,
            },
        )

    return {
        "status": "OK",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "uptime": round(time.monotonic() - STARTED_AT, 3),
        "db": "connected",
        "cache": await get_cache_stats(),
        "environment": settings.ENVIRONMENT,
        "version": settings.APP_VERSION,
    }
