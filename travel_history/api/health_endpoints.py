"""
Health check and version endpoints.
"""

from fastapi import APIRouter, Depends
from fastapi.responses import PlainTextResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from datetime import datetime, timezone
import logging
import time

from travel_history.config.settings import Settings, get_settings
from travel_history.core.db import get_db
from travel_history.core.error_handlers import error_handler

logger = logging.getLogger(__name__)

router = APIRouter(tags=["meta"])

# Application start time for uptime calculation
_app_start_time = time.time()


@router.get("/version", response_class=PlainTextResponse)
async def get_version(settings: Settings = Depends(get_settings)) -> str:
    """
    The configured application version. Used to check that the expected
    configuration has been loaded.
    """
    return settings.app_version


@router.get("/health")
async def health_check(
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    """Health check with database connectivity and error statistics."""
    try:
        await db.execute(text("SELECT 1"))
        database = {"status": "healthy", "connection": "ok"}
    except SQLAlchemyError as e:
        logger.error(f"Database health check failed: {e}")
        database = {"status": "unhealthy", "error": str(e)}

    return {
        "status": "healthy" if database["status"] == "healthy" else "unhealthy",
        "version": settings.app_version,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "uptime_seconds": int(time.time() - _app_start_time),
        "details": {"database": database},
        "error_statistics": error_handler.get_error_statistics(),
    }
