"""
Health check endpoints.
"""

import logging
from datetime import datetime

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from dispatch import __version__
from dispatch.config import get_settings
from dispatch.database import get_db

logger = logging.getLogger(__name__)

router = APIRouter()


class HealthResponse(BaseModel):
    """Health check response model."""

    status: str
    app: str
    version: str
    timestamp: str
    database: str


@router.get("/health", response_model=HealthResponse)
async def health_check(db: AsyncSession = Depends(get_db)):
    """
    Health check endpoint.
    Returns server status and database connectivity.
    """
    settings = get_settings()

    db_status = "connected"
    try:
        await db.execute(text("SELECT 1"))
    except Exception as e:
        logger.warning("Health check database query failed: %s", e)
        db_status = f"error: {str(e)}"

    return HealthResponse(
        status="ok",
        app=settings.app_name,
        version=__version__,
        timestamp=datetime.utcnow().isoformat(),
        database=db_status,
    )


@router.get("/api/health")
async def api_health_check(db: AsyncSession = Depends(get_db)):
    """
    API prefixed health check (for consistency with /api/* routes).
    """
    return await health_check(db)
