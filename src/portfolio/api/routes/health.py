"""Health check endpoints."""

import logging

from fastapi import APIRouter
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from portfolio.core.cache import get_cache_stats
from portfolio.core.deps import DbSession

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/health")
async def health_check():
    """Liveness check."""
    return {"status": "healthy"}


@router.get("/health/db")
async def database_health(db: DbSession):
    """Database connectivity check."""
    try:
        await db.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        logger.error(f"Database health check failed: {e}")
        return {"status": "unhealthy", "database": str(e)}
    return {"status": "healthy", "database": "connected"}


@router.get("/health/cache")
async def cache_health():
    """Price feed cache status."""
    stats = get_cache_stats()
    return {"status": "healthy" if stats.get("enabled") else "disabled", "cache": stats}
