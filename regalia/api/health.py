"""Health check and monitoring endpoints"""

from fastapi import APIRouter, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import text
from typing import Dict, Any
from datetime import datetime, timezone
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
import logging

from regalia.core.database import get_db
from regalia.core.cache import cache
from regalia.core.config import settings

logger = logging.getLogger(__name__)

router = APIRouter()

@router.get("/health")
async def health_check():
    """Basic health check"""
    return {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat()
    }

@router.get("/health/detailed")
async def detailed_health_check(
    db: AsyncSession = Depends(get_db)
) -> Dict[str, Any]:
    """Detailed health check with component status"""
    health_status = {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "version": settings.APP_VERSION,
        "components": {}
    }

    # Check database
    try:
        await db.execute(text("SELECT 1"))
        health_status["components"]["database"] = {"status": "healthy"}
    except Exception as e:
        logger.error(f"Database health check failed: {e}")
        health_status["components"]["database"] = {
            "status": "unhealthy",
            "error": str(e)
        }
        health_status["status"] = "unhealthy"

    # Check cache
    if settings.CATALOG_CACHE_ENABLED:
        try:
            await cache.ping()
            health_status["components"]["cache"] = {"status": "healthy"}
        except Exception as e:
            logger.warning(f"Cache health check failed: {e}")
            health_status["components"]["cache"] = {
                "status": "unhealthy",
                "error": str(e)
            }
            if health_status["status"] == "healthy":
                health_status["status"] = "degraded"

    return health_status

@router.get("/metrics")
async def metrics():
    """Prometheus metrics endpoint"""
    if not settings.PROMETHEUS_ENABLED:
        return {"error": "Metrics disabled"}

    return Response(generate_latest(), media_type=CONTENT_TYPE_LATEST)
