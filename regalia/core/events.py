"""
Application lifecycle
"""

from fastapi import FastAPI
from contextlib import asynccontextmanager
import logging

from .cache import cache
from .config import settings
from .database import close_db, init_db
from .monitoring import setup_logging

logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Configure logging, prepare the schema and the optional listing cache"""
    setup_logging()
    logger.info(f"Starting {settings.APP_NAME} {settings.APP_VERSION} ({settings.ENVIRONMENT})")

    # Tests create their own schema on a private engine
    if settings.ENVIRONMENT != "test":
        await init_db()

    if settings.CATALOG_CACHE_ENABLED:
        await cache.connect()
        logger.info(f"Listing cache on {'redis' if cache.using_redis else 'memory'}, ttl {settings.CATALOG_CACHE_TTL}s")

    try:
        yield
    finally:
        await cache.disconnect()
        await close_db()
        logger.info(f"{settings.APP_NAME} stopped")
