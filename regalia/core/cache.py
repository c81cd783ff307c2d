"""
Listing cache
Redis when reachable, a process-local store otherwise. Values are JSON documents.
"""

import redis.asyncio as redis
from typing import Any, Dict, Optional, Tuple, Union
from datetime import timedelta
from fnmatch import fnmatchcase
import json
import logging
import time

from .config import settings

logger = logging.getLogger(__name__)

Expiry = Optional[Union[int, timedelta]]

def _seconds(expire: Expiry) -> Optional[int]:
    if isinstance(expire, timedelta):
        return int(expire.total_seconds())
    return expire

class MemoryStore:
    """Process-local key/value store with per-key expiry"""

    def __init__(self):
        self._items: Dict[str, Tuple[Any, Optional[float]]] = {}

    def get(self, key: str) -> Optional[Any]:
        item = self._items.get(key)
        if item is None:
            return None
        value, deadline = item
        if deadline is not None and time.monotonic() >= deadline:
            del self._items[key]
            return None
        return value

    def set(self, key: str, value: Any, ttl: Optional[int]) -> None:
        deadline = time.monotonic() + ttl if ttl else None
        self._items[key] = (value, deadline)

    def delete(self, key: str) -> bool:
        return self._items.pop(key, None) is not None

    def delete_matching(self, pattern: str) -> int:
        doomed = [key for key in self._items if fnmatchcase(key, pattern)]
        for key in doomed:
            del self._items[key]
        return len(doomed)

class RedisCache:
    """
    Cache manager used by the catalogue service

    Read and write failures are logged and reported as misses so a broken
    cache never fails a listing.
    """

    def __init__(self):
        self.redis_client: Optional[redis.Redis] = None
        self.memory = MemoryStore()

    @property
    def using_redis(self) -> bool:
        return self.redis_client is not None

    async def connect(self):
        """Connect to REDIS_URL, keeping the memory store if that fails"""
        client = redis.from_url(
            settings.REDIS_URL,
            encoding="utf-8",
            decode_responses=settings.REDIS_DECODE_RESPONSES,
            max_connections=settings.REDIS_MAX_CONNECTIONS
        )
        try:
            await client.ping()
        except redis.RedisError as e:
            logger.warning(f"Redis unreachable at {settings.REDIS_URL}, caching in memory: {e}")
            await client.aclose()
            return
        self.redis_client = client
        logger.info("Redis connection established")

    def use_client(self, client: redis.Redis):
        """Attach an already connected client"""
        self.redis_client = client

    async def disconnect(self):
        if self.redis_client is not None:
            await self.redis_client.aclose()
            logger.info("Redis connection closed")
        self.redis_client = None

    async def ping(self) -> bool:
        """Raises if Redis is configured but unreachable"""
        if self.using_redis:
            return bool(await self.redis_client.ping())
        return True

    async def get(self, key: str) -> Optional[Any]:
        if not self.using_redis:
            return self.memory.get(key)
        try:
            payload = await self.redis_client.get(key)
            return json.loads(payload) if payload else None
        except (redis.RedisError, ValueError) as e:
            logger.error(f"Cache read failed for {key}: {e}")
            return None

    async def set(self, key: str, value: Any, expire: Expiry = None) -> bool:
        ttl = _seconds(expire)
        if not self.using_redis:
            self.memory.set(key, value, ttl)
            return True
        try:
            return bool(await self.redis_client.set(key, json.dumps(value), ex=ttl))
        except redis.RedisError as e:
            logger.error(f"Cache write failed for {key}: {e}")
            return False

    async def delete(self, key: str) -> bool:
        if not self.using_redis:
            return self.memory.delete(key)
        try:
            return bool(await self.redis_client.delete(key))
        except redis.RedisError as e:
            logger.error(f"Cache delete failed for {key}: {e}")
            return False

    async def delete_pattern(self, pattern: str) -> int:
        """Delete every key matching a glob pattern, e.g. catalog:*"""
        if not self.using_redis:
            return self.memory.delete_matching(pattern)
        try:
            keys = [key async for key in self.redis_client.scan_iter(match=pattern)]
            return await self.redis_client.delete(*keys) if keys else 0
        except redis.RedisError as e:
            logger.error(f"Cache invalidation failed for {pattern}: {e}")
            return 0

# Global cache instance
cache = RedisCache()
