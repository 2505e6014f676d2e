"""Catalog snapshot cache.

Redis is used when ``REDIS_URL`` is configured and reachable; otherwise (or
when Redis errors) a process-local TTL cache takes over. Cache failures never
fail a request: the caller simply reloads from the database.
"""

import json
from typing import Any, Optional

import redis
from cachetools import TTLCache

from storefront.core.logging_config import get_logger
from storefront.core_settings import get_settings

logger = get_logger(__name__)

CATALOG_KEY = "catalog:products"


class CatalogCache:
    def __init__(self, redis_url: Optional[str] = None, ttl: int = 60):
        self.ttl = ttl
        self.local = TTLCache(maxsize=16, ttl=ttl)
        self.redis_client: Optional[redis.Redis] = None
        if redis_url:
            try:
                client = redis.from_url(redis_url, decode_responses=True, socket_connect_timeout=1)
                client.ping()
                self.redis_client = client
                logger.info("Catalog cache using Redis")
            except redis.RedisError as e:
                logger.warning(f"Redis unavailable, catalog cache falls back to memory: {e}")

    def get(self, key: str = CATALOG_KEY) -> Optional[Any]:
        if self.redis_client:
            try:
                val = self.redis_client.get(key)
                if val is not None:
                    return json.loads(val)
            except redis.RedisError as e:
                logger.warning(f"Catalog cache read failed: {e}")
        return self.local.get(key)

    def set(self, value: Any, key: str = CATALOG_KEY) -> None:
        if self.redis_client:
            try:
                self.redis_client.setex(key, self.ttl, json.dumps(value, default=str))
                return
            except redis.RedisError as e:
                logger.warning(f"Catalog cache write failed: {e}")
        self.local[key] = value

    def invalidate(self, key: str = CATALOG_KEY) -> None:
        self.local.pop(key, None)
        if self.redis_client:
            try:
                self.redis_client.delete(key)
            except redis.RedisError as e:
                logger.warning(f"Catalog cache invalidation failed: {e}")


_catalog_cache: Optional[CatalogCache] = None


def get_catalog_cache() -> CatalogCache:
    global _catalog_cache
    if _catalog_cache is None:
        settings = get_settings()
        _catalog_cache = CatalogCache(settings.REDIS_URL, settings.CATALOG_CACHE_TTL)
    return _catalog_cache
