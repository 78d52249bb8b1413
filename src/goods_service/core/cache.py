"""Read-through cache over Redis with write invalidation.

Point reads are cached under ``project:{id}`` and ``goods:{id}:{project_id}``.
Listing pages are cached under keys that embed a generation counter per
listing namespace; bumping the counter orphans every cached page at once and
the orphans expire with their TTL.

The cache never fails a request: a missing Redis behaves as a permanent miss
and Redis errors are logged and swallowed.
"""

from redis.exceptions import RedisError

from src.goods_service.core.logging import get_logger
from src.goods_service.core.metrics import Metrics
from src.goods_service.core.redis import get_redis

logger = get_logger(__name__)

PREFIX_PROJECT = "project"
PREFIX_GOODS = "goods"
LISTING_PROJECTS = "projects:list"
LISTING_GOODS = "goods:list"


def project_key(project_id: int) -> str:
    return f"{PREFIX_PROJECT}:{project_id}"


def goods_key(goods_id: int, project_id: int) -> str:
    return f"{PREFIX_GOODS}:{goods_id}:{project_id}"


def _generation_key(namespace: str) -> str:
    return f"{namespace}:gen"


class Cache:
    """Cache-aside helper shared by the services."""

    def __init__(self, ttl: int, metrics: Metrics | None = None):
        self.ttl = ttl
        self.metrics = metrics

    async def get(self, key: str, entity: str) -> str | None:
        """Return the cached value, or None on miss or when Redis is unusable.

        Args:
            key: Cache key.
            entity: Metric label for the hit/miss counters.
        """
        redis = await get_redis()
        value: str | None = None
        if redis is not None:
            try:
                value = await redis.get(key)
            except RedisError as e:
                logger.warning("Cache read failed", key=key, error=str(e))

        if self.metrics is not None:
            counter = self.metrics.cache_hits if value is not None else self.metrics.cache_misses
            counter.labels(entity=entity).inc()
        return value

    async def set(self, key: str, value: str, ttl: int | None = None) -> bool:
        """Store a value with a TTL.

        Returns:
            True if written to Redis, False if Redis is unavailable or failed.
        """
        redis = await get_redis()
        if redis is None:
            return False
        try:
            await redis.set(key, value, ex=ttl or self.ttl)
        except RedisError as e:
            logger.warning("Cache write failed", key=key, error=str(e))
            return False
        return True

    async def delete(self, *keys: str) -> bool:
        """Invalidate keys. Returns False if the invalidation could not be made."""
        if not keys:
            return True
        redis = await get_redis()
        if redis is None:
            return False
        try:
            await redis.delete(*keys)
        except RedisError as e:
            logger.warning("Failed to invalidate cache", keys=list(keys), error=str(e))
            return False
        return True

    async def listing_key(self, namespace: str, limit: int, offset: int) -> str:
        """Build the key of one listing page under the current generation."""
        generation = 0
        redis = await get_redis()
        if redis is not None:
            try:
                raw = await redis.get(_generation_key(namespace))
                generation = int(raw) if raw is not None else 0
            except (RedisError, ValueError) as e:
                logger.warning("Cache generation read failed", namespace=namespace, error=str(e))
        return f"{namespace}:{generation}:{limit}:{offset}"

    async def invalidate_listing(self, namespace: str) -> bool:
        """Move a listing namespace to a new generation."""
        redis = await get_redis()
        if redis is None:
            return False
        try:
            await redis.incr(_generation_key(namespace))
        except RedisError as e:
            logger.warning("Failed to invalidate listing", namespace=namespace, error=str(e))
            return False
        return True
