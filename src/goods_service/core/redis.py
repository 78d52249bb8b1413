"""Optional Redis connection for the read cache.

One connection attempt is made on first use. When `REDIS_URL` is unset or the
server does not answer the initial ping, `get_redis()` keeps returning None
and goods/projects are read straight from PostgreSQL until `close_redis()`
clears the state.
"""

from redis.asyncio import ConnectionPool, Redis
from redis.exceptions import RedisError

from src.goods_service.core.config import get_settings
from src.goods_service.core.logging import get_logger

logger = get_logger(__name__)

_pool: ConnectionPool | None = None
_redis: Redis | None = None
_connection_attempted: bool = False


async def _release(client: Redis | None, pool: ConnectionPool | None) -> None:
    if client is not None:
        await client.aclose()
    if pool is not None:
        await pool.disconnect()


async def _connect(url: str, max_connections: int) -> Redis | None:
    pool = ConnectionPool.from_url(url, max_connections=max_connections, decode_responses=True)
    client = Redis(connection_pool=pool)
    try:
        await client.ping()  # type: ignore[misc]
    except (RedisError, OSError) as e:
        logger.warning("cache_unavailable", error=str(e), fallback="database")
        await _release(client, pool)
        return None

    global _pool
    _pool = pool
    logger.info("cache_connected", max_connections=max_connections)
    return client


async def get_redis() -> Redis | None:
    """Shared client, or None when the cache is off or unreachable."""
    global _redis, _connection_attempted

    if _redis is not None or _connection_attempted:
        return _redis
    _connection_attempted = True

    settings = get_settings()
    if not settings.redis_url:
        logger.info("cache_disabled", reason="REDIS_URL not set")
        return None

    _redis = await _connect(settings.redis_url, settings.redis_pool_size)
    return _redis


async def close_redis() -> None:
    if _redis is not None:
        await _release(_redis, _pool)
        logger.info("cache_closed")
    elif _pool is not None:
        await _pool.disconnect()
    reset_redis_state()


def reset_redis_state() -> None:
    """Forget the client and allow a new connection attempt."""
    global _pool, _redis, _connection_attempted
    _pool = None
    _redis = None
    _connection_attempted = False
