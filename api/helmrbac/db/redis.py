"""Redis connection management."""

from functools import lru_cache

import redis

from helmrbac.core.config import Settings
from helmrbac.core.logging import get_logger

logger = get_logger(__name__)


@lru_cache(maxsize=4)
def _connection_pool(
    url: str, socket_timeout: int, max_connections: int
) -> redis.ConnectionPool:
    return redis.ConnectionPool.from_url(
        url,
        decode_responses=True,
        max_connections=max_connections,
        socket_connect_timeout=socket_timeout,
        socket_keepalive=True,
    )


def get_redis_pool(settings: Settings) -> redis.ConnectionPool:
    """Get the shared connection pool for the configured store."""
    return _connection_pool(
        settings.redis_url,
        settings.redis_socket_timeout,
        settings.redis_max_connections,
    )


def get_redis_client(settings: Settings) -> redis.Redis:
    """Get a Redis client on the shared pool, checking the store answers."""
    client = redis.Redis(connection_pool=get_redis_pool(settings))

    try:
        client.ping()
        logger.debug("Redis connection established")
    except redis.RedisError as e:
        logger.error(f"Redis connection failed: {e}")
        raise

    return client


def close_redis_connection(settings: Settings):
    """Close the connection pool for the configured store."""
    try:
        get_redis_pool(settings).disconnect()
        _connection_pool.cache_clear()
        logger.info("Redis connection pool closed")
    except redis.RedisError as e:
        logger.error(f"Error closing Redis pool: {e}")
