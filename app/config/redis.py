# app/config/redis.py
"""Redis connection used for broker health checks"""
import redis.asyncio as redis
from typing import Optional

from app.config.settings import get_settings

settings = get_settings()

# Shared pool; the Celery broker lives on the same server
_redis_pool: Optional[redis.ConnectionPool] = None


def get_redis_pool() -> redis.ConnectionPool:
    """Get or create Redis connection pool"""
    global _redis_pool
    if _redis_pool is None:
        _redis_pool = redis.ConnectionPool.from_url(
            settings.REDIS_URL,
            max_connections=settings.REDIS_MAX_CONNECTIONS,
            socket_connect_timeout=2,
            retry_on_timeout=True,
        )
    return _redis_pool


async def ping_redis() -> bool:
    """Round-trip a PING through the pool; raises on connection failure"""
    client = redis.Redis(connection_pool=get_redis_pool())
    try:
        return bool(await client.ping())
    finally:
        await client.aclose()
