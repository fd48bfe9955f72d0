# app/db/redis_conn.py
"""Redis client lifecycle. The cache is optional; failures here disable it."""
import logging
from typing import Optional

from redis import asyncio as aioredis
from redis.exceptions import RedisError

from app.core.config import Settings

logger = logging.getLogger(__name__)


async def connect_redis(settings: Settings) -> Optional[aioredis.Redis]:
    """
    Create and ping a Redis client.

    Returns None when caching is disabled or Redis is unreachable, in which
    case the API serves every read from the database.
    """
    if not settings.cache_configured:
        logger.info("Cache disabled: REDIS_URL not set or CACHE_ENABLED is false")
        return None

    client = aioredis.from_url(
        settings.REDIS_URL, encoding="utf-8", decode_responses=True
    )
    try:
        await client.ping()
    except (RedisError, OSError):
        logger.warning(
            "Redis unreachable, continuing without cache",
            exc_info=True,
            extra={"redis_url": settings.REDIS_URL},
        )
        await client.aclose()
        return None

    logger.info("Redis connection established")
    return client


async def close_redis(client: Optional[aioredis.Redis]) -> None:
    if client is not None:
        await client.aclose()
        logger.info("Redis connection closed")
