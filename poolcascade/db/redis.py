"""Shared Redis client for the monitor pub/sub channel."""

from loguru import logger
from redis.asyncio import Redis
from redis.exceptions import RedisError

from config.settings import settings

_redis_client: Redis | None = None


async def get_redis() -> Redis:
    global _redis_client
    if _redis_client is None:
        _redis_client = Redis.from_url(
            settings.redis_url,
            decode_responses=True,
            socket_connect_timeout=settings.redis_timeout,
            socket_timeout=settings.redis_timeout,
        )
    return _redis_client


async def close_redis() -> None:
    global _redis_client
    if _redis_client:
        await _redis_client.aclose()
        _redis_client = None


async def ping_redis() -> bool:
    try:
        client = await get_redis()
        return bool(await client.ping())
    except (RedisError, OSError) as e:
        logger.warning(f"[REDIS] Ping failed: {e}")
        return False
