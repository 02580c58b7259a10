"""
Redis Connection Module

Provides the asynchronous Redis client the token issuer uses to track
outstanding refresh tokens. The client is exposed as a FastAPI dependency and
closed after the request.

**Security Note**: Ensure that REDIS_URL uses ``rediss://`` when connecting
over an untrusted network, and never log it; it may embed the password.
"""

from typing import AsyncGenerator

import structlog
from redis.asyncio import Redis

from identity_core.core.config.settings import settings

logger = structlog.get_logger(__name__)


async def get_redis() -> AsyncGenerator[Redis, None]:
    """
    Provides an asynchronous Redis client.

    Yields:
        Redis: An asynchronous Redis client instance.
    """
    redis = Redis.from_url(settings.REDIS_URL, encoding="utf-8", decode_responses=True)
    logger.debug("Redis connection created")
    try:
        yield redis
    finally:
        await redis.aclose()
        logger.debug("Redis connection closed")
