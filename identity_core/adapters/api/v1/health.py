"""Health check endpoint.

Reports the reachability of PostgreSQL and Redis. The service is healthy
when the database answers; Redis only affects token issuance and refresh.
"""

import asyncio
from datetime import datetime, timezone
from typing import Any, Dict

import structlog
from fastapi import APIRouter, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from redis.asyncio import Redis
from redis.exceptions import RedisError
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from identity_core.core.config.settings import settings
from identity_core.infrastructure.database.async_db import engine

logger = structlog.get_logger(__name__)
router = APIRouter()


class HealthResponse(BaseModel):
    status: str
    env: str
    services: Dict[str, Any]
    timestamp: datetime


async def check_redis_health() -> Dict[str, Any]:
    """Check Redis connection health."""
    redis_client = Redis.from_url(settings.REDIS_URL, decode_responses=True)
    try:
        await redis_client.ping()
        return {"status": "healthy"}
    except (RedisError, OSError) as e:
        logger.error("redis_health_check_failed", error_type=type(e).__name__)
        return {"status": "unhealthy"}
    finally:
        await redis_client.aclose()


async def check_database_health() -> Dict[str, Any]:
    """Check database connection health."""
    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
        return {"status": "healthy"}
    except (SQLAlchemyError, OSError) as e:
        logger.error("database_health_check_failed", error_type=type(e).__name__)
        return {"status": "unhealthy"}


@router.get("", response_model=HealthResponse)
async def health_check():
    redis_health, db_health = await asyncio.gather(check_redis_health(), check_database_health())
    healthy = db_health["status"] == "healthy"
    body = HealthResponse(
        status="ok" if healthy else "degraded",
        env=settings.APP_ENV,
        services={"database": db_health, "redis": redis_health},
        timestamp=datetime.now(timezone.utc),
    )
    return JSONResponse(
        status_code=status.HTTP_200_OK if healthy else status.HTTP_503_SERVICE_UNAVAILABLE,
        content=body.model_dump(mode="json"),
    )
