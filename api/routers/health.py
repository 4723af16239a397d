"""
Health check endpoint.

Checks both Postgres (the job store) and Redis (commit locks).
Load balancers and container orchestrators use this to decide whether
the service is ready to receive traffic.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import text
from redis.asyncio import Redis

from api.dependencies import get_db, get_redis

router = APIRouter(tags=["health"])


@router.get("/health")
async def health_check(
    db: AsyncSession = Depends(get_db),
    redis: Redis = Depends(get_redis),
) -> dict:
    """Check that Postgres and Redis are reachable."""
    await db.execute(text("SELECT 1"))
    await redis.ping()

    return {"status": "healthy", "postgres": "ok", "redis": "ok"}
