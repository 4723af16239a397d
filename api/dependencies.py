"""
FastAPI dependency injection.

How this works:
- An endpoint declares `db: AsyncSession = Depends(get_db)`
- FastAPI calls get_db() before your endpoint runs, creating a DB session
- Your endpoint receives the session and uses it
- After the endpoint returns (or raises), the session is automatically closed

get_updater builds the update collaborator on top of the request's own
session, so the snapshot a gesture reads and the write it commits go
through the same unit of work.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession
from redis.asyncio import Redis

from models.base import AsyncSessionLocal
from store.updater import SqlJobUpdater


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Yields an async database session, auto-closes when the request ends."""
    async with AsyncSessionLocal() as session:
        yield session


async def get_redis(request: Request) -> Redis:
    """Returns the Redis client stored on the app during startup."""
    return request.app.state.redis


def _borrowed(session: AsyncSession):
    """Session factory that hands out the request's session without closing it."""
    @asynccontextmanager
    async def scope():
        yield session
    return scope


async def get_updater(db: AsyncSession = Depends(get_db)) -> SqlJobUpdater:
    return SqlJobUpdater(_borrowed(db))
