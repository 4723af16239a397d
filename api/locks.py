"""
Per-job commit lock in Redis.

Inside one InteractionController, a job's next gesture waits for its
previous update to settle. Across API workers there is no shared
controller, so the same rule is enforced here instead:

    SET fieldservice:commit:<job_id> <token> NX EX <ttl>

If the key already exists another request is writing this job and the
caller gets a 409. The TTL frees the lock if a worker dies mid-request.
Release only deletes the key if it still holds our token, so a lock that
expired and was re-acquired by someone else is left alone.
"""

import logging
import uuid
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from redis.asyncio import Redis

from config.settings import settings

logger = logging.getLogger(__name__)

LOCK_KEY_PREFIX = "fieldservice:commit:"


def lock_key(job_id: str) -> str:
    return f"{LOCK_KEY_PREFIX}{job_id}"


class JobCommitLock:

    def __init__(self, redis: Redis, ttl_seconds: Optional[int] = None):
        self._redis = redis
        self._ttl = ttl_seconds or settings.COMMIT_LOCK_TTL_SECONDS

    async def acquire(self, job_id: str) -> Optional[str]:
        token = uuid.uuid4().hex
        acquired = await self._redis.set(lock_key(job_id), token, nx=True, ex=self._ttl)
        return token if acquired else None

    async def release(self, job_id: str, token: str) -> None:
        stored = await self._redis.get(lock_key(job_id))
        if stored is None:
            return
        stored = stored.decode() if isinstance(stored, bytes) else stored
        if stored == token:
            await self._redis.delete(lock_key(job_id))
        else:
            logger.warning(f"Commit lock for job {job_id} changed hands before release")

    @asynccontextmanager
    async def hold(self, job_id: str) -> AsyncIterator[bool]:
        """Yields True if this caller holds the lock for the duration of the block."""
        token = await self.acquire(job_id)
        try:
            yield token is not None
        finally:
            if token is not None:
                await self.release(job_id, token)
