"""
FastAPI application factory.

This file:
1. Creates the FastAPI app
2. Runs startup logic (create DB tables, connect to Redis)
3. Registers all routers (health, technicians, jobs, scheduler)
4. Runs shutdown logic (close connections)

The scheduling core itself is framework-free (see scheduler/); this app
is the thin service around it: the job store, its update endpoint, and
endpoints that run grid projections and gestures against a snapshot.

To run:  uvicorn api.main:app --host 0.0.0.0 --port 8000 --reload
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from redis.asyncio import Redis as AsyncRedis

from config.settings import settings
from models.base import async_engine, Base
from api.routers import health, technicians, jobs, scheduler

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Startup:
    - Creates all DB tables if they don't exist (safe to run multiple times)
    - Connects to Redis (per-job commit locks)

    Shutdown:
    - Closes Redis connection
    - Disposes the DB engine (closes connection pool)
    """
    # ── Startup ─────────────────────────────────────────────────
    logger.info("Creating database tables...")
    async with async_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    app.state.redis = AsyncRedis.from_url(settings.redis_url)
    logger.info(
        f"API ready — grid band {settings.DAY_START_HOUR}:00-{settings.DAY_END_HOUR}:00, "
        f"display zone {settings.DISPLAY_TIMEZONE}"
    )

    yield

    # ── Shutdown ────────────────────────────────────────────────
    await app.state.redis.close()
    await async_engine.dispose()
    logger.info("API shut down")


def create_app() -> FastAPI:
    """Factory function that builds and configures the FastAPI application."""
    app = FastAPI(
        title="Field Service Scheduler",
        description="Technician scheduling grid with conflict detection, drag-to-reschedule and resize",
        version="1.0.0",
        lifespan=lifespan,
    )

    app.include_router(health.router)
    app.include_router(technicians.router)
    app.include_router(jobs.router)
    app.include_router(scheduler.router)

    return app


# This is what uvicorn imports: `uvicorn api.main:app`
app = create_app()
