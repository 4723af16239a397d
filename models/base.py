"""
SQLAlchemy engine and session factories.

Only the async engine exists: the API and the update collaborator both run
on the event loop, and the scheduling core itself never touches the
database (it receives plain dataclasses from store/repository.py).
"""

from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker

from config.settings import settings


class Base(DeclarativeBase):
    """Base class for all ORM models. SQLAlchemy uses this to track table metadata."""
    pass


async_engine = create_async_engine(settings.database_url, echo=False)
AsyncSessionLocal = async_sessionmaker(async_engine, expire_on_commit=False)
