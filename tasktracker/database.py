from __future__ import annotations

from collections.abc import AsyncGenerator

from fastapi import Request
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from tasktracker.config import Settings
from tasktracker.models import Base


def create_engine_from_settings(settings: Settings) -> AsyncEngine:
    """Build the process-wide connection pool.

    Capacity is fixed at startup; requests beyond it wait for a free
    connection (no overflow, no queue limit).
    """

    engine_kwargs: dict = {"pool_pre_ping": settings.db_pool_pre_ping}
    if not settings.database_url.startswith("sqlite"):
        engine_kwargs["pool_size"] = settings.db_pool_size
        engine_kwargs["max_overflow"] = 0

    return create_async_engine(settings.database_url, **engine_kwargs)


def create_session_maker(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, expire_on_commit=False, class_=AsyncSession)


async def init_db(engine: AsyncEngine) -> None:
    """Create all tables if they don't exist."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def get_db(request: Request) -> AsyncGenerator[AsyncSession, None]:
    # One session per request; closing it hands the connection back to the pool.
    async with request.app.state.session_maker() as session:
        yield session
