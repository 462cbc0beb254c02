"""
Database engine and session handling.

The engine is owned by the application lifespan and kept on ``app.state``;
request handlers receive an AsyncSession through ``Depends(get_db_session)``.
"""
from typing import AsyncIterator
from fastapi import Request
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

Base = declarative_base()


def create_engine(database_url: str) -> AsyncEngine:
    """
    Create an async SQLAlchemy engine.

    In-memory SQLite databases use a StaticPool so every session sees the
    same database.
    """
    kwargs = {}
    if database_url.startswith("sqlite"):
        kwargs["connect_args"] = {"check_same_thread": False}
        if ":memory:" in database_url:
            kwargs["poolclass"] = StaticPool
    return create_async_engine(database_url, echo=False, future=True, **kwargs)


def create_session_factory(engine: AsyncEngine) -> sessionmaker:
    return sessionmaker(engine, expire_on_commit=False, class_=AsyncSession)


async def init_db(engine: AsyncEngine):
    """Create missing tables."""
    # Import models so they register on Base.metadata
    from arkiart.auth import models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def get_db_session(request: Request) -> AsyncIterator[AsyncSession]:
    """Dependency for getting a database session."""
    async with request.app.state.session_factory() as session:
        yield session
