"""Async SQLAlchemy engine, session factory and declarative base."""

from sqlalchemy.ext.asyncio import AsyncEngine, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Declarative base for all ORM models."""


def get_engine(database_url: str, **kwargs) -> AsyncEngine:
    """Create an async engine for the given URL."""
    return create_async_engine(database_url, echo=False, future=True, **kwargs)


def get_session_factory(engine: AsyncEngine) -> async_sessionmaker:
    """Session factory; objects stay usable after commit."""
    return async_sessionmaker(bind=engine, expire_on_commit=False)


async def create_all(engine: AsyncEngine) -> None:
    """Create all tables. Used for SQLite development databases and tests;
    PostgreSQL deployments run the alembic migrations instead."""
    import shuttle.models  # noqa: F401  registers the mappers

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
