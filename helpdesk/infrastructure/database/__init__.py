"""
Database Infrastructure
=======================

Manages the database engine, session lifecycle, and table creation.

Uses SQLAlchemy 2.0 async (asyncpg for PostgreSQL, aiosqlite for SQLite).

The engine lives on a `Database` handle created during application startup
and disposed at shutdown. The handle is stored on `app.state.database` and
reaches request handlers through the `get_session` dependency, so nothing
in the process holds an implicit global connection.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import Request
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.pool import StaticPool

from helpdesk.config import Settings


class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy models.

    SQLAlchemy 2.0 style using DeclarativeBase.
    """
    pass


class Database:
    """Owns one async engine and its session factory."""

    def __init__(self, url: str, echo: bool = False, pool_size: int = 5, max_overflow: int = 10):
        self.url = url

        if url.startswith("sqlite"):
            engine_kwargs: dict = {"connect_args": {"check_same_thread": False}}
            if ":memory:" in url or url.rstrip("/").endswith("sqlite+aiosqlite:"):
                # One shared connection, otherwise every session sees an empty database.
                engine_kwargs["poolclass"] = StaticPool
        else:
            # Fix asyncpg SSL: replace sslmode with ssl for asyncpg compatibility
            url = url.replace("sslmode=", "ssl=")
            engine_kwargs = {
                "pool_size": pool_size,
                "max_overflow": max_overflow,
                "pool_pre_ping": True,
            }

        self._engine: Optional[AsyncEngine] = create_async_engine(url, echo=echo, **engine_kwargs)
        self._session_maker: Optional[async_sessionmaker[AsyncSession]] = async_sessionmaker(
            bind=self._engine,
            class_=AsyncSession,
            expire_on_commit=False,  # Prevent lazy loading after commit
            autoflush=False,
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "Database":
        return cls(
            settings.database_url,
            echo=settings.debug,
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
        )

    @property
    def engine(self) -> AsyncEngine:
        if self._engine is None:
            raise RuntimeError("Database has been closed")
        return self._engine

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """
        Async context manager for a unit of work.

        Commits when the block exits normally, rolls back on any exception.

        Usage:
            async with database.session() as session:
                result = await session.execute(select(UserModel))
        """
        if self._session_maker is None:
            raise RuntimeError("Database has been closed")

        async with self._session_maker() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    async def create_tables(self) -> None:
        """
        Create all database tables.

        Production deployments should manage the schema with migrations.
        """
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def drop_tables(self) -> None:
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)

    async def close(self) -> None:
        """Dispose of pooled connections."""
        if self._engine is not None:
            await self._engine.dispose()
            self._engine = None
            self._session_maker = None


def get_database(request: Request) -> Database:
    """Return the handle attached to the running application."""
    database = getattr(request.app.state, "database", None)
    if database is None:
        raise RuntimeError("Database not initialized")
    return database


async def get_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """
    Session dependency for FastAPI's Depends().

    Usage in FastAPI:
        @router.get("/users")
        async def list_users(session: AsyncSession = Depends(get_session)):
            ...
    """
    async with get_database(request).session() as session:
        yield session
