"""
Async SQLAlchemy engine and session factory.

``Database`` owns one engine; whoever creates it disposes it.  SQLite
(``aiosqlite``) is the default driver; any async URL SQLAlchemy accepts
works, e.g. ``postgresql+asyncpg://...``.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.pool import StaticPool


class Base(DeclarativeBase):
    """Shared declarative base for all ORM models."""


class Database:
    def __init__(self, url: str, echo: bool = False):
        engine_kwargs: dict = {"echo": echo}
        if url.startswith("sqlite") and ":memory:" in url:
            # One shared connection, otherwise every session sees an empty DB
            engine_kwargs["poolclass"] = StaticPool
            engine_kwargs["connect_args"] = {"check_same_thread": False}

        self.url = url
        self.engine = create_async_engine(url, **engine_kwargs)
        self.session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    async def create_all(self) -> None:
        # Registers the tables on Base.metadata
        from . import models  # noqa: F401

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def drop_all(self) -> None:
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)

    async def dispose(self) -> None:
        await self.engine.dispose()

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        """Yield a session; commit on success, rollback on error."""
        async with self.session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    async def __aenter__(self) -> "Database":
        return self

    async def __aexit__(self, *args) -> None:
        await self.dispose()
