"""Database-backed implementation of PersistenceMedium using a slot table."""

from __future__ import annotations

from datetime import UTC, datetime

from sqlalchemy import DateTime, String, Text, delete
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Base class for all ORM models."""


class SlotEntry(Base):
    """One persisted cluster slot."""

    __tablename__ = "cache_slots"

    key: Mapped[str] = mapped_column(String(512), primary_key=True)
    value: Mapped[str] = mapped_column(Text, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=lambda: datetime.now(UTC),
        onupdate=lambda: datetime.now(UTC),
    )


def create_engine(database_url: str) -> AsyncEngine:
    """Create an async SQLAlchemy engine for the slot table."""
    if database_url.startswith("sqlite"):
        return create_async_engine(
            database_url,
            echo=False,
            connect_args={"check_same_thread": False},
        )
    return create_async_engine(database_url, echo=False, pool_size=5, max_overflow=10)


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Create an async session factory bound to the given engine."""
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


async def init_db(engine: AsyncEngine) -> None:
    """Create the slot table if it does not exist."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


class DatabaseMedium:
    """Persistent medium storing each slot as a row."""

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        engine: AsyncEngine | None = None,
    ) -> None:
        """Initialize with a session factory and, optionally, the engine to own."""
        self._session_factory = session_factory
        self._engine = engine

    async def get_string(self, key: str) -> str | None:
        """Retrieve a value by key, or None if missing."""
        async with self._session_factory() as session:
            entry = await session.get(SlotEntry, key)
            if entry is None:
                return None
            return entry.value

    async def set(self, key: str, value: str) -> None:
        """Insert or replace a slot."""
        async with self._session_factory() as session:
            entry = await session.get(SlotEntry, key)
            if entry is None:
                session.add(SlotEntry(key=key, value=value))
            else:
                entry.value = value
            await session.commit()

    async def delete(self, key: str) -> None:
        """Delete a slot."""
        async with self._session_factory() as session:
            entry = await session.get(SlotEntry, key)
            if entry is None:
                return
            await session.delete(entry)
            await session.commit()

    async def clear(self) -> None:
        """Delete every slot."""
        async with self._session_factory() as session:
            await session.execute(delete(SlotEntry))
            await session.commit()

    async def close(self) -> None:
        """Dispose the owned engine, if any."""
        if self._engine is not None:
            await self._engine.dispose()
