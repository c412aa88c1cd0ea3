"""Async database setup (SQLite via aiosqlite by default).

The engine and session factory are built explicitly at startup and handed to
the store; nothing here is created on import.
"""
from __future__ import annotations
import logging
import os
from datetime import datetime, timezone

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncEngine, AsyncSession
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from sqlalchemy import Integer, DateTime, LargeBinary, JSON

from tubeledger.core.config import settings
from tubeledger.core.errors import SchemaVersionError

logger = logging.getLogger(__name__)

SCHEMA_VERSION = 1


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    pass

class AchievementKeyORM(Base):
    """Ordered key-value region: fixed-width composite key -> serialized record."""
    __tablename__ = 'achievement_keys'
    key: Mapped[bytes] = mapped_column(LargeBinary, primary_key=True)
    record: Mapped[dict] = mapped_column(JSON)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow)

class SchemaVersionORM(Base):
    __tablename__ = 'schema_version'
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    version: Mapped[int] = mapped_column(Integer, default=SCHEMA_VERSION)
    applied_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow)


def _is_sqlite_memory(database_url: str) -> bool:
    url = make_url(database_url)
    return url.get_backend_name() == 'sqlite' and url.database in (None, '', ':memory:')


def _ensure_sqlite_dir(database_url: str) -> None:
    url = make_url(database_url)
    if url.get_backend_name() != 'sqlite' or _is_sqlite_memory(database_url):
        return
    directory = os.path.dirname(url.database)
    if directory:
        os.makedirs(directory, exist_ok=True)


def build_engine(database_url: str | None = None) -> AsyncEngine:
    database_url = database_url or settings.DATABASE_URL
    _ensure_sqlite_dir(database_url)
    if _is_sqlite_memory(database_url):
        # StaticPool: one shared connection, no pool sizing
        return create_async_engine(database_url, echo=False)
    return create_async_engine(
        database_url,
        echo=False,
        pool_size=settings.DB_POOL_SIZE,
        max_overflow=settings.DB_POOL_MAX_OVERFLOW,
    )


def build_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(bind=engine, expire_on_commit=False)


async def init_db(engine: AsyncEngine) -> int:
    """Create tables and make sure a schema version row exists. Returns the version."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
        res = await conn.exec_driver_sql("SELECT version FROM schema_version ORDER BY id DESC LIMIT 1")
        row = res.fetchone()
        if row:
            version = row[0]
            if version > SCHEMA_VERSION:
                raise SchemaVersionError(
                    f"Database schema version {version} is newer than supported version {SCHEMA_VERSION}"
                )
        else:
            await conn.execute(SchemaVersionORM.__table__.insert().values(version=SCHEMA_VERSION))
            version = SCHEMA_VERSION
    logger.info("Database schema ensured (version %s)", version)
    return version

