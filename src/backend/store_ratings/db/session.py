"""
Async engine and per-request sessions.

One AsyncSession per request via the ``get_session`` dependency. SQLite
connections get ``PRAGMA foreign_keys=ON`` so review rows cascade with their
store the same way they do on Postgres.
"""
from typing import AsyncIterator

from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from store_ratings.core.config import settings


def _enable_sqlite_fks(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def make_engine(url: str, echo: bool = False) -> AsyncEngine:
    if url.startswith("sqlite"):
        # NullPool: every session opens its own aiosqlite connection
        eng = create_async_engine(url, echo=echo, poolclass=NullPool)
        event.listen(eng.sync_engine, "connect", _enable_sqlite_fks)
        return eng
    return create_async_engine(url, echo=echo, pool_size=10, max_overflow=15, pool_pre_ping=True)


engine = make_engine(settings.DATABASE_URL, echo=settings.SQL_ECHO)
SessionLocal = async_sessionmaker(engine, expire_on_commit=False)


async def get_session() -> AsyncIterator[AsyncSession]:
    async with SessionLocal() as session:
        yield session


async def create_tables(bind: AsyncEngine | None = None) -> None:
    from store_ratings.db.base import Base
    import store_ratings.models  # noqa: F401  registers every table on Base.metadata

    async with (bind or engine).begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
