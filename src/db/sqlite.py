"""
SQLite storage for orders and their history.
Uses async SQLAlchemy over aiosqlite.
"""

import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncGenerator, Optional

from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from src.config import settings
from src.db.models import Base

logger = logging.getLogger(__name__)

# Seconds a writer waits on a locked database before OperationalError
BUSY_TIMEOUT = 15


def _sqlite_file(url: str) -> Optional[Path]:
    """Database file behind a sqlite URL, None for in-memory databases."""
    if not url.startswith("sqlite") or ":memory:" in url:
        return None
    # sqlite+aiosqlite:///C:/path/to/db.db or sqlite+aiosqlite:///path/to/db.db
    return Path(url.split("///", 1)[-1])


def _on_connect(dbapi_connection, connection_record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.execute("PRAGMA journal_mode=WAL")
    cursor.close()


class Database:
    """Engine and session factory for the order store."""

    def __init__(self, url: Optional[str] = None, echo: Optional[bool] = None):
        self.url = url or settings.db_url
        self.echo = settings.debug if echo is None else echo
        self._engine: Optional[AsyncEngine] = None
        self._session_factory: Optional[async_sessionmaker[AsyncSession]] = None

    async def init(self) -> None:
        """Create the engine and the orders / order_history tables."""
        db_file = _sqlite_file(self.url)
        if db_file is not None:
            db_file.parent.mkdir(parents=True, exist_ok=True)

        self._engine = create_async_engine(
            self.url,
            echo=self.echo,
            connect_args={"timeout": BUSY_TIMEOUT},
        )
        event.listen(self._engine.sync_engine, "connect", _on_connect)

        self._session_factory = async_sessionmaker(
            bind=self._engine,
            expire_on_commit=False,
            autoflush=False,
        )

        async with self._engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

        logger.info(f"Order database ready at {db_file or self.url}")

    async def close(self) -> None:
        if self._engine:
            await self._engine.dispose()
            self._engine = None
            self._session_factory = None

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """
        Transactional session.

        Commits when the block exits normally, rolls back on any error.
        """
        if not self._session_factory:
            raise RuntimeError("Database.init() must be awaited before opening sessions")

        session = self._session_factory()
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


# Global database instance
db = Database()
