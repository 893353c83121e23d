"""Infrastructure resources: relational database.

This module is part of the infra layer and must not import from application features.
"""
import asyncio
from pathlib import Path
from typing import Optional

from sqlalchemy import event
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase


class DatabaseResource:
    """Database resource for dependency injection."""

    def __init__(self, database_url: str, echo: bool = False):
        self.database_url = database_url
        self.echo = echo
        self.engine: Optional[AsyncEngine] = None
        self.session_factory: Optional[async_sessionmaker[AsyncSession]] = None
        self._schema_ready = False
        self._schema_lock = asyncio.Lock()

    @property
    def is_sqlite(self) -> bool:
        return make_url(self.database_url).get_backend_name() == "sqlite"

    async def init(self):
        """Initialize database connection."""
        if self.engine is not None:
            return self
        if self.is_sqlite:
            self._ensure_sqlite_file()
            self.engine = create_async_engine(self.database_url, echo=self.echo)
            event.listen(self.engine.sync_engine, "connect", _enable_sqlite_foreign_keys)
        else:
            self.engine = create_async_engine(
                self.database_url,
                echo=self.echo,
                pool_pre_ping=True,
                pool_recycle=3600,
            )
        self.session_factory = async_sessionmaker(
            bind=self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )
        return self

    async def init_schema(self, base: type[DeclarativeBase]) -> None:
        """Create missing tables. Safe to call repeatedly."""
        if self._schema_ready:
            return
        async with self._schema_lock:
            # Another caller may have finished while this one waited
            if self._schema_ready:
                return
            await self.init()
            assert self.engine is not None
            async with self.engine.begin() as conn:
                await conn.run_sync(base.metadata.create_all)
            self._schema_ready = True

    def get_session(self) -> AsyncSession:
        """Get database session (synchronous accessor)."""
        if self.session_factory is None:
            raise RuntimeError("Database not initialized. Call init() first.")
        return self.session_factory()

    async def shutdown(self):
        """Shutdown database connection."""
        if self.engine:
            await self.engine.dispose()
        self.engine = None
        self.session_factory = None
        self._schema_ready = False

    def _ensure_sqlite_file(self) -> None:
        database = make_url(self.database_url).database
        if not database or database == ":memory:":
            return
        path = Path(database)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.touch(exist_ok=True)


def _enable_sqlite_foreign_keys(dbapi_connection, _connection_record):
    # SQLite ignores ON DELETE CASCADE unless this is set per connection
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()
