# app/database/connection.py
import logging
from typing import AsyncIterator, Optional

from fastapi import Request
from sqlalchemy import event
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import declarative_base
from sqlalchemy.pool import NullPool

logger = logging.getLogger(__name__)

Base = declarative_base()


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    # SQLite ignores ON DELETE rules unless asked per connection
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


class Database:
    """
    Lazily-initialized engine + session factory.

    One instance lives on `app.state.database`; the engine (and its pool)
    is only created when the first session is requested.
    """

    def __init__(self, url: str, echo: bool = False, pool_size: int = 10):
        self.url = url
        self.echo = echo
        self.pool_size = pool_size
        self._engine: Optional[AsyncEngine] = None
        self._sessionmaker: Optional[async_sessionmaker[AsyncSession]] = None

    @property
    def engine(self) -> AsyncEngine:
        if self._engine is None:
            if self.url.startswith("sqlite"):
                # SQLite connections must not be shared across event loops
                self._engine = create_async_engine(self.url, echo=self.echo, poolclass=NullPool)
                event.listen(self._engine.sync_engine, "connect", _enable_sqlite_foreign_keys)
            else:
                self._engine = create_async_engine(
                    self.url, echo=self.echo, pool_size=self.pool_size, pool_pre_ping=True
                )
            logger.info(f"Database engine created for {self._engine.url.render_as_string(hide_password=True)}")
        return self._engine

    @property
    def sessionmaker(self) -> async_sessionmaker[AsyncSession]:
        if self._sessionmaker is None:
            self._sessionmaker = async_sessionmaker(
                bind=self.engine, autoflush=False, expire_on_commit=False
            )
        return self._sessionmaker

    def session(self) -> AsyncSession:
        return self.sessionmaker()

    async def create_all(self) -> None:
        """Create any missing tables for every registered model."""
        import app.model_registry  # noqa: F401

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def dispose(self) -> None:
        if self._engine is not None:
            await self._engine.dispose()
            logger.info("Database engine disposed")
        self._engine = None
        self._sessionmaker = None


# ---------------- get_db for FastAPI dependencies ----------------
async def get_db(request: Request) -> AsyncIterator[AsyncSession]:
    database: Database = request.app.state.database
    async with database.session() as db:
        yield db
