"""Database engine and session ownership."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any

from sqlalchemy import event, text
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import Pool

from src.movieclub.core.config import Settings, get_settings
from src.movieclub.core.logging import get_logger

logger = get_logger(__name__)


def _enable_sqlite_foreign_keys(dbapi_connection: Any, connection_record: Any) -> None:
    """SQLite ships with foreign key enforcement off; cascades depend on it."""
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


class Database:
    """Owns the async engine (connection pool) and the session factory.

    Created once by the application lifespan (or injected by tests) and
    disposed during shutdown. Nothing else holds a reference to the pool.
    """

    def __init__(
        self,
        url: str,
        *,
        echo: bool = False,
        pool_size: int = 5,
        max_overflow: int = 10,
        poolclass: type[Pool] | None = None,
    ):
        self.url = url
        kwargs: dict[str, Any] = {"echo": echo}

        if url.startswith("sqlite"):
            kwargs["connect_args"] = {"check_same_thread": False}
        elif poolclass is None:
            kwargs.update(
                pool_size=pool_size,
                max_overflow=max_overflow,
                pool_pre_ping=True,
            )
        if poolclass is not None:
            kwargs["poolclass"] = poolclass

        self._engine: AsyncEngine = create_async_engine(url, **kwargs)
        if self.dialect_name == "sqlite":
            event.listen(self._engine.sync_engine, "connect", _enable_sqlite_foreign_keys)

        self._session_factory = async_sessionmaker(
            bind=self._engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
        )

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> "Database":
        """Build the application database from configuration."""
        settings = settings or get_settings()
        return cls(
            settings.database_url,
            echo=settings.database_echo,
            pool_size=settings.database_pool_size,
            max_overflow=settings.database_max_overflow,
        )

    @property
    def engine(self) -> AsyncEngine:
        return self._engine

    @property
    def dialect_name(self) -> str:
        return self._engine.dialect.name

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession]:
        """Open a session. Callers commit; anything left uncommitted is rolled back."""
        async with self._session_factory() as session:
            yield session

    async def ping(self) -> None:
        """Run a trivial query; raises if the database is unreachable."""
        async with self._engine.connect() as connection:
            await connection.execute(text("SELECT 1"))

    async def dispose(self) -> None:
        """Close every pooled connection. Call during shutdown."""
        await self._engine.dispose()
        logger.info("Database connections closed")
