"""Async engine and session management."""

from sqlalchemy import event, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from forum_search.config import DatabaseSettings, get_settings
from forum_search.db.models import Base
from forum_search.logging_config import get_logger

logger = get_logger(__name__)


class Database:
    """Owns the engine and session factory for the relational store."""

    def __init__(
        self,
        settings: DatabaseSettings | None = None,
        engine: AsyncEngine | None = None,
    ) -> None:
        """Initialize the database.

        Args:
            settings: Database configuration.
            engine: Existing engine (for testing).
        """
        self._settings = settings or get_settings().database
        self._engine = engine or self._create_engine()
        self._session_factory = async_sessionmaker(
            self._engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    def _create_engine(self) -> AsyncEngine:
        url = self._settings.url
        kwargs: dict[str, object] = {"echo": self._settings.echo}
        # An in-memory SQLite database lives only as long as its connection.
        if url.startswith("sqlite") and ":memory:" in url:
            kwargs["poolclass"] = StaticPool
            kwargs["connect_args"] = {"check_same_thread": False}
        engine = create_async_engine(url, **kwargs)
        if url.startswith("sqlite"):
            event.listen(engine.sync_engine, "connect", _enable_sqlite_foreign_keys)
        return engine

    @property
    def engine(self) -> AsyncEngine:
        return self._engine

    def session(self) -> AsyncSession:
        """Open a new session; use as an async context manager."""
        return self._session_factory()

    async def create_all(self) -> None:
        """Create every table that does not exist yet."""
        async with self._engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Database schema created")

    async def ping(self) -> bool:
        """Check that the database answers a trivial query."""
        try:
            async with self._engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
        except SQLAlchemyError as e:
            logger.warning(f"Database ping failed: {e}")
            return False
        return True

    async def close(self) -> None:
        await self._engine.dispose()


def _enable_sqlite_foreign_keys(dbapi_connection: object, _connection_record: object) -> None:
    """SQLite ignores ON DELETE CASCADE unless foreign keys are switched on."""
    cursor = dbapi_connection.cursor()  # type: ignore[attr-defined]
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()
