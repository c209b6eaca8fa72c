"""Database connection and session management."""

from collections.abc import AsyncGenerator
from pathlib import Path

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from tntsearch.core.config import settings
from tntsearch.database.models import Base

# Lazy database initialization - don't create engine at import time
engine: AsyncEngine | None = None
async_session_factory: async_sessionmaker[AsyncSession] | None = None


def to_async_url(database_url: str) -> str:
    """Rewrite a database URL to use an asyncio driver.

    Args:
        database_url: URL as configured, e.g. ``sqlite:///data/tntsearch.db``

    Returns:
        The same URL with ``aiosqlite`` or ``asyncpg`` as driver
    """
    if database_url.startswith("sqlite:"):
        return database_url.replace("sqlite:", "sqlite+aiosqlite:", 1)
    if database_url.startswith("postgresql+psycopg2://"):
        return database_url.replace(
            "postgresql+psycopg2://", "postgresql+asyncpg://", 1
        )
    if database_url.startswith("postgresql://"):
        return database_url.replace("postgresql://", "postgresql+asyncpg://", 1)
    if database_url.startswith("postgres://"):
        return database_url.replace("postgres://", "postgresql+asyncpg://", 1)
    return database_url


def _ensure_sqlite_directory(database_url: str) -> None:
    """Create the parent directory of a file based SQLite database."""
    url = make_url(database_url)
    if url.get_backend_name() != "sqlite":
        return
    if not url.database or url.database == ":memory:":
        return
    Path(url.database).parent.mkdir(parents=True, exist_ok=True)


def create_engine(database_url: str, echo: bool = False) -> AsyncEngine:
    """Create an async engine for the given URL."""
    async_url = to_async_url(database_url)
    _ensure_sqlite_directory(async_url)
    return create_async_engine(async_url, echo=echo)


def create_session_factory(bind: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Create a session factory bound to an engine."""
    return async_sessionmaker(
        bind,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


def configure_database(
    database_url: str | None = None, echo: bool | None = None
) -> None:
    """(Re)initialize the module level engine and session factory.

    Args:
        database_url: URL to connect to, defaults to ``settings.DATABASE_URL``
        echo: Log SQL statements, defaults to ``settings.DB_ECHO``
    """
    global engine, async_session_factory

    engine = create_engine(
        database_url or settings.DATABASE_URL,
        echo=settings.DB_ECHO if echo is None else echo,
    )
    async_session_factory = create_session_factory(engine)


def _initialize_database() -> None:
    """Initialize database engine and session factory on first use."""
    if engine is not None:
        return  # Already initialized
    configure_database()


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """Return the session factory, initializing the database if needed."""
    _initialize_database()
    if async_session_factory is None:
        raise RuntimeError("Database not initialized - cannot create session")
    return async_session_factory


async def init_models() -> None:
    """Create the catalog tables if they do not exist."""
    _initialize_database()
    assert engine is not None
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def dispose_engine() -> None:
    """Close all pooled connections and forget the engine."""
    global engine, async_session_factory

    if engine is not None:
        await engine.dispose()
    engine = None
    async_session_factory = None


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """Get database session.

    Yields:
        AsyncSession: Database session
    """
    session_factory = get_session_factory()

    async with session_factory() as session:
        try:
            yield session
        finally:
            await session.close()
