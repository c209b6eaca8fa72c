"""Application startup and shutdown events."""

from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import Any

from tntsearch.core import db
from tntsearch.core.config import Settings, settings
from tntsearch.core.logging import configure_logging, get_logger
from tntsearch.ingest.bootstrap import BootstrapResult, bootstrap_catalog

logger = get_logger(__name__)


@dataclass
class CatalogState:
    """State kept on ``app.state.catalog`` after startup."""

    bootstrap: BootstrapResult | None = None


def create_start_app_handler(
    app: Any, app_settings: Settings = settings
) -> Callable[[], Awaitable[None]]:
    """Create startup event handler.

    The handler creates the schema and seeds an empty catalog before the
    application starts serving requests.

    Args:
        app: FastAPI application instance
        app_settings: Settings to start with

    Returns:
        Startup handler function
    """

    async def start_app() -> None:
        configure_logging(
            level=app_settings.LOG_LEVEL, json_logs=app_settings.JSON_LOGS
        )

        await db.init_models()
        result = await bootstrap_catalog(
            db.get_session_factory(),
            app_settings.CSV_PATH,
            app_settings.INGEST_BATCH_SIZE,
        )
        app.state.catalog = CatalogState(bootstrap=result)

        logger.info(
            "application_startup_complete",
            ingested=result.ingested,
            torrents=result.existing or result.inserted,
        )

    return start_app


def create_stop_app_handler(app: Any) -> Callable[[], Awaitable[None]]:
    """Create shutdown event handler.

    Args:
        app: FastAPI application instance

    Returns:
        Shutdown handler function
    """

    async def stop_app() -> None:
        logger.info("closing_database_connections")
        await db.dispose_engine()
        logger.info("application_shutdown_complete")

    return stop_app


def create_lifespan(
    app_settings: Settings = settings,
) -> Callable[[Any], Any]:
    """Build a lifespan context running the startup and shutdown handlers."""

    @asynccontextmanager
    async def lifespan(app: Any) -> AsyncIterator[None]:
        await create_start_app_handler(app, app_settings)()
        try:
            yield
        finally:
            await create_stop_app_handler(app)()

    return lifespan
