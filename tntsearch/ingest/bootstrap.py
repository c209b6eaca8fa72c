"""Seed the catalog from the dump when the store is empty."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from pathlib import Path

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from tntsearch.core.exceptions import BatchWriteFailure, SourceUnreadable
from tntsearch.core.logging import get_logger
from tntsearch.database.repositories import TorrentRepository

from .pipeline import DEFAULT_BATCH_SIZE, ChunkWriter, IngestReport, ingest_dump

logger = get_logger(__name__)

Loader = Callable[[str | Path, ChunkWriter, int], Awaitable[IngestReport]]


@dataclass(frozen=True)
class BootstrapResult:
    """What happened to the catalog at startup."""

    existing: int
    ingested: bool
    inserted: int = 0
    skipped: int = 0
    error: str | None = None


async def bootstrap_catalog(
    session_factory: async_sessionmaker[AsyncSession],
    csv_path: str | Path,
    batch_size: int = DEFAULT_BATCH_SIZE,
    loader: Loader = ingest_dump,
) -> BootstrapResult:
    """Load the dump only if the catalog holds no torrents yet.

    The dump is a one-time seed: a populated store is left untouched and
    ``loader`` is not called. A failed load is logged and reported, never
    raised, so the service can start over an incomplete catalog.

    Args:
        session_factory: Factory for the session used to count and insert
        csv_path: Location of the dump
        batch_size: Records per inserted chunk
        loader: Ingestion entry point

    Returns:
        Summary of the decision and of the load, if any
    """
    async with session_factory() as session:
        repository = TorrentRepository(session)
        existing = await repository.count()
        if existing:
            logger.info("catalog_already_loaded", torrents=existing)
            return BootstrapResult(existing=existing, ingested=False)

        logger.info("catalog_empty_loading_dump", csv_path=str(csv_path))
        try:
            report = await loader(csv_path, repository, batch_size)
        except (SourceUnreadable, BatchWriteFailure) as exc:
            logger.warning(
                "catalog_load_failed",
                csv_path=str(csv_path),
                error=str(exc),
                inserted=exc.inserted,
            )
            return BootstrapResult(
                existing=0, ingested=True, inserted=exc.inserted, error=str(exc)
            )

    return BootstrapResult(
        existing=0,
        ingested=True,
        inserted=report.inserted,
        skipped=report.skipped,
    )
