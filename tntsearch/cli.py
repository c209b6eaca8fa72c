"""Command-line interface for the catalog."""

import asyncio
import json

import click

from tntsearch.core import db
from tntsearch.core.categories import ANY_CATEGORY
from tntsearch.core.config import settings
from tntsearch.core.logging import configure_logging
from tntsearch.database.repositories import TorrentRepository
from tntsearch.ingest.bootstrap import BootstrapResult, bootstrap_catalog
from tntsearch.models.torrent import Torrent


async def _load(csv_path: str, batch_size: int) -> BootstrapResult:
    try:
        await db.init_models()
        return await bootstrap_catalog(db.get_session_factory(), csv_path, batch_size)
    finally:
        await db.dispose_engine()


async def _search(
    keywords: str, category: int, page: int, page_size: int
) -> list[Torrent]:
    try:
        await db.init_models()
        session_factory = db.get_session_factory()
        async with session_factory() as session:
            repository = TorrentRepository(session)
            return await repository.search(keywords, category, page, page_size)
    finally:
        await db.dispose_engine()


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
def cli(verbose: bool) -> None:
    """Search engine for the TNTVillage release dump."""
    configure_logging(
        level="debug" if verbose else settings.LOG_LEVEL,
        json_logs=settings.JSON_LOGS,
    )


@cli.command()
@click.option(
    "--csv-path",
    "-c",
    default=lambda: settings.CSV_PATH,
    show_default="CSV_PATH setting",
    help="Path of the release dump",
)
@click.option(
    "--batch-size",
    "-b",
    default=lambda: settings.INGEST_BATCH_SIZE,
    type=click.IntRange(min=1),
    show_default="INGEST_BATCH_SIZE setting",
    help="Rows inserted per transaction",
)
def load(csv_path: str, batch_size: int) -> None:
    """Seed an empty catalog from the dump."""
    result = asyncio.run(_load(csv_path, batch_size))

    if not result.ingested:
        click.echo(f"Catalog already contains {result.existing} torrents")
        return
    if result.error:
        click.echo(f"Load failed after {result.inserted} torrents: {result.error}")
        raise SystemExit(1)
    click.echo(f"Loaded {result.inserted} torrents ({result.skipped} rows skipped)")


@cli.command()
@click.argument("keywords", default="")
@click.option("--category", "-k", default=ANY_CATEGORY, type=int, help="Category code")
@click.option("--page", "-p", default=1, type=int, help="Page number")
@click.option(
    "--page-size",
    "-n",
    default=lambda: settings.PAGE_SIZE,
    type=click.IntRange(min=1),
    help="Results per page",
)
def search(keywords: str, category: int, page: int, page_size: int) -> None:
    """Print matching torrents as JSON lines, newest first."""
    torrents = asyncio.run(_search(keywords, category, max(page, 1), page_size))
    for torrent in torrents:
        click.echo(json.dumps(torrent.model_dump(mode="json"), ensure_ascii=False))


@cli.command()
@click.option("--host", default=lambda: settings.HOST, help="Interface to bind")
@click.option("--port", default=lambda: settings.PORT, type=int, help="Port to bind")
def serve(host: str, port: int) -> None:
    """Run the HTTP API."""
    import uvicorn

    uvicorn.run("tntsearch.main:app", host=host, port=port)


if __name__ == "__main__":
    cli()
