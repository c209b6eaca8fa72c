"""Bulk loading of the release dump into the store."""

import csv
from collections.abc import Iterable, Iterator, Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Protocol

from sqlalchemy.exc import SQLAlchemyError

from tntsearch.core.exceptions import BatchWriteFailure, SourceUnreadable
from tntsearch.core.logging import get_logger
from tntsearch.core.metrics import INGESTED_ROWS, SKIPPED_ROWS
from tntsearch.models.torrent import TorrentCreate

from .parser import SkippedRow, parse_row

logger = get_logger(__name__)

DEFAULT_BATCH_SIZE = 1000

# Descriptions can be far longer than the csv module default of 128 KiB.
FIELD_SIZE_LIMIT = 2**31 - 1


class ChunkWriter(Protocol):
    """Anything able to persist a chunk of records in one transaction."""

    async def bulk_create(self, records: Sequence[TorrentCreate]) -> int: ...


@dataclass
class IngestReport:
    """Outcome of a completed ingestion."""

    inserted: int = 0
    skipped: int = 0
    diagnostics: list[str] = field(default_factory=list)

    def record_skip(self, skipped: SkippedRow) -> None:
        self.skipped += 1
        if not skipped.silent:
            self.diagnostics.append(f"row {skipped.row}: {skipped.message}")


def read_dump(path: str | Path) -> Iterator[list[str]]:
    """Yield the rows of a comma separated dump, header included.

    Leading whitespace in fields is dropped; quoting and embedded commas
    are handled by the csv reader.

    Raises:
        SourceUnreadable: If the file cannot be opened or decoded
    """
    try:
        handle = open(path, newline="", encoding="utf-8", errors="replace")
    except OSError as exc:
        raise SourceUnreadable(f"failed to open dump {path}: {exc}") from exc

    csv.field_size_limit(FIELD_SIZE_LIMIT)
    with handle:
        reader = csv.reader(handle, delimiter=",", skipinitialspace=True)
        try:
            yield from reader
        except (csv.Error, OSError) as exc:
            raise SourceUnreadable(
                f"failed to read dump {path} near line {reader.line_num}: {exc}"
            ) from exc


async def _flush(
    batch: list[TorrentCreate],
    writer: ChunkWriter,
    report: IngestReport,
) -> None:
    start = report.inserted + 1
    end = report.inserted + len(batch)
    try:
        inserted = await writer.bulk_create(batch)
    except SQLAlchemyError as exc:
        raise BatchWriteFailure(start, end, report.inserted, str(exc)) from exc

    report.inserted += inserted
    INGESTED_ROWS.inc(inserted)
    logger.info("ingest_batch_inserted", start=start, end=end, total=report.inserted)


async def ingest(
    rows: Iterable[Sequence[str]],
    writer: ChunkWriter,
    batch_size: int = DEFAULT_BATCH_SIZE,
) -> IngestReport:
    """Validate dump rows and insert them chunk by chunk.

    The first row is the header and is always discarded. Invalid rows are
    skipped; rows with the wrong number of fields are skipped without a
    diagnostic. Chunks are written one after the other and a chunk that
    fails aborts the load, leaving earlier chunks committed.

    Args:
        rows: Dump rows, header first
        writer: Store used to persist each chunk
        batch_size: Number of records per chunk

    Returns:
        Counts of inserted and skipped rows

    Raises:
        SourceUnreadable: If there is no header row or reading fails; its
            ``inserted`` counts the rows committed before the failure
        BatchWriteFailure: If the store rejects a chunk
    """
    if batch_size < 1:
        raise ValueError("batch_size must be greater than 0")

    iterator = iter(rows)
    if next(iterator, None) is None:
        raise SourceUnreadable("dump is empty, header row missing")

    report = IngestReport()
    batch: list[TorrentCreate] = []

    try:
        for row_number, fields in enumerate(iterator, start=2):
            result = parse_row(row_number, fields)
            if isinstance(result, SkippedRow):
                report.record_skip(result)
                SKIPPED_ROWS.labels(reason=result.reason).inc()
                if not result.silent:
                    logger.warning(
                        "ingest_row_skipped",
                        row=result.row,
                        reason=result.reason,
                        error=result.message,
                    )
                continue

            batch.append(result.record)
            if len(batch) >= batch_size:
                await _flush(batch, writer, report)
                batch = []
    except SourceUnreadable as exc:
        exc.inserted = report.inserted
        raise

    if batch:
        await _flush(batch, writer, report)

    logger.info(
        "ingest_completed",
        inserted=report.inserted,
        skipped=report.skipped,
    )
    return report


async def ingest_dump(
    path: str | Path,
    writer: ChunkWriter,
    batch_size: int = DEFAULT_BATCH_SIZE,
) -> IngestReport:
    """Load the dump file at ``path`` through ``writer``."""
    rows = read_dump(path)
    try:
        return await ingest(rows, writer, batch_size)
    finally:
        rows.close()
