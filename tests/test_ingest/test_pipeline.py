"""Tests for the dump ingestion pipeline."""

from collections.abc import Sequence
from pathlib import Path
from unittest.mock import patch

import pytest
from sqlalchemy import select
from sqlalchemy.exc import OperationalError

from tntsearch.core.exceptions import BatchWriteFailure, SourceUnreadable
from tntsearch.database.models import TorrentModel
from tntsearch.database.repositories import TorrentRepository
from tntsearch.ingest.pipeline import ingest, ingest_dump, read_dump
from tntsearch.models.torrent import TorrentCreate

HEADER = [
    "DATA",
    "HASH",
    "TOPIC",
    "POST",
    "AUTORE",
    "TITOLO",
    "DESCRIZIONE",
    "DIMENSIONE",
    "CATEGORIA",
]


def _row(index: int, **overrides: str) -> list[str]:
    fields = {
        "timestamp": f"2019-01-{index % 28 + 1:02d}T10:00:{index % 60:02d}",
        "hash": f"HASH{index}",
        "topic": str(index),
        "post": str(index * 10),
        "author": "uploader",
        "title": f"Title {index}",
        "description": f"Description {index}",
        "size": str(index * 1024),
        "category": "4",
    }
    fields.update(overrides)
    return list(fields.values())


class RecordingWriter:
    """Chunk writer keeping every chunk in memory."""

    def __init__(self, fail_on_chunk: int | None = None) -> None:
        self.chunks: list[list[TorrentCreate]] = []
        self.fail_on_chunk = fail_on_chunk

    async def bulk_create(self, records: Sequence[TorrentCreate]) -> int:
        if self.fail_on_chunk == len(self.chunks) + 1:
            raise OperationalError("INSERT", {}, Exception("disk I/O error"))
        self.chunks.append(list(records))
        return len(records)


@pytest.mark.asyncio
async def test_header_is_always_discarded():
    writer = RecordingWriter()
    report = await ingest([_row(0), _row(1)], writer)

    assert report.inserted == 1
    assert writer.chunks[0][0].hash == "HASH1"


@pytest.mark.asyncio
async def test_empty_source_is_unreadable():
    with pytest.raises(SourceUnreadable):
        await ingest([], RecordingWriter())


@pytest.mark.asyncio
async def test_header_only_inserts_nothing():
    writer = RecordingWriter()
    report = await ingest([HEADER], writer)

    assert report.inserted == 0
    assert writer.chunks == []


@pytest.mark.asyncio
async def test_rows_are_written_in_fixed_size_chunks():
    writer = RecordingWriter()
    rows = [HEADER] + [_row(i) for i in range(1, 8)]

    report = await ingest(rows, writer, batch_size=3)

    assert report.inserted == 7
    assert [len(chunk) for chunk in writer.chunks] == [3, 3, 1]


@pytest.mark.asyncio
async def test_malformed_rows_do_not_abort_ingestion():
    writer = RecordingWriter()
    rows = [
        HEADER,
        _row(1),
        _row(2)[:5],
        _row(3, timestamp="not a date"),
        _row(4, size="big"),
        _row(5, category="x"),
        _row(6),
    ]

    report = await ingest(rows, writer)

    assert report.inserted == 2
    assert report.skipped == 4
    # The short row is dropped without a diagnostic.
    assert len(report.diagnostics) == 3
    assert report.diagnostics[0].startswith("row 4:")
    assert [record.hash for record in writer.chunks[0]] == ["HASH1", "HASH6"]


@pytest.mark.asyncio
async def test_progress_and_summary_are_logged():
    rows = [HEADER] + [_row(i) for i in range(1, 5)] + [_row(9, size="?")]

    with patch("tntsearch.ingest.pipeline.logger") as mock_logger:
        await ingest(rows, RecordingWriter(), batch_size=2)

    batches = [
        call.kwargs
        for call in mock_logger.info.call_args_list
        if call.args == ("ingest_batch_inserted",)
    ]
    assert batches == [
        {"start": 1, "end": 2, "total": 2},
        {"start": 3, "end": 4, "total": 4},
    ]
    mock_logger.warning.assert_called_once()
    assert mock_logger.warning.call_args.args == ("ingest_row_skipped",)
    assert mock_logger.info.call_args.args == ("ingest_completed",)
    assert mock_logger.info.call_args.kwargs == {"inserted": 4, "skipped": 1}


@pytest.mark.asyncio
async def test_chunk_failure_aborts_and_keeps_earlier_chunks():
    writer = RecordingWriter(fail_on_chunk=2)
    rows = [HEADER] + [_row(i) for i in range(1, 8)]

    with pytest.raises(BatchWriteFailure) as exc_info:
        await ingest(rows, writer, batch_size=3)

    failure = exc_info.value
    assert (failure.start, failure.end, failure.inserted) == (4, 6, 3)
    assert isinstance(failure.__cause__, OperationalError)
    assert "disk I/O error" in str(failure)
    assert len(writer.chunks) == 1


@pytest.mark.asyncio
async def test_invalid_batch_size():
    with pytest.raises(ValueError):
        await ingest([HEADER], RecordingWriter(), batch_size=0)


def test_read_dump_trims_leading_whitespace(tmp_path: Path):
    dump = tmp_path / "dump.csv"
    dump.write_text(
        'DATA,HASH\n2019-01-01T00:00:00, abc, "x, y",  z\n', encoding="utf-8"
    )

    rows = list(read_dump(dump))

    assert rows == [["DATA", "HASH"], ["2019-01-01T00:00:00", "abc", "x, y", "z"]]


def test_read_dump_missing_file(tmp_path: Path):
    with pytest.raises(SourceUnreadable):
        list(read_dump(tmp_path / "missing.csv"))


@pytest.mark.asyncio
async def test_ingest_dump_round_trip(tmp_path: Path, db_session):
    dump = tmp_path / "dump.csv"
    lines = [",".join(HEADER)]
    lines += [
        '2019-03-12T21:44:09,AAA,1,2,Dottorlex,Linux Mint,"Cinnamon, 64 bit",'
        "1987213312,6",
        "2019-03-13T08:00:00,BBB,3,4,Pirata,Film,Descrizione,700,4",
        "2019-03-14T08:00:00,CCC,5,6,Pirata,Broken,Row,700",
    ]
    dump.write_text("\n".join(lines) + "\n", encoding="utf-8")

    report = await ingest_dump(dump, TorrentRepository(db_session), batch_size=1)

    assert report.inserted == 2
    stored = (
        (await db_session.execute(select(TorrentModel).order_by(TorrentModel.hash)))
        .scalars()
        .all()
    )
    assert [row.hash for row in stored] == ["AAA", "BBB"]
    assert stored[0].description == "Cinnamon, 64 bit"
    assert stored[0].size == 1987213312
    assert stored[0].category == 6
    assert stored[1].author == "Pirata"


@pytest.mark.asyncio
async def test_ingest_dump_missing_file(tmp_path: Path):
    with pytest.raises(SourceUnreadable):
        await ingest_dump(tmp_path / "nope.csv", RecordingWriter())


@pytest.mark.asyncio
async def test_fields_longer_than_csv_default_limit_are_kept(tmp_path: Path):
    long_description = "x" * 200_000
    dump = tmp_path / "dump.csv"
    lines = [",".join(HEADER)]
    lines += [",".join(_row(i)) for i in range(1, 4)]
    lines.append(",".join(_row(4, description=long_description)))
    lines.append(",".join(_row(5)))
    dump.write_text("\n".join(lines) + "\n", encoding="utf-8")
    writer = RecordingWriter()

    report = await ingest_dump(dump, writer, batch_size=2)

    assert report.inserted == 5
    records = [record for chunk in writer.chunks for record in chunk]
    assert records[3].description == long_description


@pytest.mark.asyncio
async def test_read_failure_reports_rows_already_committed():
    def rows():
        yield HEADER
        for i in range(1, 4):
            yield _row(i)
        raise SourceUnreadable("failed to read dump near line 5")

    writer = RecordingWriter()

    with pytest.raises(SourceUnreadable) as exc_info:
        await ingest(rows(), writer, batch_size=2)

    assert exc_info.value.inserted == 2
    assert len(writer.chunks) == 1
