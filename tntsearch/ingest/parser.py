"""Validation of dump rows into catalog records."""

import re
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime
from typing import Union

from tntsearch.core.exceptions import MalformedRow
from tntsearch.models.torrent import (
    CATEGORY_MAX,
    CATEGORY_MIN,
    SIZE_MAX,
    TorrentCreate,
)

FIELD_COUNT = 9
TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%S"

_TIMESTAMP_RE = re.compile(r"\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}", re.ASCII)
_INTEGER_RE = re.compile(r"[+-]?\d+", re.ASCII)

# Column names of the dump, in order.
DUMP_HEADER = (
    "DATA",
    "HASH",
    "TOPIC",
    "POST",
    "AUTORE",
    "TITOLO",
    "DESCRIZIONE",
    "DIMENSIONE",
    "CATEGORIA",
)


@dataclass(frozen=True)
class ParsedRow:
    """Row that passed validation."""

    row: int
    record: TorrentCreate


@dataclass(frozen=True)
class SkippedRow:
    """Row excluded from the catalog.

    ``silent`` rows (wrong field count) are dropped without a diagnostic.
    """

    row: int
    reason: str
    message: str
    silent: bool = False


RowResult = Union[ParsedRow, SkippedRow]


def parse_timestamp(value: str) -> datetime:
    """Parse ``YYYY-MM-DDTHH:MM:SS`` with no zone or fraction."""
    if not _TIMESTAMP_RE.fullmatch(value):
        raise MalformedRow("timestamp", value, f"expected {TIMESTAMP_FORMAT}")
    try:
        return datetime.strptime(value, TIMESTAMP_FORMAT)
    except ValueError as exc:
        raise MalformedRow("timestamp", value, str(exc)) from exc


def parse_integer(field: str, value: str, minimum: int, maximum: int) -> int:
    """Parse a base-10 integer and check it lies in ``[minimum, maximum]``."""
    if not _INTEGER_RE.fullmatch(value):
        raise MalformedRow(field, value, "not a base-10 integer")
    number = int(value)
    if not minimum <= number <= maximum:
        raise MalformedRow(field, value, f"out of range [{minimum}, {maximum}]")
    return number


def parse_row(row: int, fields: Sequence[str]) -> RowResult:
    """Validate one dump row.

    Args:
        row: 1-based position of the row in the dump, header included
        fields: Raw fields as split by the csv reader

    Returns:
        ``ParsedRow`` with the record, or ``SkippedRow`` saying why not
    """
    if len(fields) != FIELD_COUNT:
        return SkippedRow(
            row=row,
            reason="field_count",
            message=f"expected {FIELD_COUNT} fields, got {len(fields)}",
            silent=True,
        )

    (
        timestamp,
        info_hash,
        topic,
        post,
        author,
        title,
        description,
        size,
        category,
    ) = fields

    try:
        record = TorrentCreate(
            published_at=parse_timestamp(timestamp),
            hash=info_hash,
            topic=topic,
            post=post,
            author=author,
            title=title,
            description=description,
            size=parse_integer("size", size, 0, SIZE_MAX),
            category=parse_integer("category", category, CATEGORY_MIN, CATEGORY_MAX),
        )
    except MalformedRow as exc:
        return SkippedRow(row=row, reason=exc.field, message=str(exc))

    return ParsedRow(row=row, record=record)
