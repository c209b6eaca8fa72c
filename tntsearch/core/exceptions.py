"""Error types raised while loading and querying the catalog."""


class CatalogError(Exception):
    """Base class for catalog errors."""


class SourceUnreadable(CatalogError):
    """Raised when the dump cannot be opened or read.

    A read error past the header leaves earlier chunks committed;
    ``inserted`` says how many rows that is.
    """

    def __init__(self, message: str, inserted: int = 0) -> None:
        super().__init__(message)
        self.inserted = inserted


class MalformedRow(CatalogError):
    """Raised when a single dump row fails validation.

    The ingestion pipeline converts this into a skipped row; it never
    reaches callers of ``ingest``.
    """

    def __init__(self, field: str, value: str, reason: str) -> None:
        super().__init__(f"invalid {field} {value!r}: {reason}")
        self.field = field
        self.value = value
        self.reason = reason


class BatchWriteFailure(CatalogError):
    """Raised when the store rejects a chunk of records.

    Chunks committed before the failing one remain in the store;
    ``inserted`` says how many rows that is.
    """

    def __init__(self, start: int, end: int, inserted: int, message: str) -> None:
        super().__init__(
            f"failed to insert batch {start}-{end}: {message}"
        )
        self.start = start
        self.end = end
        self.inserted = inserted


class QueryExecutionFailure(CatalogError):
    """Raised when the store fails to execute a catalog query."""

    status_code = 500
