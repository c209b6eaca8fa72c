"""Loading of the release dump into the catalog."""

from .bootstrap import BootstrapResult, bootstrap_catalog
from .parser import DUMP_HEADER, ParsedRow, SkippedRow, parse_row
from .pipeline import IngestReport, ingest, ingest_dump, read_dump

__all__ = [
    "BootstrapResult",
    "DUMP_HEADER",
    "IngestReport",
    "ParsedRow",
    "SkippedRow",
    "bootstrap_catalog",
    "ingest",
    "ingest_dump",
    "parse_row",
    "read_dump",
]
