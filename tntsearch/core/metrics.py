"""Prometheus metrics shared across the application."""

from prometheus_client import Counter, Gauge

REQUESTS_TOTAL = Counter(
    "tntsearch_http_requests_total",
    "Total number of HTTP requests",
    labelnames=["method", "path"],
)

RESPONSES_TOTAL = Counter(
    "tntsearch_http_responses_total",
    "Total number of HTTP responses",
    labelnames=["status_code"],
)

INGESTED_ROWS = Counter(
    "tntsearch_ingested_rows",
    "Number of dump rows committed to the catalog",
)

SKIPPED_ROWS = Counter(
    "tntsearch_skipped_rows",
    "Number of dump rows excluded from the catalog",
    labelnames=["reason"],
)

CATALOG_SIZE = Gauge(
    "tntsearch_catalog_torrents",
    "Number of torrents in the catalog at the last health check",
)
