"""Catalog models package."""

from .response import CategoryResponse, HealthResponse, SearchResponse
from .torrent import (
    Torrent,
    TorrentBase,
    TorrentCreate,
    TorrentResponse,
    format_size,
)

__all__ = [
    "CategoryResponse",
    "HealthResponse",
    "SearchResponse",
    "Torrent",
    "TorrentBase",
    "TorrentCreate",
    "TorrentResponse",
    "format_size",
]
