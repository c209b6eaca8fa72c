"""Torrent search endpoints."""

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from tntsearch.api.v1.utils import create_pagination_links, normalize_page
from tntsearch.core.categories import ANY_CATEGORY
from tntsearch.core.config import Settings, get_settings
from tntsearch.core.db import get_session
from tntsearch.database.repositories import TorrentRepository
from tntsearch.ingest.parser import DUMP_HEADER
from tntsearch.models.response import SearchResponse
from tntsearch.models.torrent import TorrentResponse

router = APIRouter(tags=["torrents"])


@router.get("", response_model=SearchResponse)
async def search_torrents(
    request: Request,
    keywords: str = Query(
        "", description="Text searched in title, description and author"
    ),
    category: int = Query(ANY_CATEGORY, description="Category code, 0 for any"),
    page: int = Query(1, description="Page number, values below 1 mean 1"),
    session: AsyncSession = Depends(get_session),
    app_settings: Settings = Depends(get_settings),
) -> SearchResponse:
    """
    Search the catalog, newest releases first.

    Keywords match case-insensitively anywhere in the title, description or
    author. Pages hold a fixed number of results.
    """
    page = normalize_page(page)
    per_page = app_settings.PAGE_SIZE

    repository = TorrentRepository(session)
    torrents = await repository.search(keywords, category, page, per_page)

    data = [
        TorrentResponse.model_validate(torrent.model_dump()) for torrent in torrents
    ]
    links = create_pagination_links(
        request=request,
        current_page=page,
        has_next=len(data) == per_page,
        extra_params={"keywords": keywords, "category": category},
    )

    return SearchResponse(
        keywords=keywords,
        category=category,
        page=page,
        per_page=per_page,
        count=len(data),
        links=links,
        data=data,
    )


@router.get("/header", response_model=list[str])
async def torrent_header() -> list[str]:
    """Column names of a catalog entry, in dump order."""
    return list(DUMP_HEADER)
