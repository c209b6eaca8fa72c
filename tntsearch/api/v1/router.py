"""API v1 router module."""

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession
from starlette import status

from tntsearch.core.categories import sorted_categories
from tntsearch.core.config import Settings, get_settings
from tntsearch.core.db import get_session
from tntsearch.core.exceptions import QueryExecutionFailure
from tntsearch.core.logging import get_logger
from tntsearch.core.metrics import CATALOG_SIZE
from tntsearch.database.repositories import TorrentRepository
from tntsearch.models.response import CategoryResponse, HealthResponse

logger = get_logger(__name__)

router = APIRouter(default_response_class=JSONResponse)


@router.get("/health", response_model=HealthResponse)
async def health_check(
    session: AsyncSession = Depends(get_session),
    app_settings: Settings = Depends(get_settings),
) -> HealthResponse | JSONResponse:
    """Report whether the catalog store answers and how many entries it has."""
    try:
        torrents = await TorrentRepository(session).count()
    except QueryExecutionFailure as exc:
        logger.warning("health_check_failed", error=str(exc))
        body = HealthResponse(status="unhealthy", version=app_settings.version)
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content=body.model_dump(),
        )

    CATALOG_SIZE.set(torrents)
    return HealthResponse(
        status="healthy", version=app_settings.version, torrents=torrents
    )


@router.get("/categories", response_model=list[CategoryResponse])
async def list_categories() -> list[CategoryResponse]:
    """Category table ordered by code."""
    return [
        CategoryResponse(code=code, name=name) for code, name in sorted_categories()
    ]

