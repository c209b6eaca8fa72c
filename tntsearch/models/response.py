"""Response models for the catalog API."""

from pydantic import BaseModel, ConfigDict, Field

from .torrent import TorrentResponse


class SearchResponse(BaseModel):
    """One page of search results."""

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "keywords": "linux",
                "category": 0,
                "page": 1,
                "per_page": 50,
                "count": 1,
                "links": {
                    "self": "/api?keywords=linux&category=0&page=1",
                    "next": None,
                    "prev": None,
                },
                "data": [],
            }
        },
    )

    keywords: str = Field(default="", title="Keywords")
    category: int = Field(default=0, title="Category", description="0 means any")
    page: int = Field(..., title="Page", ge=1)
    per_page: int = Field(..., title="Per Page", ge=1)
    count: int = Field(
        ...,
        title="Count",
        description="Number of items in current page",
        ge=0,
    )
    links: dict[str, str | None] = Field(
        default_factory=dict,
        title="Links",
        description="Navigation links for pagination",
    )
    data: list[TorrentResponse] = Field(default_factory=list, title="Data")


class CategoryResponse(BaseModel):
    """Entry of the category table."""

    code: int = Field(..., title="Code", examples=[6])
    name: str = Field(..., title="Name", examples=["Linux"])


class HealthResponse(BaseModel):
    """Service health."""

    status: str = Field(..., examples=["healthy"])
    version: str = Field(..., examples=["0.1.0"])
    torrents: int | None = Field(
        default=None,
        description="Number of catalog entries, unset when the store is down",
    )
