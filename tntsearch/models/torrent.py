"""Torrent record models and size formatting."""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, computed_field

from tntsearch.core.categories import category_name

# Binary prefixes tried in order; anything larger is expressed in "Yi".
SIZE_UNITS = ("", "Ki", "Mi", "Gi", "Ti", "Pi", "Ei", "Zi")
LAST_SIZE_UNIT = "Yi"

# Sizes are stored as signed 64-bit integers.
SIZE_MAX = 2**63 - 1
# Categories use the 32-bit Integer column type on PostgreSQL.
CATEGORY_MIN = -(2**31)
CATEGORY_MAX = 2**31 - 1


def format_size(num: int) -> str:
    """Format a byte count with 1024-based prefixes and one decimal.

    ``format_size(0)`` is ``"0B"`` and ``format_size(1536)`` is ``"1.5KiB"``.
    Counts beyond the ``Zi`` range stay in ``Yi`` with a mantissa of 1024 or
    more.

    Raises:
        ValueError: If ``num`` is negative
    """
    if num < 0:
        raise ValueError(f"size must be non-negative, got {num}")
    if num == 0:
        return "0B"

    # Decimal keeps arbitrarily large counts out of float overflow.
    value = Decimal(num)
    for unit in SIZE_UNITS:
        if value < 1024:
            return f"{value:.1f}{unit}B"
        value /= 1024
    return f"{value:.1f}{LAST_SIZE_UNIT}B"


class TorrentBase(BaseModel):
    """Fields shared by every representation of a catalog entry."""

    published_at: datetime = Field(
        ...,
        title="Published At",
        description="Publication timestamp of the release",
        examples=["2019-03-12T21:44:09"],
    )
    hash: str = Field(
        default="",
        title="Hash",
        description="BitTorrent info hash",
        examples=["2C5E0A0E3F4B1C1D2E3F40516273849506A7B8C9"],
    )
    topic: str = Field(default="", title="Topic", description="Forum topic id")
    post: str = Field(default="", title="Post", description="Forum post id")
    author: str = Field(
        default="",
        title="Author",
        description="Name of the uploader",
        examples=["Dottorlex"],
    )
    title: str = Field(default="", title="Title", examples=["Linux Mint 19.1"])
    description: str = Field(default="", title="Description")
    size: int = Field(
        ...,
        title="Size",
        description="Size of the release in bytes",
        ge=0,
        le=SIZE_MAX,
        examples=[1987213312],
    )
    category: int = Field(
        ...,
        title="Category",
        description="Category code; unknown codes are allowed",
        ge=CATEGORY_MIN,
        le=CATEGORY_MAX,
        examples=[6],
    )


class TorrentCreate(TorrentBase):
    """A validated dump row waiting to be inserted."""

    model_config = ConfigDict(frozen=True)


class Torrent(TorrentBase):
    """Read-only snapshot of a persisted catalog entry."""

    model_config = ConfigDict(from_attributes=True, frozen=True)

    id: int = Field(..., title="Identifier", description="Store assigned key")


class TorrentResponse(Torrent):
    """Catalog entry with the derived fields shown to users."""

    @computed_field  # type: ignore[prop-decorator]
    @property
    def size_human(self) -> str:
        """Human readable size."""
        return format_size(self.size)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def category_name(self) -> str:
        """Category display name, blank for unknown codes."""
        return category_name(self.category)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def magnet(self) -> str:
        """Magnet link for the release."""
        return f"magnet:?xt=urn:btih:{self.hash}"
