"""Repository pattern for database operations."""

from abc import ABC
from collections.abc import Sequence
from typing import Any, Generic, TypeVar

from sqlalchemy import false, func, insert, or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from tntsearch.core.categories import ANY_CATEGORY
from tntsearch.core.exceptions import QueryExecutionFailure
from tntsearch.models.torrent import (
    CATEGORY_MAX,
    CATEGORY_MIN,
    Torrent,
    TorrentCreate,
)

from .models import TorrentModel

ModelType = TypeVar("ModelType")

# Integers bound to a query must fit a signed 64-bit column value.
MAX_BOUND_INTEGER = 2**63 - 1


class BaseRepository(ABC, Generic[ModelType]):
    """Base repository for common database operations."""

    def __init__(self, session: AsyncSession, model: type[ModelType]):
        self.session = session
        self.model = model

    async def count(self) -> int:
        """Count every stored entity."""
        query = select(func.count()).select_from(self.model)

        try:
            result = await self.session.execute(query)
        except SQLAlchemyError as exc:
            raise QueryExecutionFailure(str(exc)) from exc
        return result.scalar() or 0

    async def create_many(self, rows: Sequence[dict[str, Any]]) -> int:
        """Insert rows in a single transaction.

        The transaction is rolled back and the store error re-raised when
        any row is rejected.

        Returns:
            Number of rows inserted
        """
        if not rows:
            return 0
        try:
            await self.session.execute(insert(self.model), list(rows))
            await self.session.commit()
        except SQLAlchemyError:
            await self.session.rollback()
            raise
        return len(rows)


class TorrentRepository(BaseRepository[TorrentModel]):
    """Repository for catalog entries."""

    def __init__(self, session: AsyncSession):
        super().__init__(session, TorrentModel)

    async def bulk_create(self, records: Sequence[TorrentCreate]) -> int:
        """Insert one chunk of parsed records in one transaction."""
        return await self.create_many([record.model_dump() for record in records])

    def build_search_query(
        self,
        keywords: str,
        category: int,
        page: int,
        page_size: int,
    ):
        """Compose filters, ordering and pagination into one statement.

        Args:
            keywords: Case-insensitive substring looked up in title,
                description and author; empty matches everything
            category: Exact category code, ``0`` matches every category and
                codes outside the 32-bit range match nothing
            page: 1-based page number; pages past any possible offset are
                empty
            page_size: Maximum number of rows returned

        Raises:
            ValueError: If ``page_size`` is not positive
        """
        if page_size <= 0:
            raise ValueError("page_size must be greater than 0")

        query = select(self.model)

        if keywords:
            query = query.filter(
                or_(
                    self.model.title.icontains(keywords, autoescape=True),
                    self.model.description.icontains(keywords, autoescape=True),
                    self.model.author.icontains(keywords, autoescape=True),
                )
            )

        if category != ANY_CATEGORY:
            if CATEGORY_MIN <= category <= CATEGORY_MAX:
                query = query.filter(self.model.category == category)
            else:
                query = query.filter(false())

        # Rows sharing a timestamp come back in store order.
        offset = max((page - 1) * page_size, 0)
        if offset > MAX_BOUND_INTEGER:
            # No store holds that many rows; the page is past the end.
            query = query.filter(false())
            offset = 0
        page_size = min(page_size, MAX_BOUND_INTEGER)
        return (
            query.order_by(self.model.published_at.desc())
            .offset(offset)
            .limit(page_size)
        )

    async def search(
        self,
        keywords: str = "",
        category: int = ANY_CATEGORY,
        page: int = 1,
        page_size: int = 50,
    ) -> list[Torrent]:
        """Find catalog entries, newest first.

        Returns:
            Snapshots of the matching page, empty when nothing matches

        Raises:
            QueryExecutionFailure: If the store fails to run the query
        """
        query = self.build_search_query(keywords, category, page, page_size)
        try:
            result = await self.session.execute(query)
        except SQLAlchemyError as exc:
            raise QueryExecutionFailure(str(exc)) from exc
        return [Torrent.model_validate(row) for row in result.scalars().all()]
