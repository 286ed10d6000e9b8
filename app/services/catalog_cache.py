import asyncio
import logging
import time
from typing import Callable, List, NamedTuple, Optional

from sqlalchemy import select
from sqlalchemy.exc import InterfaceError, OperationalError
from sqlalchemy.ext.asyncio import AsyncSession

from ..exceptions import StoreUnavailableException
from ..models import Category
from ..schemas.category import CategoryResponse


logger = logging.getLogger(__name__)


class CatalogSnapshot(NamedTuple):
    categories: List[CategoryResponse]
    subcategories: List[CategoryResponse]
    fetched_at: float


class CatalogCache:
    """
    In-memory copy of the category and subcategory lists used to resolve names
    picked in the admin forms.

    ``ttl_seconds`` is how stale a snapshot may get before ``get`` re-reads it.
    Category writes call ``invalidate`` so the next read is fresh.
    """

    def __init__(self, ttl_seconds: float = 300, clock: Callable[[], float] = time.monotonic):
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._snapshot: Optional[CatalogSnapshot] = None
        self._lock = asyncio.Lock()

    def is_stale(self) -> bool:
        if self._snapshot is None:
            return True
        return self._clock() - self._snapshot.fetched_at >= self.ttl_seconds

    def invalidate(self) -> None:
        self._snapshot = None

    async def get(self, db: AsyncSession) -> CatalogSnapshot:
        if not self.is_stale():
            return self._snapshot

        async with self._lock:
            # another request may have refreshed while we waited
            if self.is_stale():
                return await self.refresh(db)

            return self._snapshot

    async def refresh(self, db: AsyncSession) -> CatalogSnapshot:
        query = select(Category).order_by(Category.created_at, Category.name)
        try:
            result = await db.execute(query)
        except (OperationalError, InterfaceError) as e:
            raise StoreUnavailableException(f"Catalog store is unavailable: {e.orig}")

        rows = [CategoryResponse.model_validate(row) for row in result.scalars().all()]

        self._snapshot = CatalogSnapshot(
            categories=[row for row in rows if row.parent_category_id is None],
            subcategories=[row for row in rows if row.parent_category_id is not None],
            fetched_at=self._clock(),
        )
        logger.debug(
            "Catalog cache refreshed: %d categories, %d subcategories",
            len(self._snapshot.categories), len(self._snapshot.subcategories),
        )

        return self._snapshot
