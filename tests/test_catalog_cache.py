import pytest
from sqlalchemy.exc import OperationalError

from app.exceptions import StoreUnavailableException
from app.models import Category
from app.services import CatalogCache


class FakeClock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        return self.now


async def test_snapshot_splits_roots_and_subcategories(db, catalog):
    snapshot = await CatalogCache().get(db)

    assert {c.name for c in snapshot.categories} == {"Men's Clothing", "Mobile Accessories", "Gadgets", "Gifts"}
    assert {c.name for c in snapshot.subcategories} == {"mens-tops", "Phone Covers", "Cables", "Mugs"}
    assert all(sub.parent_category_id is not None for sub in snapshot.subcategories)


async def test_snapshot_is_reused_until_ttl_expires(db, catalog):
    clock = FakeClock()
    cache = CatalogCache(ttl_seconds=60, clock=clock)

    first = await cache.get(db)
    db.add(Category(name="Footwear", slug="footwear"))
    await db.commit()

    clock.now += 59
    assert await cache.get(db) is first

    clock.now += 1
    refreshed = await cache.get(db)
    assert refreshed is not first
    assert "Footwear" in {c.name for c in refreshed.categories}


async def test_invalidate_forces_a_fresh_read(db, catalog):
    cache = CatalogCache(ttl_seconds=300)
    first = await cache.get(db)

    cache.invalidate()

    assert cache.is_stale()
    assert await cache.get(db) is not first


async def test_empty_store_gives_empty_lists(db):
    snapshot = await CatalogCache().get(db)

    assert snapshot.categories == []
    assert snapshot.subcategories == []


class UnreachableSession:
    async def execute(self, *args, **kwargs):
        raise OperationalError("SELECT", {}, Exception("connection refused"))


async def test_unreachable_store():
    with pytest.raises(StoreUnavailableException):
        await CatalogCache().get(UnreachableSession())
