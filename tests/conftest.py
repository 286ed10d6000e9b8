import os

os.environ.setdefault("JWT_SECRET", "storefront-test-signing-key-0123456789abcdef")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")

from types import SimpleNamespace

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from app import app as fastapi_app
from app.core.dependencies import get_db
from app.db.base import Base
from app.enums import DetailType
from app.models import Category, User
from app.schemas.product import ProductFormData
from app.services import CatalogCache
from app.utils.auth import create_access_token


@pytest_asyncio.fixture
async def engine(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'catalog.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def catalog_cache():
    return CatalogCache(ttl_seconds=300)


@pytest_asyncio.fixture
async def catalog(session_factory):
    """Three root categories, one per kind of detail record, each with a subcategory."""
    async with session_factory() as session:
        mens = Category(name="Men's Clothing", slug="men-s-clothing", detail_type=DetailType.APPAREL)
        phones = Category(name="Mobile Accessories", slug="mobile-accessories", detail_type=DetailType.MOBILE)
        gadgets = Category(name="Gadgets", slug="gadgets", detail_type=DetailType.ACCESSORIES)
        gifts = Category(name="Gifts", slug="gifts", detail_type=None)
        session.add_all([mens, phones, gadgets, gifts])
        await session.flush()

        tops = Category(name="mens-tops", slug="mens-tops", parent_category_id=mens.id)
        covers = Category(name="Phone Covers", slug="phone-covers", parent_category_id=phones.id)
        cables = Category(name="Cables", slug="cables", parent_category_id=gadgets.id)
        mugs = Category(name="Mugs", slug="mugs", parent_category_id=gifts.id)
        session.add_all([tops, covers, cables, mugs])
        await session.commit()

    return SimpleNamespace(
        mens=mens, phones=phones, gadgets=gadgets, gifts=gifts,
        tops=tops, covers=covers, cables=cables, mugs=mugs,
    )


def make_form(**overrides) -> ProductFormData:
    data = {
        "name": "Blue Hoodie",
        "description": "Warm cotton hoodie",
        "price": 999,
        "category": "Men's Clothing",
        "subcategories": ["mens-tops"],
        "apparelDetails": {"brand": "Acme"},
        "selectedSizes": ["M"],
        "selectedFitTypes": ["Regular"],
    }
    data.update(overrides)
    return ProductFormData.model_validate(data)


@pytest.fixture
def form_factory():
    return make_form


@pytest_asyncio.fixture
async def admin_user(session_factory):
    async with session_factory() as session:
        user = User(full_name="Store Admin", phone_number="+10000000001", is_admin=True)
        session.add(user)
        await session.commit()
    return user


@pytest_asyncio.fixture
async def customer_user(session_factory):
    async with session_factory() as session:
        user = User(full_name="Shopper", phone_number="+10000000002", is_admin=False)
        session.add(user)
        await session.commit()
    return user


@pytest.fixture
def admin_headers(admin_user):
    return {"Authorization": f"Bearer {create_access_token(admin_user.id)}"}


@pytest.fixture
def customer_headers(customer_user):
    return {"Authorization": f"Bearer {create_access_token(customer_user.id)}"}


@pytest_asyncio.fixture
async def client(session_factory):
    async def override_get_db():
        async with session_factory() as session:
            yield session

    fastapi_app.dependency_overrides[get_db] = override_get_db
    fastapi_app.state.catalog_cache = CatalogCache(ttl_seconds=300)

    async with AsyncClient(transport=ASGITransport(app=fastapi_app), base_url="http://test") as client:
        yield client

    fastapi_app.dependency_overrides.clear()
