import pytest
from sqlalchemy.exc import OperationalError

from app.exceptions import StoreUnavailableException
from app.models import Category, Product
from app.utils.slug import SLUG_MAX_LENGTH, generate_slug, generate_unique_slug


@pytest.mark.parametrize(
    "name, expected",
    [
        ("Men's T-Shirt!!", "men-s-t-shirt"),
        ("Blue Hoodie", "blue-hoodie"),
        ("  --Red   Shirt--  ", "red-shirt"),
        ("iPhone 15 Pro / Max", "iphone-15-pro-max"),
        ("Café Crème", "caf-cr-me"),
        ("!!!", ""),
    ],
)
def test_generate_slug(name, expected):
    assert generate_slug(name) == expected


@pytest.mark.parametrize("name", ["Men's T-Shirt!!", "a--b", "x" * 99 + " y", "Ünïcode Näme", ""])
def test_generate_slug_is_idempotent(name):
    once = generate_slug(name)
    assert generate_slug(once) == once


def test_generate_slug_truncates_without_trailing_hyphen():
    slug = generate_slug("a" * (SLUG_MAX_LENGTH - 1) + " tail")
    assert len(slug) <= SLUG_MAX_LENGTH
    assert not slug.endswith("-")


async def test_unique_slug_is_base_slug_when_free(db):
    assert await generate_unique_slug("Blue Hoodie", db) == "blue-hoodie"


async def test_unique_slug_appends_counter(db):
    db.add_all([
        Product(name="Blue Hoodie", slug="blue-hoodie", price=10),
        Product(name="Blue Hoodie", slug="blue-hoodie-1", price=10),
    ])
    await db.commit()

    assert await generate_unique_slug("Blue Hoodie", db) == "blue-hoodie-2"


async def test_unique_slug_ignores_excluded_row(db):
    product = Product(name="Blue Hoodie", slug="blue-hoodie", price=10)
    db.add(product)
    await db.commit()

    assert await generate_unique_slug("Blue Hoodie", db, exclude_id=product.id) == "blue-hoodie"


async def test_unique_slug_checks_the_given_model(db):
    db.add(Category(name="Gifts", slug="gifts"))
    await db.commit()

    assert await generate_unique_slug("Gifts", db) == "gifts"
    assert await generate_unique_slug("Gifts", db, model=Category) == "gifts-1"


async def test_unique_slug_falls_back_for_symbol_only_names(db):
    assert await generate_unique_slug("???", db) == "product"


class UnreachableSession:
    async def execute(self, *args, **kwargs):
        raise OperationalError("SELECT", {}, Exception("could not connect to server"))


async def test_unique_slug_reports_unreachable_store():
    with pytest.raises(StoreUnavailableException) as exc_info:
        await generate_unique_slug("Blue Hoodie", UnreachableSession())

    assert "could not connect" in exc_info.value.message
