import re
from typing import Any, Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import InterfaceError, OperationalError
from sqlalchemy.ext.asyncio import AsyncSession

from ..exceptions import StoreUnavailableException
from ..models import Product


SLUG_MAX_LENGTH = 100
FALLBACK_SLUG = "product"

_NON_ALNUM = re.compile(r"[^a-z0-9]+")


def generate_slug(name: str) -> str:
    """
    Turn a display name into a URL-safe slug, e.g. ``"Men's T-Shirt!!"`` -> ``"men-s-t-shirt"``.

    Runs of anything outside ``[a-z0-9]`` collapse into a single hyphen and the
    result never starts or ends with one, so applying it twice changes nothing.
    """
    slug = _NON_ALNUM.sub("-", (name or "").lower()).strip("-")
    return slug[:SLUG_MAX_LENGTH].rstrip("-")


async def slug_exists(slug: str, db: AsyncSession, model: Any = Product, exclude_id: Optional[UUID] = None) -> bool:
    query = select(model.id).where(model.slug == slug)

    # If updating an existing row, exclude it from the check
    if exclude_id is not None:
        query = query.where(model.id != exclude_id)

    try:
        result = await db.execute(query.limit(1))
    except (OperationalError, InterfaceError) as e:
        raise StoreUnavailableException(f"Catalog store is unavailable: {e.orig}")

    return result.scalars().first() is not None


async def generate_unique_slug(
    name: str,
    db: AsyncSession,
    model: Any = Product,
    exclude_id: Optional[UUID] = None,
) -> str:
    """
    Generate a slug for ``name`` that no other ``model`` row uses yet.

    Collisions get a numeric suffix (``name-1``, ``name-2``, ...). The check is
    only advisory: two callers can be handed the same slug, and the unique index
    on the slug column decides which write wins.
    """
    base_slug = generate_slug(name) or FALLBACK_SLUG

    slug = base_slug
    counter = 1
    while await slug_exists(slug, db, model=model, exclude_id=exclude_id):
        slug = f"{base_slug}-{counter}"
        counter += 1

    return slug
