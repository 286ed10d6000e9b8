from fastapi import Depends, Request
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from typing import AsyncGenerator
from uuid import UUID

from ..core.token_bearer import AccessTokenBearer
from ..db.database import AsyncSessionLocal
from ..exceptions import InvalidTokenException, PermissionRequiredException, UserNotFoundException
from ..models import User
from ..services import CatalogCache, CategoryService, ProductService


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    Asynchronous dependency that provides a database session for FastAPI routes.

    Yields:
        AsyncSession: An instance of the asynchronous database session.

    Usage:
        Use as a dependency in FastAPI endpoints to access the database session.
        The session is automatically closed after the request is processed.
    """

    async with AsyncSessionLocal() as db:
        yield db


def get_catalog_cache(request: Request) -> CatalogCache:
    return request.app.state.catalog_cache


async def get_current_user(
    token: dict = Depends(AccessTokenBearer()),
    db: AsyncSession = Depends(get_db),
) -> User:
    """
    Retrieve the user named by the verified access token.

    Raises:
        InvalidTokenException: If the token subject is not a user id.
        UserNotFoundException: If no such user exists.
    """
    try:
        user_id = UUID(token["sub"])
    except ValueError:
        raise InvalidTokenException("Token subject is not a valid user id")

    result = await db.execute(select(User).where(User.id == user_id))
    user = result.scalars().first()

    if not user:
        raise UserNotFoundException("User not found")

    return user


async def get_current_admin(user: User = Depends(get_current_user)) -> User:
    if not user.is_active or not user.is_admin:
        raise PermissionRequiredException("Forbidden: Admin access required")

    return user


async def get_product_service(
    db: AsyncSession = Depends(get_db),
    catalog_cache: CatalogCache = Depends(get_catalog_cache),
) -> ProductService:
    """Dependency function that provides an instance of ProductService."""
    return ProductService(db, catalog_cache)


async def get_category_service(
    db: AsyncSession = Depends(get_db),
    catalog_cache: CatalogCache = Depends(get_catalog_cache),
) -> CategoryService:
    """Dependency function that provides an instance of CategoryService."""
    return CategoryService(db, catalog_cache)
