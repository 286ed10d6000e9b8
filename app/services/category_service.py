import logging
from sqlalchemy import delete, func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload
from typing import List
from uuid import UUID

from ..exceptions import BadRequestException, ConflictException, NotFoundException
from ..models import Category, Product
from ..schemas.category import (
    CategoryCreate,
    CategoryResponse,
    CategoryTreeResponse,
    CategoryUpdate,
    SubcategoryCreate,
)
from ..utils.slug import generate_unique_slug
from .catalog_cache import CatalogCache


logger = logging.getLogger(__name__)


class CategoryService:
    def __init__(self, db: AsyncSession, catalog_cache: CatalogCache):
        self.db = db
        self.catalog_cache = catalog_cache

    async def get_category_by_id(self, category_id: UUID) -> Category:
        """
        Get a category by its ID
        """
        query = select(Category).where(Category.id == category_id).execution_options(populate_existing=True)
        result = await self.db.execute(query)
        category = result.scalars().first()

        if not category:
            raise NotFoundException(f"Category with ID {category_id} not found")

        return category

    async def list_categories(self) -> List[Category]:
        """
        All categories and subcategories, roots first
        """
        query = select(Category).order_by(Category.parent_category_id.is_not(None), Category.name)
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def list_active_tree(self) -> List[CategoryTreeResponse]:
        """
        Active root categories with their active subcategories loaded
        """
        query = (
            select(Category)
            .options(selectinload(Category.subcategories))
            .where(Category.parent_category_id.is_(None), Category.is_active.is_(True))
            .order_by(Category.name)
        )
        result = await self.db.execute(query)
        return [
            CategoryTreeResponse(
                **CategoryResponse.model_validate(category).model_dump(),
                subcategories=[
                    CategoryResponse.model_validate(sub)
                    for sub in sorted(category.subcategories, key=lambda sub: sub.name)
                    if sub.is_active
                ],
            )
            for category in result.scalars().all()
        ]

    async def create_category(self, category_data: CategoryCreate) -> Category:
        """
        Create a root category. Its ``detail_type`` decides which detail record its products get.
        """
        slug = await generate_unique_slug(category_data.name, self.db, model=Category)

        new_category = Category(
            name=category_data.name.strip(),
            slug=slug,
            description=category_data.description,
            image_url=category_data.image_url,
            detail_type=category_data.detail_type,
            is_active=category_data.is_active,
            parent_category_id=None,
        )

        return await self._save_new(new_category)

    async def create_subcategory(self, subcategory_data: SubcategoryCreate) -> Category:
        """
        Create a subcategory under a root category. Subcategories never carry a detail type.
        """
        parent = await self.get_category_by_id(subcategory_data.parent_category_id)
        if parent.is_subcategory:
            raise BadRequestException("Subcategories can only be created under a root category")

        slug = await generate_unique_slug(subcategory_data.name, self.db, model=Category)

        new_subcategory = Category(
            name=subcategory_data.name.strip(),
            slug=slug,
            description=subcategory_data.description,
            image_url=subcategory_data.image_url,
            is_active=subcategory_data.is_active,
            parent_category_id=parent.id,
            detail_type=None,
        )

        return await self._save_new(new_subcategory)

    async def _save_new(self, category: Category) -> Category:
        slug = category.slug
        try:
            self.db.add(category)
            await self.db.commit()
            await self.db.refresh(category)
        except IntegrityError:
            await self.db.rollback()
            raise ConflictException(f"A category with the slug '{slug}' already exists")
        except Exception:
            await self.db.rollback()
            raise

        self.catalog_cache.invalidate()
        logger.info("Created category %s (%s)", category.slug, category.id)
        return category

    async def update_category(self, category_id: UUID, category_data: CategoryUpdate) -> Category:
        """
        Update a category
        """
        try:
            category = await self.get_category_by_id(category_id)

            # Update category with non-None fields
            update_data = category_data.model_dump(exclude_unset=True, exclude_none=True)

            if "detail_type" in update_data and category.is_subcategory:
                raise BadRequestException("Subcategories inherit the detail type of their parent")

            # If name is updated, update slug too
            if "name" in update_data:
                update_data["name"] = update_data["name"].strip()
                update_data["slug"] = await generate_unique_slug(
                    update_data["name"], self.db, model=Category, exclude_id=category_id
                )

            if update_data:
                stmt = (
                    update(Category)
                    .where(Category.id == category_id)
                    .values(**update_data)
                    .execution_options(synchronize_session="fetch")
                )

                await self.db.execute(stmt)
                await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise

        self.catalog_cache.invalidate()
        return await self.get_category_by_id(category_id)

    async def set_category_status(self, category_id: UUID, is_active: bool) -> Category:
        return await self.update_category(category_id, CategoryUpdate(is_active=is_active))

    async def delete_category(self, category_id: UUID) -> bool:
        """
        Delete a category
        Returns True if successful
        """
        try:
            # Check if category exists
            await self.get_category_by_id(category_id)

            # Check if category has any products
            products_query = select(func.count()).select_from(Product).where(
                (Product.category_id == category_id) | (Product.subcategory_id == category_id)
            )
            products_count = (await self.db.execute(products_query)).scalar()

            if products_count > 0:
                raise ConflictException(f"Cannot delete category. It has {products_count} associated products. Please reassign or delete the products first.")

            # Check if category has any child categories
            children_query = select(func.count()).select_from(Category).where(Category.parent_category_id == category_id)
            children_count = (await self.db.execute(children_query)).scalar()

            if children_count > 0:
                raise ConflictException(f"Cannot delete category. It has {children_count} subcategories. Please reassign or delete the subcategories first.")

            await self.db.execute(delete(Category).where(Category.id == category_id))
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise

        self.catalog_cache.invalidate()
        logger.info("Deleted category %s", category_id)
        return True
