import logging
from typing import Any, Dict, List, Optional, Tuple
from uuid import UUID, uuid4

from sqlalchemy import delete, func, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from ..core.config import Config
from ..enums import DetailType
from ..exceptions import (
    NotFoundException,
    ProductValidationException,
    ResolutionException,
    StoreWriteException,
)
from ..models import (
    CartItem,
    Category,
    Product,
    ProductImage,
    Review,
    WishlistItem,
)
from ..schemas.product import CreateProductRequest, ProductFormData, ProductImageCreate
from ..utils.category_resolver import (
    ResolvedCategoryIds,
    first_selected_name,
    get_category_by_name,
    resolve_category_ids,
)
from ..utils.detail_type import DETAIL_MODELS, get_detail_model, get_detail_type
from ..utils.form_utils import safe_parse_float, safe_parse_int, to_null_if_empty
from ..utils.product_images import map_product_images_for_api
from ..utils.product_validation import validate_product_form
from ..utils.slug import generate_unique_slug
from .catalog_cache import CatalogCache, CatalogSnapshot


logger = logging.getLogger(__name__)


def _join_selection(values: List[str]) -> Optional[str]:
    return ",".join(values) if values else None


def _thumbnail_url(images: List[Dict[str, Any]]) -> Optional[str]:
    if not images:
        return None
    return min(images, key=lambda image: image["display_order"])["image_url"]


def build_detail_values(detail_type: DetailType, form_data: ProductFormData) -> Dict[str, Any]:
    """Column values for the detail record matching ``detail_type``, taken from the form."""
    if detail_type == DetailType.MOBILE:
        details = form_data.mobile_details
        return {
            "brand": (details.brand or "").strip() or "Not Specified",
            "compatible_model": to_null_if_empty(details.compatible_model),
            "type": to_null_if_empty(details.type),
            "color": to_null_if_empty(details.color),
        }

    if detail_type == DetailType.APPAREL:
        details = form_data.apparel_details
        return {
            "brand": (details.brand or "").strip() or "Not Specified",
            "gender": to_null_if_empty(details.gender),
            "material": to_null_if_empty(details.material),
            "fit_type": _join_selection(form_data.selected_fit_types),
            "pattern": to_null_if_empty(details.pattern),
            "color": to_null_if_empty(details.color),
            "size": _join_selection(form_data.selected_sizes),
            "sku": to_null_if_empty(details.sku),
        }

    details = form_data.accessories_details
    return {
        "accessory_type": (details.accessory_type or "").strip(),
        "compatible_with": (details.compatible_with or "").strip(),
        "material": (details.material or "").strip(),
        "color": (details.color or "").strip(),
    }


class ProductService:
    def __init__(self, db: AsyncSession, catalog_cache: CatalogCache):
        self.db = db
        self.catalog_cache = catalog_cache

    async def create_product(self, form_data: ProductFormData) -> Product:
        """
        Create a product from the admin form.

        Validates, picks a free slug, resolves the category names, then writes the
        product, its category-typed detail record and its images as one unit.
        Nothing is persisted if any of those writes fails.
        """
        snapshot = await self.catalog_cache.get(self.db)
        self._validate_form(form_data, snapshot)

        name = form_data.name.strip()
        slug = await generate_unique_slug(name, self.db)

        resolved, detail_type = self._resolve_form_categories(form_data, snapshot)
        detail_values = build_detail_values(detail_type, form_data) if detail_type else None

        images = map_product_images_for_api(form_data.images)
        product_data = self._prepare_product_data(form_data, resolved.category_id, resolved.subcategory_id)
        if not product_data["image_url"]:
            product_data["image_url"] = _thumbnail_url(images)

        return await self._write_product(product_data, slug, name, detail_type, detail_values, images)

    async def update_product(self, product_id: UUID, form_data: ProductFormData) -> Product:
        """
        Apply the admin edit form to an existing product.

        The product row, the detail record for the category's detail type and the
        image list are saved in one transaction. Images are only synced when the
        form sends an ``images`` list: rows missing from it are deleted, rows it
        still lists are updated in place and the rest are inserted.
        """
        product = await self.get_product_by_id(product_id)
        current_name, current_slug, current_image_url = product.name, product.slug, product.image_url

        snapshot = await self.catalog_cache.get(self.db)
        self._validate_form(form_data, snapshot)

        name = form_data.name.strip()
        slug = current_slug
        if name != current_name:
            slug = await generate_unique_slug(name, self.db, exclude_id=product_id)

        resolved, detail_type = self._resolve_form_categories(form_data, snapshot)
        detail_values = build_detail_values(detail_type, form_data) if detail_type else None

        sync_images = "images" in form_data.model_fields_set
        images = map_product_images_for_api(form_data.images, is_edit=True)

        product_data = self._prepare_product_data(form_data, resolved.category_id, resolved.subcategory_id)
        product_data.pop("id")
        if not product_data["image_url"]:
            product_data["image_url"] = _thumbnail_url(images) if sync_images else current_image_url

        try:
            await self.db.execute(
                update(Product).where(Product.id == product_id).values(slug=slug, **product_data)
            )
            await self._drop_other_detail_records(product_id, detail_type)
            await self._write_detail_record(product_id, detail_type, detail_values)
            if sync_images:
                await self._sync_images(product_id, images)

            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.exception("Product %s update failed, transaction rolled back", product_id)
            raise StoreWriteException(f"Failed to update product: {e}")
        except Exception:
            await self.db.rollback()
            raise

        logger.info("Updated product %s (slug '%s', detail type: %s)", product_id, slug, detail_type)
        return await self.get_product_by_id(product_id)

    def _validate_form(self, form_data: ProductFormData, snapshot: CatalogSnapshot) -> None:
        validation = validate_product_form(form_data, snapshot.categories)
        if not validation.is_valid:
            raise ProductValidationException(validation.errors)

    def _resolve_form_categories(
        self, form_data: ProductFormData, snapshot: CatalogSnapshot
    ) -> Tuple[ResolvedCategoryIds, Optional[DetailType]]:
        resolved = resolve_category_ids(
            form_data.category, form_data.subcategories, snapshot.categories, snapshot.subcategories
        )
        if resolved.category_id is None:
            raise ResolutionException(f"Category '{form_data.category}' could not be found")
        if resolved.subcategory_id is None:
            raise ResolutionException(
                f"Subcategory '{first_selected_name(form_data.subcategories)}' could not be found "
                f"under '{form_data.category}'"
            )

        detail_type = get_detail_type(get_category_by_name(form_data.category, snapshot.categories))
        return resolved, detail_type

    async def insert_product(self, request: CreateProductRequest) -> Product:
        """
        Store a product already shaped for the database, as sent to the admin write API.
        No detail record is written on this path.
        """
        product_data = request.product.model_dump(exclude={"slug"})
        if product_data["id"] is None:
            product_data["id"] = uuid4()
        if product_data["in_stock"] is None:
            product_data["in_stock"] = product_data["stock_quantity"] > 0
        product_data["description"] = product_data["description"] or ""

        images = [image.model_dump(exclude={"id"}) for image in request.images or []]
        if not product_data["image_url"]:
            product_data["image_url"] = _thumbnail_url(images)

        slug = request.product.slug
        return await self._write_product(product_data, slug, slug, None, None, images)

    def _prepare_product_data(
        self, form_data: ProductFormData, category_id: UUID, subcategory_id: UUID
    ) -> Dict[str, Any]:
        stock_quantity = safe_parse_int(form_data.stock_quantity) or 0
        original_price = safe_parse_float(form_data.original_price)

        return {
            "id": form_data.id or uuid4(),
            "name": form_data.name.strip(),
            "description": form_data.description.strip(),
            "price": safe_parse_float(form_data.price),
            "original_price": original_price,
            "stock_quantity": stock_quantity,
            "in_stock": stock_quantity > 0,
            "is_active": form_data.is_active,
            "show_in_hero": form_data.show_in_hero,
            "is_new": form_data.is_new,
            "badge": to_null_if_empty(form_data.badge),
            "brand": to_null_if_empty(form_data.brand),
            "image_url": to_null_if_empty(form_data.image_url),
            "category_id": category_id,
            "subcategory_id": subcategory_id,
        }

    async def _write_product(
        self,
        product_data: Dict[str, Any],
        slug: str,
        slug_source: str,
        detail_type: Optional[DetailType],
        detail_values: Optional[Dict[str, Any]],
        images: List[Dict[str, Any]],
    ) -> Product:
        product_id = product_data["id"]
        attempts = max(1, Config.SLUG_RETRY_ATTEMPTS)

        for attempt in range(1, attempts + 1):
            try:
                self.db.add(Product(slug=slug, **product_data))
                await self.db.flush()

                await self._write_detail_record(product_id, detail_type, detail_values)
                await self._write_images(product_id, images)

                await self.db.commit()
                break
            except IntegrityError as e:
                await self.db.rollback()

                if not self._is_slug_conflict(e) or attempt == attempts:
                    logger.error("Product %s write failed on attempt %d: %s", product_id, attempt, e.orig)
                    raise StoreWriteException(f"Failed to create product: {e.orig}")

                # the slug was taken between the existence check and the write
                logger.warning("Slug '%s' already taken, retrying product %s", slug, product_id)
                slug = await generate_unique_slug(slug_source, self.db)
            except SQLAlchemyError as e:
                await self.db.rollback()
                logger.exception("Product %s write failed, transaction rolled back", product_id)
                raise StoreWriteException(f"Failed to create product: {e}")
            except Exception:
                await self.db.rollback()
                raise

        logger.info("Created product %s with slug '%s' (detail type: %s)", product_id, slug, detail_type)
        return await self.get_product_by_id(product_id)

    async def _write_detail_record(
        self, product_id: UUID, detail_type: Optional[DetailType], detail_values: Optional[Dict[str, Any]]
    ) -> None:
        """Insert the detail record for ``detail_type``, or update it if the product already has one."""
        detail_model = get_detail_model(detail_type)
        if detail_model is None:
            return

        result = await self.db.execute(select(detail_model).where(detail_model.product_id == product_id))
        existing = result.scalars().first()

        if existing is None:
            self.db.add(detail_model(product_id=product_id, **detail_values))
        else:
            for field, value in detail_values.items():
                setattr(existing, field, value)

        await self.db.flush()

    async def _drop_other_detail_records(self, product_id: UUID, detail_type: Optional[DetailType]) -> None:
        current_model = get_detail_model(detail_type)
        for model in DETAIL_MODELS.values():
            if model is not current_model:
                await self.db.execute(delete(model).where(model.product_id == product_id))

    async def _write_images(self, product_id: UUID, images: List[Dict[str, Any]]) -> None:
        if not images:
            return

        self.db.add_all([ProductImage(product_id=product_id, **image) for image in images])
        await self.db.flush()

    async def _sync_images(self, product_id: UUID, images: List[Dict[str, Any]]) -> None:
        """
        Make the stored images match the edited list.

        An entry matches a stored row by id, or failing that by URL. Matched rows
        are updated in place, unmatched rows are deleted, new entries are inserted.
        """
        result = await self.db.execute(select(ProductImage).where(ProductImage.product_id == product_id))
        stored = {image.id: image for image in result.scalars().all()}

        matched: Dict[UUID, Dict[str, Any]] = {}
        new_images = []
        for image in images:
            row = stored.get(image.get("id"))
            if row is None or row.id in matched:
                row = next(
                    (r for r in stored.values() if r.image_url == image["image_url"] and r.id not in matched),
                    None,
                )

            if row is None:
                new_images.append(image)
            else:
                matched[row.id] = image

        for image_id, row in stored.items():
            if image_id not in matched:
                await self.db.delete(row)
        await self.db.flush()

        for image_id, image in matched.items():
            row = stored[image_id]
            row.image_url = image["image_url"]
            row.alt_text = image["alt_text"]
            row.display_order = image["display_order"]

        await self._write_images(product_id, [
            {key: value for key, value in image.items() if key != "id"} for image in new_images
        ])
        await self.db.flush()

    @staticmethod
    def _is_slug_conflict(error: IntegrityError) -> bool:
        message = str(error.orig).lower()
        return "slug" in message and ("unique" in message or "duplicate" in message)

    async def get_product_by_id(self, product_id: UUID) -> Product:
        """
        Get a product by its ID, with images in display order
        """
        query = (
            select(Product)
            .options(selectinload(Product.images))
            .where(Product.id == product_id)
            .execution_options(populate_existing=True)
        )
        result = await self.db.execute(query)
        product = result.scalars().first()

        if not product:
            raise NotFoundException(f"Product with ID {product_id} not found")

        return product

    async def get_product_by_slug(self, slug: str) -> Product:
        query = (
            select(Product)
            .options(selectinload(Product.images))
            .where(Product.slug == slug, Product.is_active.is_(True))
        )
        result = await self.db.execute(query)
        product = result.scalars().first()

        if not product:
            raise NotFoundException(f"Product '{slug}' not found")

        return product

    async def list_products(
        self,
        skip: int = 0,
        limit: int = 20,
        category_slug: Optional[str] = None,
        subcategory_slug: Optional[str] = None,
        show_in_hero: Optional[bool] = None,
        search: Optional[str] = None,
        include_inactive: bool = False,
    ) -> Tuple[List[Product], int]:
        """
        List products with filters and pagination
        Returns products and total count
        """
        filters = []
        if not include_inactive:
            filters.append(Product.is_active.is_(True))
        if category_slug:
            filters.append(Product.category_id.in_(select(Category.id).where(Category.slug == category_slug)))
        if subcategory_slug:
            filters.append(Product.subcategory_id.in_(select(Category.id).where(Category.slug == subcategory_slug)))
        if show_in_hero is not None:
            filters.append(Product.show_in_hero.is_(show_in_hero))
        if search:
            filters.append(Product.name.ilike(f"%{search}%"))

        count_query = select(func.count()).select_from(Product).where(*filters)
        total_count = (await self.db.execute(count_query)).scalar() or 0

        query = (
            select(Product)
            .options(selectinload(Product.images))
            .where(*filters)
            .order_by(Product.created_at.desc(), Product.name)
            .offset(skip)
            .limit(limit)
        )
        result = await self.db.execute(query)

        return list(result.scalars().all()), total_count

    async def set_product_status(self, product_id: UUID, is_active: bool) -> Product:
        await self.get_product_by_id(product_id)

        try:
            await self.db.execute(update(Product).where(Product.id == product_id).values(is_active=is_active))
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise

        return await self.get_product_by_id(product_id)

    async def update_stock(self, product_id: UUID, stock_quantity: int) -> Product:
        await self.get_product_by_id(product_id)

        try:
            stmt = (
                update(Product)
                .where(Product.id == product_id)
                .values(stock_quantity=stock_quantity, in_stock=stock_quantity > 0)
            )
            await self.db.execute(stmt)
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise

        logger.info("Stock for product %s set to %d", product_id, stock_quantity)
        return await self.get_product_by_id(product_id)

    async def add_product_images(self, product_id: UUID, images: List[ProductImageCreate]) -> List[ProductImage]:
        """
        Attach already uploaded images to a product
        """
        await self.get_product_by_id(product_id)

        new_images = [
            ProductImage(
                product_id=product_id,
                image_url=image.image_url,
                alt_text=image.alt_text or "",
                display_order=image.display_order,
            )
            for image in images
        ]

        try:
            self.db.add_all(new_images)
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise StoreWriteException(f"Failed to insert images: {e}")

        logger.info("Added %d images to product %s", len(new_images), product_id)
        return new_images

    async def delete_product_image(self, product_id: UUID, image_id: UUID) -> bool:
        query = select(ProductImage).where(ProductImage.id == image_id, ProductImage.product_id == product_id)
        image = (await self.db.execute(query)).scalars().first()

        if not image:
            raise NotFoundException("Image not found or already deleted")

        try:
            await self.db.delete(image)
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise StoreWriteException(f"Failed to delete image: {e}")

        return True

    async def delete_product(self, product_id: UUID) -> bool:
        """
        Delete a product together with its images, detail record, reviews,
        wishlist entries and cart items. All rows go in one transaction.
        """
        await self.get_product_by_id(product_id)

        dependent_models = [ProductImage, *DETAIL_MODELS.values(), Review, WishlistItem, CartItem]
        try:
            for model in dependent_models:
                await self.db.execute(delete(model).where(model.product_id == product_id))
            await self.db.execute(delete(Product).where(Product.id == product_id))
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.exception("Deleting product %s failed", product_id)
            raise StoreWriteException(f"Failed to delete product: {e}")

        logger.info("Deleted product %s and its dependent rows", product_id)
        return True

