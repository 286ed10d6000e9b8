from fastapi import APIRouter, Depends, status
from typing import List
from uuid import UUID

from ..core.dependencies import get_category_service, get_current_admin, get_product_service
from ..schemas.category import (
    CategoryCreate,
    CategoryResponse,
    CategoryUpdate,
    SubcategoryCreate,
)
from ..schemas.product import (
    CreateProductRequest,
    CreateProductResponse,
    ProductFormData,
    ProductImageCreate,
    ProductImageResponse,
    ProductResponse,
    StatusUpdate,
    StockUpdate,
)
from ..services import CategoryService, ProductService


router = APIRouter(dependencies=[Depends(get_current_admin)])


# Product operations
@router.post("/products", response_model=CreateProductResponse, status_code=status.HTTP_201_CREATED)
async def create_product(
    form_data: ProductFormData,
    service: ProductService = Depends(get_product_service),
):
    """
    **Create Product from the Admin Form**

    Runs the full creation flow: form validation, slug generation, category and
    subcategory resolution, then the product row, its category-typed detail
    record and its images in a single transaction.

    **Request Body:**
    - **name**, **description**, **price**: required
    - **category**: name of a root category (required)
    - **subcategories**: selected subcategory names, the first is used (required)
    - **stock_quantity**: blank means 0, never negative
    - **mobileDetails** / **apparelDetails** / **accessoriesDetails**: fields for the category's detail type
    - **selectedSizes**, **selectedFitTypes**: required for apparel categories
    - **images**: uploaded image references in display order

    **Errors:**
    - **422**: field errors under `errors`
    - **400**: category or subcategory could not be resolved
    - **500**: the write failed and nothing was stored
    """
    product = await service.create_product(form_data)
    return CreateProductResponse(success=True, product=product)


@router.post("/create-product", response_model=CreateProductResponse)
async def insert_product(
    request: CreateProductRequest,
    service: ProductService = Depends(get_product_service),
):
    """
    **Create Product (raw write)**

    Stores `{product, images}` as sent, with caller-supplied slug and category ids.
    A slug taken in the meantime gets the next free numeric suffix.
    """
    product = await service.insert_product(request)
    return CreateProductResponse(success=True, product=product)


@router.patch("/products/{product_id}", response_model=CreateProductResponse)
async def update_product(
    product_id: UUID,
    form_data: ProductFormData,
    service: ProductService = Depends(get_product_service),
):
    """
    **Update Product from the Admin Form**

    Same fields and checks as product creation. Renaming regenerates the slug.
    The detail record for the category's detail type is updated or created.

    **images**: when sent, becomes the product's image list. Entries keep their
    `id` to be updated in place, entries without one are added, and stored
    images missing from the list are deleted. Omit it to leave images as they are.
    """
    product = await service.update_product(product_id, form_data)
    return CreateProductResponse(success=True, product=product)


@router.post(
    "/products/{product_id}/images",
    response_model=List[ProductImageResponse],
    status_code=status.HTTP_201_CREATED,
)
async def add_product_images(
    product_id: UUID,
    images: List[ProductImageCreate],
    service: ProductService = Depends(get_product_service),
):
    return await service.add_product_images(product_id, images)


@router.delete("/products/{product_id}/images/{image_id}")
async def delete_product_image(
    product_id: UUID,
    image_id: UUID,
    service: ProductService = Depends(get_product_service),
):
    await service.delete_product_image(product_id, image_id)
    return {"success": True, "message": "Image deleted successfully"}


@router.delete("/products/{product_id}")
async def delete_product(
    product_id: UUID,
    service: ProductService = Depends(get_product_service),
):
    """
    **Delete Product**

    Removes the product along with its images, detail record, reviews,
    wishlist entries and cart items.
    """
    await service.delete_product(product_id)
    return {"success": True, "message": f"Product {product_id} deleted successfully"}


@router.patch("/products/{product_id}/status", response_model=ProductResponse)
async def set_product_status(
    product_id: UUID,
    status_update: StatusUpdate,
    service: ProductService = Depends(get_product_service),
):
    return await service.set_product_status(product_id, status_update.is_active)


@router.patch("/products/{product_id}/stock", response_model=ProductResponse)
async def update_stock(
    product_id: UUID,
    stock_update: StockUpdate,
    service: ProductService = Depends(get_product_service),
):
    return await service.update_stock(product_id, stock_update.stock_quantity)


# Category operations
@router.get("/categories", response_model=List[CategoryResponse])
async def list_categories(service: CategoryService = Depends(get_category_service)):
    """
    **List All Categories**

    Every root category and subcategory, active or not. Roots come first.
    """
    return await service.list_categories()


@router.post("/categories", response_model=CategoryResponse, status_code=status.HTTP_201_CREATED)
async def create_category(
    category_data: CategoryCreate,
    service: CategoryService = Depends(get_category_service),
):
    """
    **Create Root Category**

    - **name**: Category name (required)
    - **detail_type**: `mobile`, `apparel`, `accessories` or null
    - **description**, **image_url**: optional
    """
    return await service.create_category(category_data)


@router.post("/subcategories", response_model=CategoryResponse, status_code=status.HTTP_201_CREATED)
async def create_subcategory(
    subcategory_data: SubcategoryCreate,
    service: CategoryService = Depends(get_category_service),
):
    """
    **Create Subcategory**

    - **parent_category_id**: root category the subcategory belongs to (required)
    """
    return await service.create_subcategory(subcategory_data)


@router.patch("/categories/{category_id}", response_model=CategoryResponse)
async def update_category(
    category_id: UUID,
    category_data: CategoryUpdate,
    service: CategoryService = Depends(get_category_service),
):
    """
    **Update Category**

    Partial update. Renaming regenerates the slug. Existing products keep
    their detail records when `detail_type` changes.
    """
    return await service.update_category(category_id, category_data)


@router.patch("/categories/{category_id}/status", response_model=CategoryResponse)
async def set_category_status(
    category_id: UUID,
    status_update: StatusUpdate,
    service: CategoryService = Depends(get_category_service),
):
    return await service.set_category_status(category_id, status_update.is_active)


@router.delete("/categories/{category_id}")
async def delete_category(
    category_id: UUID,
    service: CategoryService = Depends(get_category_service),
):
    """
    **Delete Category**

    Deletes a category if it has no associated products or subcategories.
    """
    await service.delete_category(category_id)
    return {"message": f"Category {category_id} deleted successfully"}
