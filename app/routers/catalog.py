from fastapi import APIRouter, Depends, Query
from typing import List, Optional

from ..core.dependencies import get_category_service, get_product_service
from ..schemas.category import CategoryTreeResponse
from ..schemas.product import ProductListResponse, ProductResponse
from ..services import CategoryService, ProductService


router = APIRouter()


@router.get("/categories", response_model=List[CategoryTreeResponse])
async def list_category_tree(service: CategoryService = Depends(get_category_service)):
    """
    **Storefront Categories**

    Active root categories, each with its active subcategories.
    """
    return await service.list_active_tree()


@router.get("/products", response_model=ProductListResponse)
async def list_products(
    skip: int = Query(0, ge=0),
    limit: int = Query(20, ge=1, le=100),
    category: Optional[str] = Query(None, description="Category slug"),
    subcategory: Optional[str] = Query(None, description="Subcategory slug"),
    hero: Optional[bool] = Query(None, description="Only products flagged for the hero section"),
    search: Optional[str] = None,
    service: ProductService = Depends(get_product_service),
):
    """
    **Storefront Products**

    Active products, newest first.
    """
    products, total = await service.list_products(
        skip=skip,
        limit=limit,
        category_slug=category,
        subcategory_slug=subcategory,
        show_in_hero=hero,
        search=search,
    )
    return ProductListResponse(items=products, total=total, skip=skip, limit=limit)


@router.get("/products/{slug}", response_model=ProductResponse)
async def get_product(slug: str, service: ProductService = Depends(get_product_service)):
    return await service.get_product_by_slug(slug)
