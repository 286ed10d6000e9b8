from .catalog_cache import CatalogCache, CatalogSnapshot
from .category_service import CategoryService
from .product_service import ProductService


__all__ = [
    "CatalogCache",
    "CatalogSnapshot",
    "CategoryService",
    "ProductService",
]
