from .category import (
    CategoryCreate,
    CategoryResponse,
    CategoryTreeResponse,
    CategoryUpdate,
    SubcategoryCreate,
)
from .product import (
    CreateProductRequest,
    CreateProductResponse,
    ProductCreate,
    ProductFormData,
    ProductImageCreate,
    ProductImageInput,
    ProductImageResponse,
    ProductListResponse,
    ProductResponse,
    StatusUpdate,
    StockUpdate,
)


__all__ = [
    # category schemas
    "CategoryCreate",
    "CategoryResponse",
    "CategoryTreeResponse",
    "CategoryUpdate",
    "SubcategoryCreate",

    # product schemas
    "CreateProductRequest",
    "CreateProductResponse",
    "ProductCreate",
    "ProductFormData",
    "ProductImageCreate",
    "ProductImageInput",
    "ProductImageResponse",
    "ProductListResponse",
    "ProductResponse",
    "StatusUpdate",
    "StockUpdate",
]
