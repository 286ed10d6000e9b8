from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Optional, List, Union
from uuid import UUID
import bleach


ALLOWED_DESCRIPTION_TAGS = [
    'p', 'br', 'strong', 'b', 'em', 'i', 'u', 'ul', 'ol', 'li',
    'h2', 'h3', 'h4', 'blockquote', 'span', 'a', 'small', 'sub', 'sup',
]
ALLOWED_DESCRIPTION_ATTRIBUTES = {
    'a': ['href', 'title', 'target'],
    '*': ['class'],
}


# Admin form state, as submitted by the product editor
class ProductImageInput(BaseModel):
    id: Optional[UUID] = None
    image_url: str = Field(..., min_length=1)
    alt_text: Optional[str] = None
    display_order: Optional[int] = Field(None, ge=0)


class MobileDetailsInput(BaseModel):
    brand: Optional[str] = None
    compatible_model: Optional[str] = None
    type: Optional[str] = None
    color: Optional[str] = None


class ApparelDetailsInput(BaseModel):
    brand: Optional[str] = None
    gender: Optional[str] = None
    material: Optional[str] = None
    pattern: Optional[str] = None
    color: Optional[str] = None
    sku: Optional[str] = None


class AccessoriesDetailsInput(BaseModel):
    accessory_type: Optional[str] = None
    compatible_with: Optional[str] = None
    material: Optional[str] = None
    color: Optional[str] = None


class ProductFormData(BaseModel):
    """
    Raw product editor state. Numeric fields arrive as whatever the form holds
    (text or numbers) and are checked by ``validate_product_form``.
    """
    id: Optional[UUID] = None
    name: str = ""
    description: str = ""
    price: Optional[Union[str, float]] = None
    original_price: Optional[Union[str, float]] = None
    stock_quantity: Optional[Union[str, int]] = None
    badge: str = ""
    brand: Optional[str] = None
    category: str = ""
    subcategories: List[str] = []
    image_url: str = ""
    is_active: bool = True
    show_in_hero: bool = False
    is_new: bool = False
    images: List[ProductImageInput] = []
    mobile_details: MobileDetailsInput = Field(default_factory=MobileDetailsInput, alias="mobileDetails")
    apparel_details: ApparelDetailsInput = Field(default_factory=ApparelDetailsInput, alias="apparelDetails")
    accessories_details: AccessoriesDetailsInput = Field(default_factory=AccessoriesDetailsInput, alias="accessoriesDetails")
    selected_sizes: List[str] = Field(default_factory=list, alias="selectedSizes")
    selected_fit_types: List[str] = Field(default_factory=list, alias="selectedFitTypes")

    model_config = ConfigDict(populate_by_name=True)


# Wire shape of the admin write API: {product, images}
class ProductCreate(BaseModel):
    id: Optional[UUID] = None
    name: str = Field(..., min_length=1)
    slug: str = Field(..., min_length=1)
    description: Optional[str] = ""
    price: float = Field(..., gt=0)
    original_price: Optional[float] = Field(None, gt=0)
    badge: Optional[str] = None
    brand: Optional[str] = None
    image_url: Optional[str] = None
    stock_quantity: int = Field(..., ge=0)
    is_active: bool
    show_in_hero: bool
    category_id: Optional[UUID] = None
    subcategory_id: Optional[UUID] = None
    is_new: bool = False
    rating: float = Field(0, ge=0, le=5)
    review_count: int = Field(0, ge=0)
    in_stock: Optional[bool] = None

    @field_validator('description', mode='before')
    @classmethod
    def sanitize_description(cls, v):
        """Strip markup outside the small rich-text whitelist"""
        if not v:
            return v

        return bleach.clean(
            v,
            tags=ALLOWED_DESCRIPTION_TAGS,
            attributes=ALLOWED_DESCRIPTION_ATTRIBUTES,
            protocols=['http', 'https', 'mailto'],
            strip=True,
            strip_comments=True,
        )


class ProductImageCreate(BaseModel):
    id: Optional[UUID] = None
    image_url: str = Field(..., min_length=1)
    alt_text: Optional[str] = ""
    display_order: int = Field(..., ge=0)


class CreateProductRequest(BaseModel):
    product: ProductCreate
    images: Optional[List[ProductImageCreate]] = None


class StockUpdate(BaseModel):
    stock_quantity: int = Field(..., ge=0)


class StatusUpdate(BaseModel):
    is_active: bool


# Responses
class ProductImageResponse(BaseModel):
    id: UUID
    image_url: str
    alt_text: str
    display_order: int

    model_config = ConfigDict(from_attributes=True)


class ProductResponse(BaseModel):
    id: UUID
    name: str
    slug: str
    description: str
    price: float
    original_price: Optional[float] = None
    stock_quantity: int
    in_stock: bool
    is_active: bool
    show_in_hero: bool
    is_new: bool
    badge: Optional[str] = None
    brand: Optional[str] = None
    rating: float
    review_count: int
    image_url: Optional[str] = None
    category_id: Optional[UUID] = None
    subcategory_id: Optional[UUID] = None
    images: List[ProductImageResponse] = []

    model_config = ConfigDict(from_attributes=True)


class CreateProductResponse(BaseModel):
    success: bool = True
    product: ProductResponse


class ProductListResponse(BaseModel):
    items: List[ProductResponse]
    total: int
    skip: int
    limit: int
