from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, List
from uuid import UUID

from ..enums import DetailType


class CategoryBase(BaseModel):
    name: str = Field(..., min_length=1)
    description: Optional[str] = None
    image_url: Optional[str] = None


class CategoryCreate(CategoryBase):
    detail_type: Optional[DetailType] = None
    is_active: bool = True


class SubcategoryCreate(CategoryBase):
    parent_category_id: UUID
    is_active: bool = True


class CategoryUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    image_url: Optional[str] = None
    detail_type: Optional[DetailType] = None
    is_active: Optional[bool] = None


class CategoryResponse(CategoryBase):
    id: UUID
    slug: str
    parent_category_id: Optional[UUID] = None
    is_active: bool
    detail_type: Optional[DetailType] = None

    model_config = ConfigDict(from_attributes=True)


class CategoryTreeResponse(CategoryResponse):
    subcategories: List[CategoryResponse] = []
