from uuid import uuid4

from sqlalchemy import Column, String, Text, Boolean, ForeignKey, Enum, Uuid
from sqlalchemy.orm import relationship

from ..db.base import Base
from ..enums import DetailType
from .base import TimeStampMixin


class Category(Base, TimeStampMixin):
    """
    Root categories have no parent and carry the ``detail_type`` their products use.
    Rows with a ``parent_category_id`` are subcategories: plain groupings with no type of their own.
    """
    __tablename__ = "categories"

    id = Column(Uuid, primary_key=True, default=uuid4)
    name = Column(String, nullable=False)
    slug = Column(String, nullable=False, unique=True, index=True)
    description = Column(Text, nullable=True)
    image_url = Column(String, nullable=True)
    parent_category_id = Column(Uuid, ForeignKey("categories.id"), nullable=True, index=True)
    is_active = Column(Boolean, default=True, nullable=False)
    detail_type = Column(Enum(DetailType, values_callable=lambda e: [m.value for m in e]), nullable=True)

    # Relationships
    parent = relationship("Category", remote_side=[id], back_populates="subcategories")
    subcategories = relationship("Category", back_populates="parent")

    @property
    def is_subcategory(self) -> bool:
        return self.parent_category_id is not None

    def __repr__(self):
        return f'<Category(id={self.id}, name={self.name}, parent_category_id={self.parent_category_id})>'
