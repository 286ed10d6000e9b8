from uuid import uuid4

from sqlalchemy import Column, Integer, String, Text, Boolean, Float, ForeignKey, Uuid
from sqlalchemy.orm import relationship

from ..db.base import Base
from .base import TimeStampMixin


class Product(Base, TimeStampMixin):
    __tablename__ = "products"

    id = Column(Uuid, primary_key=True, default=uuid4)
    name = Column(String, nullable=False)
    slug = Column(String, nullable=False, unique=True, index=True)
    description = Column(Text, nullable=False, default="")
    price = Column(Float, nullable=False)
    original_price = Column(Float, nullable=True)
    stock_quantity = Column(Integer, nullable=False, default=0)
    in_stock = Column(Boolean, nullable=False, default=False)
    is_active = Column(Boolean, nullable=False, default=True)
    show_in_hero = Column(Boolean, nullable=False, default=False)
    is_new = Column(Boolean, nullable=False, default=False)
    badge = Column(String, nullable=True)
    brand = Column(String, nullable=True)
    rating = Column(Float, nullable=False, default=0)
    review_count = Column(Integer, nullable=False, default=0)
    image_url = Column(String, nullable=True)
    category_id = Column(Uuid, ForeignKey("categories.id"), nullable=True, index=True)
    subcategory_id = Column(Uuid, ForeignKey("categories.id"), nullable=True, index=True)

    # Relationships
    images = relationship(
        "ProductImage",
        back_populates="product",
        order_by="ProductImage.display_order",
        cascade="all, delete-orphan",
    )


    def __repr__(self):
        return f"<Product(id={self.id}, slug={self.slug}, category_id={self.category_id}, subcategory_id={self.subcategory_id})>"
