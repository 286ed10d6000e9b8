from uuid import uuid4

from sqlalchemy import Column, Integer, String, ForeignKey, Uuid
from sqlalchemy.orm import relationship

from ..db.base import Base
from .base import TimeStampMixin


class ProductImage(Base, TimeStampMixin):
    __tablename__ = "product_images"

    id = Column(Uuid, primary_key=True, default=uuid4)
    product_id = Column(Uuid, ForeignKey("products.id", ondelete="CASCADE"), nullable=False, index=True)
    image_url = Column(String, nullable=False)
    alt_text = Column(String, nullable=False, default="")
    display_order = Column(Integer, nullable=False, default=0)  # lowest order is the thumbnail

    # Relationships
    product = relationship("Product", back_populates="images")
