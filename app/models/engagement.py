from uuid import uuid4

from sqlalchemy import Column, Integer, Float, Text, ForeignKey, Uuid

from ..db.base import Base
from .base import TimeStampMixin


class Review(Base, TimeStampMixin):
    __tablename__ = "reviews"

    id = Column(Uuid, primary_key=True, default=uuid4)
    product_id = Column(Uuid, ForeignKey("products.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(Uuid, ForeignKey("users.id"), nullable=False)
    rating = Column(Float, nullable=False)  # 1-5 star rating
    comment = Column(Text, nullable=True)


class WishlistItem(Base, TimeStampMixin):
    __tablename__ = "wishlist_items"

    id = Column(Uuid, primary_key=True, default=uuid4)
    product_id = Column(Uuid, ForeignKey("products.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(Uuid, ForeignKey("users.id"), nullable=False)


class CartItem(Base, TimeStampMixin):
    __tablename__ = "cart_items"

    id = Column(Uuid, primary_key=True, default=uuid4)
    product_id = Column(Uuid, ForeignKey("products.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(Uuid, ForeignKey("users.id"), nullable=False)
    quantity = Column(Integer, nullable=False, default=1)
