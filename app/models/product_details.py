from uuid import uuid4

from sqlalchemy import Column, String, ForeignKey, Uuid

from ..db.base import Base
from .base import TimeStampMixin


class MobileDetails(Base, TimeStampMixin):
    __tablename__ = "product_mobile_details"

    id = Column(Uuid, primary_key=True, default=uuid4)
    product_id = Column(Uuid, ForeignKey("products.id", ondelete="CASCADE"), nullable=False, unique=True)
    brand = Column(String, nullable=False)
    compatible_model = Column(String, nullable=True)
    type = Column(String, nullable=True)
    color = Column(String, nullable=True)


class ApparelDetails(Base, TimeStampMixin):
    __tablename__ = "product_apparel_details"

    id = Column(Uuid, primary_key=True, default=uuid4)
    product_id = Column(Uuid, ForeignKey("products.id", ondelete="CASCADE"), nullable=False, unique=True)
    brand = Column(String, nullable=False)
    gender = Column(String, nullable=True)
    material = Column(String, nullable=True)
    fit_type = Column(String, nullable=True)  # comma separated selections
    pattern = Column(String, nullable=True)
    color = Column(String, nullable=True)
    size = Column(String, nullable=True)  # comma separated selections
    sku = Column(String, nullable=True)


class AccessoriesDetails(Base, TimeStampMixin):
    __tablename__ = "product_accessories_details"

    id = Column(Uuid, primary_key=True, default=uuid4)
    product_id = Column(Uuid, ForeignKey("products.id", ondelete="CASCADE"), nullable=False, unique=True)
    accessory_type = Column(String, nullable=False, default="")
    compatible_with = Column(String, nullable=False, default="")
    material = Column(String, nullable=False, default="")
    color = Column(String, nullable=False, default="")
