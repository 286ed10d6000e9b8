from uuid import uuid4

from sqlalchemy import Boolean, Column, String, Uuid

from .base import TimeStampMixin, Base


class User(Base, TimeStampMixin):
    __tablename__ = "users"

    id = Column(Uuid, primary_key=True, default=uuid4)
    full_name = Column(String, nullable=True)
    phone_number = Column(String, unique=True, index=True, nullable=True)
    is_admin = Column(Boolean, default=False, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
