from sqlalchemy import Column, DateTime
from sqlalchemy.sql import func

from ..db.base import Base


class TimeStampMixin:
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)


__all__ = ["Base", "TimeStampMixin"]
