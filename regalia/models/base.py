"""Base models and mixins for database models"""

from sqlalchemy import Column, DateTime, Boolean, Integer, Uuid
from sqlalchemy.orm import DeclarativeBase, declared_attr
from sqlalchemy.sql import func
import uuid

# Create declarative base
class Base(DeclarativeBase):
    pass

class TimestampedModel:
    """Mixin for adding created_at and updated_at timestamps"""

    @declared_attr
    def created_at(cls):
        return Column(
            DateTime(timezone=True),
            nullable=False,
            server_default=func.now(),
            index=True
        )

    @declared_attr
    def updated_at(cls):
        return Column(
            DateTime(timezone=True),
            nullable=False,
            server_default=func.now(),
            onupdate=func.now()
        )

class UUIDModel:
    """Mixin for adding UUID primary key"""

    @declared_attr
    def id(cls):
        return Column(
            Uuid(as_uuid=True),
            primary_key=True,
            default=uuid.uuid4,
            nullable=False
        )

class ReferenceModel(UUIDModel, TimestampedModel):
    """Mixin for read-only reference entities shown in the catalogue sidebar"""

    @declared_attr
    def is_active(cls):
        return Column(Boolean, default=True, nullable=False, index=True)

    @declared_attr
    def display_order(cls):
        return Column(Integer, default=0, nullable=False)

    def __repr__(self):
        return f"<{self.__class__.__name__}(id={self.id!r}, name={getattr(self, 'name', None)!r})>"

__all__ = [
    'Base',
    'TimestampedModel',
    'UUIDModel',
    'ReferenceModel',
]
