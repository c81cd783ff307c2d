"""
Category model for product categorization
Supports hierarchical categories
"""

from sqlalchemy import Column, String, Text, ForeignKey, Index, Uuid
from sqlalchemy.orm import relationship

from .base import Base, ReferenceModel

class Category(Base, ReferenceModel):
    """Product category with parent-child hierarchy"""

    __tablename__ = "categories"

    name = Column(String(100), nullable=False)
    slug = Column(String(100), unique=True, nullable=False, index=True)
    description = Column(Text, nullable=True)
    image_url = Column(String(500), nullable=True)
    parent_id = Column(Uuid(as_uuid=True), ForeignKey("categories.id"), nullable=True)

    # Internal
    legacy_id = Column(String(64), nullable=True, index=True)

    # Relationships
    parent = relationship("Category", remote_side="Category.id", backref="children")

    __table_args__ = (
        Index("idx_categories_active_order", "is_active", "display_order"),
    )
