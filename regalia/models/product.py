"""Product model and its multi-valued relation and attribute sets"""

from sqlalchemy import (
    Column, String, Text, Numeric, Integer, Boolean, JSON, ForeignKey, Index,
    CheckConstraint, DateTime, Table, Uuid,
)
from sqlalchemy.orm import relationship
from typing import List
import enum

from .base import Base, TimestampedModel, UUIDModel

def _association_table(name: str, column: str, target: str) -> Table:
    return Table(
        name,
        Base.metadata,
        Column("product_id", Uuid(as_uuid=True), ForeignKey("products.id", ondelete="CASCADE"), primary_key=True),
        Column(column, Uuid(as_uuid=True), ForeignKey(f"{target}.id", ondelete="CASCADE"), primary_key=True, index=True),
    )

product_categories = _association_table("product_categories", "category_id", "categories")
product_rites = _association_table("product_rites", "rite_id", "rites")
product_obediences = _association_table("product_obediences", "obedience_id", "obediences")
product_degree_orders = _association_table("product_degree_orders", "degree_order_id", "degree_orders")

class AttributeKind(str, enum.Enum):
    """Kinds of free-form string sets stored on a product"""
    SIZE = "size"
    COLOR = "color"
    MATERIAL = "material"
    TAG = "tag"
    # Denormalized from linked degree orders, see services.product_sync
    LOGE_TYPE = "loge_type"

class ProductAttribute(Base):
    """One value of one attribute set of a product"""

    __tablename__ = "product_attributes"

    product_id = Column(Uuid(as_uuid=True), ForeignKey("products.id", ondelete="CASCADE"), primary_key=True)
    kind = Column(String(20), primary_key=True)
    value = Column(String(255), primary_key=True)

    product = relationship("Product", back_populates="attributes")

    __table_args__ = (
        Index("idx_product_attributes_kind_value", "kind", "value"),
    )

    def __repr__(self):
        return f"<ProductAttribute({self.kind}={self.value!r})>"

class Product(Base, TimestampedModel, UUIDModel):
    """Catalogue product"""

    __tablename__ = "products"

    # Basic info
    name = Column(String(255), nullable=False, index=True)
    slug = Column(String(255), unique=True, nullable=False, index=True)
    description = Column(Text, nullable=True)
    short_description = Column(String(500), nullable=True)

    # Pricing
    price = Column(Numeric(10, 2), nullable=False, index=True)
    compare_at_price = Column(Numeric(10, 2), nullable=True)
    promo_start_date = Column(DateTime(timezone=True), nullable=True)
    promo_end_date = Column(DateTime(timezone=True), nullable=True)

    # Inventory
    stock_quantity = Column(Integer, default=0, nullable=False)
    allow_backorders = Column(Boolean, default=False, nullable=False)

    # Status
    is_active = Column(Boolean, default=True, nullable=False, index=True)
    featured = Column(Boolean, default=False, nullable=False, index=True)

    # Media
    images = Column(JSON, default=list, nullable=False)

    # Reviews
    average_rating = Column(Numeric(3, 2), nullable=True)
    review_count = Column(Integer, default=0, nullable=False)

    # Internal only, never part of the public projection
    sku = Column(String(64), nullable=True, index=True)
    cost_price = Column(Numeric(10, 2), nullable=True)
    legacy_id = Column(String(64), nullable=True, index=True)
    admin_notes = Column(Text, nullable=True)

    # Relationships
    categories = relationship("Category", secondary=product_categories, lazy="selectin")
    rites = relationship("Rite", secondary=product_rites, lazy="selectin")
    obediences = relationship("Obedience", secondary=product_obediences, lazy="selectin")
    degree_orders = relationship("DegreeOrder", secondary=product_degree_orders, lazy="selectin")
    attributes = relationship(
        "ProductAttribute",
        back_populates="product",
        cascade="all, delete-orphan",
        lazy="selectin",
    )

    # Constraints
    __table_args__ = (
        CheckConstraint("price >= 0", name="check_non_negative_price"),
        CheckConstraint("stock_quantity >= 0", name="check_non_negative_stock"),
        Index("idx_products_active_created", "is_active", "created_at"),
        Index("idx_products_active_price", "is_active", "price"),
        Index("idx_products_active_featured", "is_active", "featured", "created_at"),
        Index("idx_products_active_stock", "is_active", "stock_quantity", "allow_backorders"),
    )

    def attribute_values(self, kind: AttributeKind) -> List[str]:
        """Sorted values of one attribute set"""
        return sorted(a.value for a in self.attributes if a.kind == kind.value)

    @property
    def sizes(self) -> List[str]:
        return self.attribute_values(AttributeKind.SIZE)

    @property
    def colors(self) -> List[str]:
        return self.attribute_values(AttributeKind.COLOR)

    @property
    def materials(self) -> List[str]:
        return self.attribute_values(AttributeKind.MATERIAL)

    @property
    def tags(self) -> List[str]:
        return self.attribute_values(AttributeKind.TAG)

    @property
    def loge_types(self) -> List[str]:
        return self.attribute_values(AttributeKind.LOGE_TYPE)

    def __repr__(self):
        return f"<Product(id={self.id!r}, slug={self.slug!r})>"
