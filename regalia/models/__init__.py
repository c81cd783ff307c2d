"""Database models"""

from .base import Base
from .category import Category
from .rite import Rite
from .obedience import Obedience
from .degree_order import DegreeOrder, LogeType
from .product import (
    Product,
    ProductAttribute,
    AttributeKind,
    product_categories,
    product_rites,
    product_obediences,
    product_degree_orders,
)

__all__ = [
    "Base",
    "Category",
    "Rite",
    "Obedience",
    "DegreeOrder",
    "LogeType",
    "Product",
    "ProductAttribute",
    "AttributeKind",
    "product_categories",
    "product_rites",
    "product_obediences",
    "product_degree_orders",
]
