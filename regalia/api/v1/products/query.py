"""
Product query building
One predicate per filter descriptor, shared by listing, counting and facets
"""

from datetime import datetime, timedelta, timezone
from typing import Iterable, List, Optional
from sqlalchemy import and_, or_, false, select, Table
from sqlalchemy.sql.elements import ColumnElement
import logging
import uuid

from regalia.core.config import settings
from regalia.models import (
    Product,
    ProductAttribute,
    AttributeKind,
    product_categories,
    product_rites,
    product_obediences,
    product_degree_orders,
)
from regalia.services.reference_catalog import ReferenceCatalog, ReferenceKind
from regalia.utils.validators import parse_uuid
from .filters import ProductFilter, DEFAULT_SORT

logger = logging.getLogger(__name__)

SEARCHABLE_ATTRIBUTES = (AttributeKind.TAG, AttributeKind.MATERIAL, AttributeKind.COLOR)

SORT_OPTIONS = {
    "-created_at": (Product.created_at.desc(),),
    "created_at": (Product.created_at.asc(),),
    "price": (Product.price.asc(),),
    "price_asc": (Product.price.asc(),),
    "-price": (Product.price.desc(),),
    "price_desc": (Product.price.desc(),),
    "name": (Product.name.asc(),),
    "-name": (Product.name.desc(),),
    "featured": (Product.featured.desc(), Product.created_at.desc()),
    "popular": (Product.review_count.desc(), Product.average_rating.desc().nulls_last()),
}

def sort_clauses(sort_by: Optional[str]) -> List[ColumnElement]:
    """ORDER BY clauses for a sort key, ending with the id so pages never overlap"""
    ordering = SORT_OPTIONS.get(sort_by) or SORT_OPTIONS[DEFAULT_SORT]
    return [*ordering, Product.id.asc()]

def linked_to(table: Table, column: str, ids: Iterable[uuid.UUID]) -> ColumnElement[bool]:
    """Product has at least one of ids in a relation set"""
    return Product.id.in_(
        select(table.c.product_id).where(table.c[column].in_(list(ids)))
    )

def has_attribute(kinds: Iterable[AttributeKind], condition: ColumnElement[bool]) -> ColumnElement[bool]:
    """Product has at least one attribute value of the given kinds matching condition"""
    return Product.id.in_(
        select(ProductAttribute.product_id).where(
            ProductAttribute.kind.in_([kind.value for kind in kinds]),
            condition,
        )
    )

class ProductQueryBuilder:
    """Builds the boolean predicate for a ProductFilter"""

    def __init__(
        self,
        catalog: ReferenceCatalog,
        now: Optional[datetime] = None,
        use_denormalized_loge_types: Optional[bool] = None
    ):
        self.catalog = catalog
        self.now = now or datetime.now(timezone.utc)
        if use_denormalized_loge_types is None:
            use_denormalized_loge_types = settings.USE_DENORMALIZED_LOGE_TYPES
        self.use_denormalized_loge_types = use_denormalized_loge_types

    async def build(self, filters: ProductFilter) -> ColumnElement[bool]:
        """
        Build the predicate for a filter descriptor

        Clauses are collected in a fixed order and joined once with AND.
        OR-groups (stock, search) stay separate conjuncts.

        Args:
            filters: Normalised filters

        Returns:
            SQL boolean expression over Product
        """
        clauses: List[ColumnElement[bool]] = [Product.is_active.is_(True)]

        if filters.category:
            clauses.append(await self._category_clause(filters.category))

        rite_id = parse_uuid(filters.rite)
        if rite_id:
            clauses.append(linked_to(product_rites, "rite_id", [rite_id]))

        obedience_id = parse_uuid(filters.obedience)
        if obedience_id:
            clauses.append(linked_to(product_obediences, "obedience_id", [obedience_id]))

        degree_clause = await self._degree_clause(filters)
        if degree_clause is not None:
            clauses.append(degree_clause)

        if filters.min_price is not None:
            clauses.append(Product.price >= filters.min_price)
        if filters.max_price is not None:
            clauses.append(Product.price <= filters.max_price)

        if filters.featured:
            clauses.append(Product.featured.is_(True))

        if filters.show_promotions:
            clauses.append(self._promotion_clause())

        if filters.show_new:
            since = self.now - timedelta(days=settings.NEW_PRODUCT_WINDOW_DAYS)
            clauses.append(Product.created_at >= since)

        if filters.in_stock_only:
            clauses.append(or_(Product.stock_quantity > 0, Product.allow_backorders.is_(True)))

        if filters.size:
            clauses.append(has_attribute([AttributeKind.SIZE], ProductAttribute.value == filters.size))
        if filters.color:
            clauses.append(has_attribute(
                [AttributeKind.COLOR],
                ProductAttribute.value.icontains(filters.color, autoescape=True),
            ))
        if filters.material:
            clauses.append(has_attribute(
                [AttributeKind.MATERIAL],
                ProductAttribute.value.icontains(filters.material, autoescape=True),
            ))

        if filters.search:
            clauses.append(self._search_clause(filters.search))

        return and_(*clauses)

    async def _category_clause(self, value: str) -> ColumnElement[bool]:
        category_id = parse_uuid(value)
        if category_id is None:
            category = await self.catalog.find_by_slug(ReferenceKind.CATEGORY, value)
            if category is None:
                logger.info(f"Unknown category slug {value!r}, no product can match")
                return false()
            category_id = category.id
        return linked_to(product_categories, "category_id", [category_id])

    async def _degree_clause(self, filters: ProductFilter) -> Optional[ColumnElement[bool]]:
        degree_id = parse_uuid(filters.degree)

        if not filters.loge_type:
            if degree_id is None:
                return None
            return linked_to(product_degree_orders, "degree_order_id", [degree_id])

        degrees = await self.catalog.find_active_by_loge_type(filters.loge_type)
        degree_ids = [degree.id for degree in degrees]
        if degree_id is not None:
            degree_ids = [i for i in degree_ids if i == degree_id]

        if not degree_ids:
            return false()

        if self.use_denormalized_loge_types and degree_id is None:
            return has_attribute([AttributeKind.LOGE_TYPE], ProductAttribute.value == filters.loge_type)

        return linked_to(product_degree_orders, "degree_order_id", degree_ids)

    def _promotion_clause(self) -> ColumnElement[bool]:
        return and_(
            Product.compare_at_price.is_not(None),
            Product.compare_at_price > Product.price,
            or_(Product.promo_start_date.is_(None), Product.promo_start_date <= self.now),
            or_(Product.promo_end_date.is_(None), Product.promo_end_date >= self.now),
        )

    def _search_clause(self, term: str) -> ColumnElement[bool]:
        return or_(
            Product.name.icontains(term, autoescape=True),
            Product.description.icontains(term, autoescape=True),
            Product.short_description.icontains(term, autoescape=True),
            has_attribute(SEARCHABLE_ATTRIBUTES, ProductAttribute.value.icontains(term, autoescape=True)),
        )
