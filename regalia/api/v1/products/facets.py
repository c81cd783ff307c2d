"""
Facet aggregation
Counts per attribute value and per linked entity for the products matching a predicate
"""

from typing import List, Type
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import and_, select, func, Table
from sqlalchemy.sql.elements import ColumnElement

from regalia.core.config import settings
from regalia.models import (
    Product,
    ProductAttribute,
    AttributeKind,
    Category,
    Rite,
    Obedience,
    DegreeOrder,
    product_categories,
    product_rites,
    product_obediences,
    product_degree_orders,
)
from .schemas import FacetBundle, FacetEntity, FacetValue, PriceRange

def default_price_range() -> PriceRange:
    return PriceRange(min=settings.DEFAULT_PRICE_RANGE_MIN, max=settings.DEFAULT_PRICE_RANGE_MAX)

class FacetAggregator:
    """Computes a FacetBundle from the listing predicate"""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def aggregate(self, predicate: ColumnElement[bool]) -> FacetBundle:
        """
        Aggregate facets over the products matching predicate

        The full predicate is applied to every facet, including the
        dimension the facet describes.

        Args:
            predicate: Predicate built by ProductQueryBuilder

        Returns:
            Facet bundle; empty lists and the default price range when
            nothing matches
        """
        matching = select(Product.id).where(predicate)

        return FacetBundle(
            price_range=await self.price_range(predicate),
            sizes=await self.attribute_counts(matching, AttributeKind.SIZE),
            colors=await self.attribute_counts(matching, AttributeKind.COLOR),
            materials=await self.attribute_counts(matching, AttributeKind.MATERIAL),
            categories=await self.entity_counts(matching, product_categories, "category_id", Category),
            rites=await self.entity_counts(matching, product_rites, "rite_id", Rite),
            obediences=await self.entity_counts(matching, product_obediences, "obedience_id", Obedience),
            degrees=await self.entity_counts(matching, product_degree_orders, "degree_order_id", DegreeOrder),
        )

    async def price_range(self, predicate: ColumnElement[bool]) -> PriceRange:
        """Min and max price of matching products"""
        result = await self.db.execute(
            select(func.min(Product.price), func.max(Product.price)).where(predicate)
        )
        low, high = result.one()
        if low is None or high is None:
            return default_price_range()
        return PriceRange(min=float(low), max=float(high))

    async def attribute_counts(self, matching, kind: AttributeKind) -> List[FacetValue]:
        """Distinct values of one attribute set with their product counts"""
        count = func.count(ProductAttribute.product_id)
        result = await self.db.execute(
            select(ProductAttribute.value, count)
            .where(
                ProductAttribute.kind == kind.value,
                ProductAttribute.product_id.in_(matching),
            )
            .group_by(ProductAttribute.value)
            .order_by(ProductAttribute.value)
        )
        return [FacetValue(value=value, count=total) for value, total in result.all()]

    async def entity_counts(
        self,
        matching,
        table: Table,
        column: str,
        model: Type
    ) -> List[FacetEntity]:
        """
        Count products per linked entity

        A product linked to several entities counts once for each of them.
        Inactive entities are left out, as in the sidebar options.
        """
        count = func.count(table.c.product_id)
        result = await self.db.execute(
            select(model.id, model.name, count)
            .select_from(table)
            .join(model, and_(model.id == table.c[column], model.is_active.is_(True)))
            .where(table.c.product_id.in_(matching))
            .group_by(model.id, model.name)
            .order_by(count.desc(), model.name, model.id)
        )
        return [
            FacetEntity(id=entity_id, name=name, count=total)
            for entity_id, name, total in result.all()
        ]
