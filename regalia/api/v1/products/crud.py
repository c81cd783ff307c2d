"""
Product CRUD operations
Read-side database operations for the catalogue
"""

from typing import List, Sequence
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func
from sqlalchemy.orm import raiseload, selectinload
from sqlalchemy.sql.elements import ColumnElement

from regalia.core.monitoring import track_query
from regalia.models import Product
from .facets import FacetAggregator
from .schemas import FacetBundle

class ProductCRUD:
    """Product read operations driven by a prebuilt predicate"""

    @staticmethod
    async def count(
        db: AsyncSession,
        predicate: ColumnElement[bool]
    ) -> int:
        """Count all products matching predicate"""
        with track_query("count"):
            result = await db.execute(
                select(func.count(Product.id)).where(predicate)
            )
            return result.scalar_one()

    @staticmethod
    async def find(
        db: AsyncSession,
        predicate: ColumnElement[bool],
        order_by: Sequence[ColumnElement],
        skip: int = 0,
        limit: int = 20
    ) -> List[Product]:
        """Get one page of matching products with their relations loaded"""
        query = (
            select(Product)
            .where(predicate)
            .options(
                selectinload(Product.categories),
                selectinload(Product.rites),
                selectinload(Product.obediences),
                selectinload(Product.degree_orders),
                # Listing rows never project the attribute sets
                raiseload(Product.attributes),
            )
            .order_by(*order_by)
            .offset(skip)
            .limit(limit)
        )

        with track_query("find"):
            result = await db.execute(query)
            return list(result.scalars().all())

    @staticmethod
    async def aggregate_facets(
        db: AsyncSession,
        predicate: ColumnElement[bool]
    ) -> FacetBundle:
        """Facet counts for the products matching predicate"""
        with track_query("facets"):
            return await FacetAggregator(db).aggregate(predicate)
