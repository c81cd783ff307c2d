"""
Product catalogue service layer
Orchestrates filter normalisation output, query building, paging and facets
"""

from typing import Dict, List, Optional
from datetime import datetime
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy import select, func, Table
import logging
import uuid

from regalia.core.cache import cache
from regalia.core.config import settings
from regalia.core.exceptions import CatalogUnavailableException
from regalia.core.monitoring import catalog_cache_hits
from regalia.models import (
    Product,
    ProductAttribute,
    AttributeKind,
    LogeType,
    product_categories,
    product_rites,
    product_obediences,
    product_degree_orders,
)
from regalia.services.reference_catalog import ReferenceCatalog, ReferenceKind
from regalia.utils.pagination import Pagination, PaginationParams
from regalia.utils.validators import parse_uuid
from .crud import ProductCRUD
from .facets import FacetAggregator
from .filters import ProductFilter
from .query import ProductQueryBuilder, sort_clauses
from .schemas import (
    AppliedFilters,
    CatalogFilterOptions,
    DegreeOption,
    FacetBundle,
    FilterOption,
    ProductListResponse,
    ProjectedProduct,
    SelectedEntity,
)

logger = logging.getLogger(__name__)

class ProductCatalogService:
    """Catalogue listing service"""

    def __init__(self, db: AsyncSession, now: Optional[datetime] = None):
        self.db = db
        self.catalog = ReferenceCatalog(db)
        self.builder = ProductQueryBuilder(self.catalog, now=now)

    async def list_products(
        self,
        filters: ProductFilter,
        include_facets: bool = False
    ) -> ProductListResponse:
        """
        List one page of products

        Count, page window and facets run one after the other on the
        request session, all from the same predicate.

        Args:
            filters: Normalised filters
            include_facets: Also aggregate sidebar facets

        Returns:
            Listing page

        Raises:
            CatalogUnavailableException: the product store could not be read
        """
        cache_key = filters.cache_key()
        if include_facets:
            cache_key = f"{cache_key}:facets"

        if settings.CATALOG_CACHE_ENABLED:
            cached = await cache.get(cache_key)
            if cached is not None:
                catalog_cache_hits.inc()
                return ProductListResponse.model_validate(cached)

        window = PaginationParams(page=filters.page, limit=filters.limit)

        try:
            predicate = await self.builder.build(filters)
            total = await ProductCRUD.count(self.db, predicate)
            products = await ProductCRUD.find(
                self.db,
                predicate,
                sort_clauses(filters.sort_by),
                skip=window.offset,
                limit=window.limit,
            )
            facets = None
            if include_facets:
                facets = await ProductCRUD.aggregate_facets(self.db, predicate)
            applied = await self.describe_filters(filters)
        except SQLAlchemyError as e:
            logger.error(f"Product listing failed: {e}")
            raise CatalogUnavailableException()

        response = ProductListResponse(
            products=[ProjectedProduct.from_product(product) for product in products],
            pagination=Pagination.build(window, total),
            filters=applied,
            facets=facets,
        )

        if settings.CATALOG_CACHE_ENABLED:
            await cache.set(
                cache_key,
                response.model_dump(mode="json", by_alias=True),
                expire=settings.CATALOG_CACHE_TTL,
            )

        return response

    async def get_facets(self, filters: ProductFilter) -> FacetBundle:
        """Facet counts for a filter set"""
        try:
            predicate = await self.builder.build(filters)
            return await ProductCRUD.aggregate_facets(self.db, predicate)
        except SQLAlchemyError as e:
            logger.error(f"Facet aggregation failed: {e}")
            raise CatalogUnavailableException()

    async def describe_filters(self, filters: ProductFilter) -> AppliedFilters:
        """Echo the filters with names of the selected reference entities"""
        category = None
        if filters.category:
            category_id = parse_uuid(filters.category)
            if category_id:
                category = await self.catalog.find_active_by_id(ReferenceKind.CATEGORY, category_id)
            else:
                category = await self.catalog.find_by_slug(ReferenceKind.CATEGORY, filters.category)

        return AppliedFilters(
            category=filters.category,
            rite=filters.rite,
            obedience=filters.obedience,
            degree=filters.degree,
            loge_type=filters.loge_type,
            search=filters.search,
            min_price=filters.min_price,
            max_price=filters.max_price,
            featured=filters.featured,
            show_promotions=filters.show_promotions,
            show_new=filters.show_new,
            in_stock_only=filters.in_stock_only,
            size=filters.size,
            color=filters.color,
            material=filters.material,
            sort_by=filters.sort_by,
            selected_category=self._selected(category),
            selected_rite=await self._selected_by_id(ReferenceKind.RITE, filters.rite),
            selected_obedience=await self._selected_by_id(ReferenceKind.OBEDIENCE, filters.obedience),
            selected_degree=await self._selected_by_id(ReferenceKind.DEGREE, filters.degree),
        )

    async def get_filter_options(self) -> CatalogFilterOptions:
        """
        Sidebar filter options

        Active reference entities with the number of active products linked
        to each, the attribute values in use and the overall price range.
        """
        try:
            categories = await self.catalog.list_active(ReferenceKind.CATEGORY)
            rites = await self.catalog.list_active(ReferenceKind.RITE)
            obediences = await self.catalog.list_active(ReferenceKind.OBEDIENCE)
            degrees = await self.catalog.list_active(ReferenceKind.DEGREE)

            category_counts = await self._active_product_counts(product_categories, "category_id")
            rite_counts = await self._active_product_counts(product_rites, "rite_id")
            obedience_counts = await self._active_product_counts(product_obediences, "obedience_id")
            degree_counts = await self._active_product_counts(product_degree_orders, "degree_order_id")

            sizes = await self._attribute_values(AttributeKind.SIZE)
            colors = await self._attribute_values(AttributeKind.COLOR)
            materials = await self._attribute_values(AttributeKind.MATERIAL)

            price_range = await FacetAggregator(self.db).price_range(Product.is_active.is_(True))
        except SQLAlchemyError as e:
            logger.error(f"Loading catalogue filter options failed: {e}")
            raise CatalogUnavailableException()

        return CatalogFilterOptions(
            categories=[
                FilterOption(id=c.id, name=c.name, slug=c.slug, count=category_counts.get(c.id, 0))
                for c in categories
            ],
            rites=[
                FilterOption(id=r.id, name=r.name, code=r.code, count=rite_counts.get(r.id, 0))
                for r in rites
            ],
            obediences=[
                FilterOption(id=o.id, name=o.name, code=o.code, count=obedience_counts.get(o.id, 0))
                for o in obediences
            ],
            degrees=[
                DegreeOption(
                    id=d.id,
                    name=d.name,
                    level=d.level,
                    loge_type=d.loge_type,
                    count=degree_counts.get(d.id, 0),
                )
                for d in degrees
            ],
            loge_types=[loge_type.value for loge_type in LogeType],
            sizes=sizes,
            colors=colors,
            materials=materials,
            price_range=price_range,
        )

    async def _selected_by_id(self, kind: ReferenceKind, value: Optional[str]) -> Optional[SelectedEntity]:
        entity_id = parse_uuid(value)
        if entity_id is None:
            return None
        return self._selected(await self.catalog.find_active_by_id(kind, entity_id))

    @staticmethod
    def _selected(entity) -> Optional[SelectedEntity]:
        if entity is None:
            return None
        return SelectedEntity(id=entity.id, name=entity.name)

    async def _active_product_counts(self, table: Table, column: str) -> Dict[uuid.UUID, int]:
        result = await self.db.execute(
            select(table.c[column], func.count(table.c.product_id))
            .join(Product, Product.id == table.c.product_id)
            .where(Product.is_active.is_(True))
            .group_by(table.c[column])
        )
        return {entity_id: total for entity_id, total in result.all()}

    async def _attribute_values(self, kind: AttributeKind) -> List[str]:
        result = await self.db.execute(
            select(ProductAttribute.value)
            .join(Product, Product.id == ProductAttribute.product_id)
            .where(ProductAttribute.kind == kind.value, Product.is_active.is_(True))
            .distinct()
            .order_by(ProductAttribute.value)
        )
        return list(result.scalars().all())
