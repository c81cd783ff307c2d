"""
Denormalized product fields
Keeps the loge_type attributes of products in line with their degree orders
"""

from typing import List
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
import logging
import uuid

from regalia.core.cache import cache
from regalia.core.exceptions import NotFoundException
from regalia.models import Product, ProductAttribute, AttributeKind, product_degree_orders

logger = logging.getLogger(__name__)

CATALOG_CACHE_PATTERN = "catalog:*"

async def _recompute_loge_types(db: AsyncSession, product_id: uuid.UUID) -> List[str]:
    product = await db.get(Product, product_id)
    if product is None:
        raise NotFoundException(f"Product {product_id} not found", error_code="PRODUCT_NOT_FOUND")

    await db.refresh(product, ["degree_orders", "attributes"])

    loge_types = sorted({
        degree.loge_type
        for degree in product.degree_orders
        if degree.is_active
    })

    current = {
        attribute.value: attribute
        for attribute in product.attributes
        if attribute.kind == AttributeKind.LOGE_TYPE.value
    }

    for value, attribute in current.items():
        if value not in loge_types:
            product.attributes.remove(attribute)

    for value in loge_types:
        if value not in current:
            product.attributes.append(
                ProductAttribute(kind=AttributeKind.LOGE_TYPE.value, value=value)
            )

    return loge_types

async def sync_product_denormalized_fields(db: AsyncSession, product_id: uuid.UUID) -> List[str]:
    """
    Recompute the loge types stored on a product

    Run after every product write. Only active degree orders count, so the
    stored values match what the degree-order join returns. The caller owns
    the transaction.

    Args:
        db: Database session
        product_id: Product to recompute

    Returns:
        Sorted loge types now stored on the product

    Raises:
        NotFoundException: unknown product
    """
    await db.flush()
    loge_types = await _recompute_loge_types(db, product_id)
    await db.flush()

    await cache.delete_pattern(CATALOG_CACHE_PATTERN)
    logger.info(f"Product {product_id} loge types synced: {loge_types}")
    return loge_types

async def resync_products_for_degree(db: AsyncSession, degree_id: uuid.UUID) -> int:
    """
    Recompute every product linked to a degree order

    Run after a degree order's loge_type or is_active changes.

    Returns:
        Number of products recomputed
    """
    await db.flush()
    result = await db.execute(
        select(product_degree_orders.c.product_id)
        .where(product_degree_orders.c.degree_order_id == degree_id)
    )
    product_ids = list(result.scalars().all())

    for product_id in product_ids:
        await _recompute_loge_types(db, product_id)
    await db.flush()

    await cache.delete_pattern(CATALOG_CACHE_PATTERN)
    logger.info(f"Degree order {degree_id}: resynced {len(product_ids)} products")
    return len(product_ids)

async def resync_all_products(db: AsyncSession) -> int:
    """Recompute every product; backfill after enabling USE_DENORMALIZED_LOGE_TYPES"""
    await db.flush()
    result = await db.execute(select(Product.id).order_by(Product.id))
    product_ids = list(result.scalars().all())

    for product_id in product_ids:
        await _recompute_loge_types(db, product_id)
    await db.flush()

    await cache.delete_pattern(CATALOG_CACHE_PATTERN)
    logger.info(f"Resynced loge types of {len(product_ids)} products")
    return len(product_ids)
