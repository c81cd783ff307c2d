"""Tests for the denormalized loge type maintenance."""

import uuid

import pytest

from regalia.core.cache import cache
from regalia.core.exceptions import NotFoundException
from regalia.models import LogeType
from regalia.services.product_sync import (
    resync_all_products,
    resync_products_for_degree,
    sync_product_denormalized_fields,
)

from .factories import create_degree, create_product


@pytest.mark.asyncio
async def test_sync_stores_loge_types_of_active_degrees(db):
    apprenti = await create_degree(db, "Apprenti", 1, LogeType.SYMBOLIQUE)
    maitre = await create_degree(db, "Maître", 3, LogeType.SYMBOLIQUE)
    kadosh = await create_degree(db, "Chevalier Kadosh", 30, LogeType.HAUTS_GRADES, is_active=False)
    product = await create_product(db, "Sautoir", 90, degrees=[apprenti, maitre, kadosh])

    loge_types = await sync_product_denormalized_fields(db, product.id)

    assert loge_types == ["Loge Symbolique"]
    assert product.loge_types == ["Loge Symbolique"]


@pytest.mark.asyncio
async def test_sync_is_stable_when_run_twice(db):
    maitre = await create_degree(db, "Maître", 3, LogeType.SYMBOLIQUE)
    product = await create_product(db, "Cordon", 40, degrees=[maitre], tags=["soie"])

    await sync_product_denormalized_fields(db, product.id)
    await sync_product_denormalized_fields(db, product.id)
    await db.commit()

    assert product.loge_types == ["Loge Symbolique"]
    assert product.tags == ["soie"]


@pytest.mark.asyncio
async def test_resync_follows_degree_changes(db):
    degree = await create_degree(db, "Maître Secret", 4, LogeType.SYMBOLIQUE)
    first = await create_product(db, "Bijou", 30, degrees=[degree])
    second = await create_product(db, "Tablier", 120, degrees=[degree])
    await sync_product_denormalized_fields(db, first.id)
    await sync_product_denormalized_fields(db, second.id)

    degree.loge_type = LogeType.HAUTS_GRADES.value
    updated = await resync_products_for_degree(db, degree.id)

    assert updated == 2
    assert first.loge_types == ["Loge Hauts Grades"]
    assert second.loge_types == ["Loge Hauts Grades"]

    degree.is_active = False
    await resync_products_for_degree(db, degree.id)

    assert first.loge_types == []


@pytest.mark.asyncio
async def test_sync_invalidates_catalogue_cache(db):
    product = await create_product(db, "Gants", 25)
    await cache.set("catalog:products:abc", {"products": []})
    await cache.set("other:key", 1)

    await sync_product_denormalized_fields(db, product.id)

    assert await cache.get("catalog:products:abc") is None
    assert await cache.get("other:key") == 1
    await cache.delete("other:key")


@pytest.mark.asyncio
async def test_sync_unknown_product(db):
    with pytest.raises(NotFoundException):
        await sync_product_denormalized_fields(db, uuid.uuid4())


@pytest.mark.asyncio
async def test_resync_all_backfills_every_product(db):
    maitre = await create_degree(db, "Maître", 3, LogeType.SYMBOLIQUE)
    kadosh = await create_degree(db, "Chevalier Kadosh", 30, LogeType.HAUTS_GRADES)
    cordon = await create_product(db, "Cordon", 40, degrees=[maitre, kadosh])
    gants = await create_product(db, "Gants", 15)

    updated = await resync_all_products(db)

    assert updated == 2
    assert cordon.loge_types == ["Loge Hauts Grades", "Loge Symbolique"]
    assert gants.loge_types == []
