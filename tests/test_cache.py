"""Tests for the cache manager and the read-through listing cache."""

import pytest
import pytest_asyncio

from regalia.api.v1.products.filters import normalize_filters
from regalia.api.v1.products.services import ProductCatalogService
from regalia.core.cache import RedisCache, cache
from regalia.core.config import settings

from .factories import NOW, create_product


@pytest.fixture()
def cache_enabled(monkeypatch):
    monkeypatch.setattr(settings, "CATALOG_CACHE_ENABLED", True)


@pytest_asyncio.fixture()
async def memory_cache():
    manager = RedisCache()
    yield manager
    await manager.disconnect()


@pytest.mark.asyncio
async def test_redis_round_trip(redis_client):
    await cache.set("catalog:products:1", {"total": 3}, expire=60)

    assert await cache.get("catalog:products:1") == {"total": 3}
    assert 0 < await redis_client.ttl("catalog:products:1") <= 60
    assert await cache.ping() is True


@pytest.mark.asyncio
async def test_redis_delete_pattern(redis_client):
    await cache.set("catalog:products:1", 1)
    await cache.set("catalog:products:2:facets", 2)
    await cache.set("session:1", 3)

    deleted = await cache.delete_pattern("catalog:*")

    assert deleted == 2
    assert await cache.get("session:1") == 3
    assert await cache.get("catalog:products:1") is None


@pytest.mark.asyncio
async def test_in_memory_fallback(memory_cache):
    await memory_cache.set("catalog:products:1", {"a": 1})
    await memory_cache.set("catalog:products:2", {"b": 2})

    assert await memory_cache.get("catalog:products:1") == {"a": 1}
    assert await memory_cache.delete("catalog:products:1") is True
    assert await memory_cache.delete_pattern("catalog:*") == 1
    assert await memory_cache.get("catalog:products:2") is None


@pytest.mark.asyncio
async def test_corrupt_entry_is_a_miss(redis_client):
    await redis_client.set("catalog:products:1", "{not json")

    assert await cache.get("catalog:products:1") is None


@pytest.mark.asyncio
async def test_listing_survives_a_corrupt_entry(db, redis_client, cache_enabled):
    await create_product(db, "Tablier", 100)
    filters = normalize_filters({})
    await redis_client.set(filters.cache_key(), "{not json")

    listing = await ProductCatalogService(db, now=NOW).list_products(filters)

    assert listing.pagination.total == 1
    assert await cache.get(filters.cache_key()) is not None


@pytest.mark.asyncio
async def test_listing_is_served_from_cache(db, redis_client, cache_enabled):
    product = await create_product(db, "Tablier", 100)
    filters = normalize_filters({"search": "tablier"})
    service = ProductCatalogService(db, now=NOW)

    first = await service.list_products(filters)
    assert await redis_client.exists(filters.cache_key())

    product.is_active = False
    await db.flush()

    second = await service.list_products(filters)
    assert second == first
    assert second.pagination.total == 1


@pytest.mark.asyncio
async def test_facets_are_cached_under_their_own_key(db, redis_client, cache_enabled):
    await create_product(db, "Tablier", 100, sizes=["M"])
    filters = normalize_filters({})
    service = ProductCatalogService(db, now=NOW)

    plain = await service.list_products(filters)
    with_facets = await service.list_products(filters, include_facets=True)

    assert plain.facets is None
    assert with_facets.facets.sizes[0].value == "M"
    assert await redis_client.exists(f"{filters.cache_key()}:facets")


@pytest.mark.asyncio
async def test_cache_is_bypassed_when_disabled(db, redis_client):
    await create_product(db, "Tablier", 100)
    filters = normalize_filters({})

    await ProductCatalogService(db, now=NOW).list_products(filters)

    assert not await redis_client.exists(filters.cache_key())
