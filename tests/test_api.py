"""Tests for the HTTP surface of the catalogue."""

import pytest
import pytest_asyncio
from sqlalchemy.exc import OperationalError

from regalia.api.v1.products.crud import ProductCRUD

from .catalogue import seed_catalogue


@pytest_asyncio.fixture()
async def catalogue(db):
    return await seed_catalogue(db)


@pytest.mark.asyncio
@pytest.mark.integration
async def test_list_products_shape(client, catalogue):
    response = await client.get("/api/v1/products", params={"limit": "2", "sortBy": "price"})

    assert response.status_code == 200
    data = response.json()
    assert set(data) == {"products", "pagination", "filters"}
    assert data["pagination"] == {
        "page": 1,
        "limit": 2,
        "total": 5,
        "totalPages": 3,
        "hasNext": True,
        "hasPrev": False,
    }
    assert [p["name"] for p in data["products"]] == ["Gants blancs", "Tablier Apprenti"]
    assert data["filters"]["sortBy"] == "price"
    product = data["products"][0]
    assert "cost_price" not in product
    assert "is_on_sale" in product


@pytest.mark.asyncio
@pytest.mark.integration
async def test_list_products_trailing_slash(client, catalogue):
    response = await client.get("/api/v1/products/")

    assert response.status_code == 200
    assert response.json()["pagination"]["total"] == 5


@pytest.mark.asyncio
@pytest.mark.integration
@pytest.mark.parametrize("flag", ["withAggregations", "facets"])
async def test_list_products_with_facets(client, catalogue, flag):
    response = await client.get("/api/v1/products", params={flag: "true", "category": "tabliers"})

    assert response.status_code == 200
    facets = response.json()["facets"]
    assert facets["priceRange"] == {"min": 60.0, "max": 120.0}
    assert facets["categories"][0]["name"] == "Tabliers"
    assert facets["categories"][0]["count"] == 2


@pytest.mark.asyncio
@pytest.mark.integration
async def test_malformed_parameters_are_tolerated(client, catalogue):
    response = await client.get(
        "/api/v1/products",
        params={
            "page": "abc",
            "limit": "-3",
            "minPrice": "cheap",
            "rite": "not-a-uuid",
            "sortBy": "random",
            "featured": "yes",
        },
    )

    assert response.status_code == 200
    data = response.json()
    assert data["pagination"]["page"] == 1
    assert data["pagination"]["limit"] == 20
    assert data["pagination"]["total"] == 5
    assert data["filters"]["sortBy"] == "-created_at"


@pytest.mark.asyncio
@pytest.mark.integration
async def test_impossible_filters_return_empty_page(client, catalogue):
    for params in (
        {"category": "tabliers-inexistants"},
        {"logeType": "Loge Hauts Grades"},
        {"minPrice": "200", "maxPrice": "100"},
    ):
        response = await client.get("/api/v1/products", params=params)
        assert response.status_code == 200
        assert response.json()["pagination"]["total"] == 0


@pytest.mark.asyncio
@pytest.mark.integration
async def test_huge_page_returns_empty_page(client, catalogue):
    response = await client.get(
        "/api/v1/products",
        params={"page": "99999999999999999999", "limit": "100"},
    )

    assert response.status_code == 200
    data = response.json()
    assert data["products"] == []
    assert data["pagination"]["total"] == 5
    assert data["pagination"]["hasNext"] is False


@pytest.mark.asyncio
@pytest.mark.integration
async def test_facets_endpoint(client, catalogue):
    response = await client.get("/api/v1/products/facets", params={"minPrice": "5000"})

    assert response.status_code == 200
    data = response.json()
    assert data["priceRange"] == {"min": 0.0, "max": 1000.0}
    assert data["sizes"] == []
    assert data["degrees"] == []


@pytest.mark.asyncio
@pytest.mark.integration
async def test_catalog_filters_endpoint(client, catalogue):
    response = await client.get("/api/v1/catalog/filters")

    assert response.status_code == 200
    data = response.json()
    assert [c["slug"] for c in data["categories"]] == ["tabliers", "cordons"]
    assert data["logeTypes"] == ["Loge Symbolique", "Loge Hauts Grades"]
    assert data["degrees"][0]["logeType"] == "Loge Symbolique"


@pytest.mark.asyncio
@pytest.mark.integration
async def test_store_failure_maps_to_503(client, catalogue, monkeypatch):
    async def broken_count(db, predicate):
        raise OperationalError("SELECT count(*)", {}, Exception("database is locked"))

    monkeypatch.setattr(ProductCRUD, "count", staticmethod(broken_count))

    response = await client.get("/api/v1/products", headers={"X-Request-ID": "req-42"})

    assert response.status_code == 503
    assert response.json() == {
        "error": {
            "code": "CATALOG_UNAVAILABLE",
            "message": "Could not load results",
            "request_id": "req-42",
        }
    }


@pytest.mark.asyncio
async def test_health(client):
    response = await client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"
    assert "X-Request-ID" in response.headers


@pytest.mark.asyncio
async def test_detailed_health(client):
    response = await client.get("/health/detailed")

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert data["components"]["database"]["status"] == "healthy"


@pytest.mark.asyncio
async def test_metrics(client, catalogue):
    await client.get("/api/v1/products")
    response = await client.get("/metrics")

    assert response.status_code == 200
    assert "catalog_queries_total" in response.text
