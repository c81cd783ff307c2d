"""Products API router"""

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from regalia.core.database import get_db
from .dependencies import get_product_filter, wants_facets
from .filters import ProductFilter
from .schemas import FacetBundle, ProductListResponse
from .services import ProductCatalogService

router = APIRouter()

@router.get("", response_model=ProductListResponse)
@router.get("/", response_model=ProductListResponse, include_in_schema=False)
async def list_products(
    filters: ProductFilter = Depends(get_product_filter),
    include_facets: bool = Depends(wants_facets),
    db: AsyncSession = Depends(get_db)
):
    """
    List catalogue products

    Accepts category, rite, obedience, degree (or degreeOrder), logeType,
    search, minPrice, maxPrice, featured, showPromotions, showNew,
    inStockOnly, size, color, material, page, limit and sortBy.
    Set withAggregations=true (or facets=true) to include sidebar facets.
    """
    service = ProductCatalogService(db)
    result = await service.list_products(filters, include_facets=include_facets)

    exclude = None if include_facets else {"facets"}
    return JSONResponse(content=result.model_dump(mode="json", by_alias=True, exclude=exclude))

@router.get("/facets", response_model=FacetBundle)
async def get_product_facets(
    filters: ProductFilter = Depends(get_product_filter),
    db: AsyncSession = Depends(get_db)
):
    """Facet counts for the same filters as the listing"""
    service = ProductCatalogService(db)
    return await service.get_facets(filters)
