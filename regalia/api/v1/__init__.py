"""API v1 routes aggregation"""

from fastapi import APIRouter

from .products.router import router as products_router
from .catalog.router import router as catalog_router

# Create v1 router
api_router = APIRouter()

# Include all routers
api_router.include_router(products_router, prefix="/products", tags=["Products"])
api_router.include_router(catalog_router, prefix="/catalog", tags=["Catalog"])
