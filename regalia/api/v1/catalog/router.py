"""Catalogue sidebar router"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from regalia.core.database import get_db
from regalia.api.v1.products.schemas import CatalogFilterOptions
from regalia.api.v1.products.services import ProductCatalogService

router = APIRouter()

@router.get("/filters", response_model=CatalogFilterOptions)
async def get_filter_options(db: AsyncSession = Depends(get_db)):
    """Filter options for the catalogue sidebar"""
    service = ProductCatalogService(db)
    return await service.get_filter_options()
