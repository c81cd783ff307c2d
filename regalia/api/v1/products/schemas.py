"""
Product catalogue schemas for responses
"""

from pydantic import Field
from typing import Optional, List
from datetime import datetime
from decimal import Decimal
import uuid

from regalia.models import Product
from regalia.schemas.base import BaseSchema, CamelSchema
from regalia.utils.helpers import is_discounted
from regalia.utils.pagination import Pagination

MAX_LISTING_IMAGES = 2

def _to_float(value: Optional[Decimal]) -> Optional[float]:
    return float(value) if value is not None else None

class ProjectedProduct(BaseSchema):
    """Public shape of a product in a listing"""
    id: uuid.UUID
    name: str
    slug: str
    short_description: Optional[str] = None
    price: float
    compare_at_price: Optional[float] = None
    images: List[str] = Field(default_factory=list, max_length=MAX_LISTING_IMAGES)
    stock_quantity: int
    allow_backorders: bool
    featured: bool
    created_at: datetime
    average_rating: Optional[float] = None
    review_count: int = 0
    categories: List[str] = []
    rites: List[str] = []
    obediences: List[str] = []
    degrees: List[str] = []
    is_on_sale: bool = False

    @classmethod
    def from_product(cls, product: Product) -> "ProjectedProduct":
        """
        Project a product row to its public shape

        Only whitelisted fields are copied. Relations are reduced to names
        and the image list is capped.
        """
        return cls(
            id=product.id,
            name=product.name,
            slug=product.slug,
            short_description=product.short_description,
            price=float(product.price),
            compare_at_price=_to_float(product.compare_at_price),
            images=list(product.images or [])[:MAX_LISTING_IMAGES],
            stock_quantity=product.stock_quantity,
            allow_backorders=product.allow_backorders,
            featured=product.featured,
            created_at=product.created_at,
            average_rating=_to_float(product.average_rating),
            review_count=product.review_count or 0,
            categories=[category.name for category in product.categories],
            rites=[rite.name for rite in product.rites],
            obediences=[obedience.name for obedience in product.obediences],
            degrees=[degree.name for degree in product.degree_orders],
            is_on_sale=is_discounted(product.price, product.compare_at_price),
        )

class PriceRange(CamelSchema):
    """Price bounds of the matching products"""
    min: float
    max: float

class FacetValue(CamelSchema):
    """Count of products carrying one attribute value"""
    value: str
    count: int

class FacetEntity(CamelSchema):
    """Count of products linked to one reference entity"""
    id: uuid.UUID
    name: str
    count: int

class FacetBundle(CamelSchema):
    """Sidebar counts for the current filters"""
    price_range: PriceRange
    sizes: List[FacetValue] = []
    colors: List[FacetValue] = []
    materials: List[FacetValue] = []
    categories: List[FacetEntity] = []
    rites: List[FacetEntity] = []
    obediences: List[FacetEntity] = []
    degrees: List[FacetEntity] = []

class SelectedEntity(CamelSchema):
    """Reference entity selected by a filter, echoed back for breadcrumbs"""
    id: uuid.UUID
    name: str

class AppliedFilters(CamelSchema):
    """Normalised filters the listing was computed with"""
    category: Optional[str] = None
    rite: Optional[str] = None
    obedience: Optional[str] = None
    degree: Optional[str] = None
    loge_type: Optional[str] = None
    search: Optional[str] = None
    min_price: Optional[float] = None
    max_price: Optional[float] = None
    featured: bool = False
    show_promotions: bool = False
    show_new: bool = False
    in_stock_only: bool = False
    size: Optional[str] = None
    color: Optional[str] = None
    material: Optional[str] = None
    sort_by: str
    selected_category: Optional[SelectedEntity] = None
    selected_rite: Optional[SelectedEntity] = None
    selected_obedience: Optional[SelectedEntity] = None
    selected_degree: Optional[SelectedEntity] = None

class ProductListResponse(CamelSchema):
    """Product listing page"""
    products: List[ProjectedProduct]
    pagination: Pagination
    filters: AppliedFilters
    facets: Optional[FacetBundle] = None

class FilterOption(CamelSchema):
    """Entry of a sidebar filter list"""
    id: uuid.UUID
    name: str
    slug: Optional[str] = None
    code: Optional[str] = None
    count: int = 0

class DegreeOption(FilterOption):
    """Degree entry, grouped by lodge classification in the sidebar"""
    level: int
    loge_type: str

class CatalogFilterOptions(CamelSchema):
    """Everything the catalogue sidebar needs to render its filters"""
    categories: List[FilterOption] = []
    rites: List[FilterOption] = []
    obediences: List[FilterOption] = []
    degrees: List[DegreeOption] = []
    loge_types: List[str] = []
    sizes: List[str] = []
    colors: List[str] = []
    materials: List[str] = []
    price_range: PriceRange
