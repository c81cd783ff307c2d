"""
Product filtering logic
Turns raw query-string parameters into an immutable filter descriptor
"""

from dataclasses import dataclass, asdict
from typing import Any, Dict, Mapping, Optional
import hashlib
import json

from regalia.core.config import settings
from regalia.utils.validators import clean_str, parse_float, parse_int, parse_flag

DEFAULT_SORT = "-created_at"

SORT_KEYS = (
    "-created_at",
    "created_at",
    "price",
    "price_asc",
    "-price",
    "price_desc",
    "name",
    "-name",
    "featured",
    "popular",
)

@dataclass(frozen=True)
class ProductFilter:
    """Product filter parameters"""
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
    page: int = 1
    limit: int = settings.DEFAULT_PAGE_SIZE
    sort_by: str = DEFAULT_SORT

    @classmethod
    def from_query_params(cls, params: Mapping[str, Any]) -> "ProductFilter":
        """
        Normalise raw query parameters

        Never raises: malformed values are dropped or replaced by defaults.

        Args:
            params: Query-string mapping (camelCase keys)

        Returns:
            Filter descriptor
        """
        def value(key: str) -> Optional[str]:
            return clean_str(params.get(key))

        page = parse_int(params.get("page"), 1)
        if page < 1:
            page = 1
        # Keeps the OFFSET within the driver integer range
        page = min(page, settings.MAX_PAGE)

        limit = parse_int(params.get("limit"), settings.DEFAULT_PAGE_SIZE)
        if limit < 1:
            limit = settings.DEFAULT_PAGE_SIZE
        limit = min(limit, settings.MAX_PAGE_SIZE)

        sort_by = value("sortBy")
        if sort_by not in SORT_KEYS:
            sort_by = DEFAULT_SORT

        return cls(
            category=value("category"),
            rite=value("rite"),
            obedience=value("obedience"),
            degree=value("degree") or value("degreeOrder"),
            loge_type=value("logeType"),
            search=value("search"),
            min_price=parse_float(params.get("minPrice")),
            max_price=parse_float(params.get("maxPrice")),
            featured=parse_flag(params.get("featured")),
            show_promotions=parse_flag(params.get("showPromotions")),
            show_new=parse_flag(params.get("showNew")),
            in_stock_only=parse_flag(params.get("inStockOnly")),
            size=value("size"),
            color=value("color"),
            material=value("material"),
            page=page,
            limit=limit,
            sort_by=sort_by,
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def cache_key(self) -> str:
        """Deterministic key: equal descriptors give equal keys"""
        payload = json.dumps(self.to_dict(), sort_keys=True, separators=(",", ":"))
        digest = hashlib.sha1(payload.encode("utf-8")).hexdigest()
        return f"catalog:products:{digest}"

def normalize_filters(params: Mapping[str, Any]) -> ProductFilter:
    """Shortcut for ProductFilter.from_query_params"""
    return ProductFilter.from_query_params(params)
