"""
Catalogue dependencies for FastAPI
"""

from fastapi import Request

from .filters import ProductFilter
from regalia.utils.validators import parse_flag

def get_product_filter(request: Request) -> ProductFilter:
    """
    Normalise the catalogue query string

    Parameters are read raw so malformed values are tolerated instead of
    being rejected with a 422.
    """
    return ProductFilter.from_query_params(request.query_params)

def wants_facets(request: Request) -> bool:
    """Include facets when withAggregations=true or facets=true"""
    params = request.query_params
    return parse_flag(params.get("withAggregations")) or parse_flag(params.get("facets"))
