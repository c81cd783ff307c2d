"""
Helper utilities
"""

from decimal import Decimal
from typing import Optional
import slugify as python_slugify

def generate_slug(text: str) -> str:
    """
    Generate URL-friendly slug from text

    Args:
        text: Text to convert to slug

    Returns:
        URL-friendly slug ("Tabliers Maîtres" -> "tabliers-maitres")
    """
    return python_slugify.slugify(text or "", max_length=100)

def is_discounted(price: Optional[Decimal], compare_at_price: Optional[Decimal]) -> bool:
    """A reference price strictly above the selling price marks a discount"""
    if price is None or compare_at_price is None:
        return False
    return compare_at_price > price
