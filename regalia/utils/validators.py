"""Permissive parsers for raw query-string values

None of these raise: unusable input becomes None (or the given default)
"""

import math
import re
import uuid
from typing import Optional

INTEGER_PATTERN = re.compile(r"^\s*([+-]?\d+)")

def clean_str(value: Optional[str]) -> Optional[str]:
    """Strip whitespace, map empty strings to None"""
    if value is None:
        return None
    value = str(value).strip()
    return value or None

def parse_uuid(value: Optional[str]) -> Optional[uuid.UUID]:
    """Return the UUID if value is a well-formed identity, else None"""
    value = clean_str(value)
    if value is None:
        return None
    try:
        return uuid.UUID(value)
    except (ValueError, TypeError, AttributeError):
        return None

def parse_float(value: Optional[str]) -> Optional[float]:
    """Parse a finite float"""
    value = clean_str(value)
    if value is None:
        return None
    try:
        number = float(value)
    except ValueError:
        return None
    if not math.isfinite(number):
        return None
    return number

def parse_int(value: Optional[str], default: int) -> int:
    """Parse the leading integer of value ("3", "3abc"), else default"""
    value = clean_str(value)
    if value is None:
        return default
    match = INTEGER_PATTERN.match(value)
    if not match:
        return default
    return int(match.group(1))

def parse_flag(value: Optional[str]) -> bool:
    """Only the exact string "true" enables a flag"""
    return value == "true"
