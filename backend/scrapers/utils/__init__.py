"""Shared utilities for scrapers."""

from .normalizers import (
    clean_text,
    normalize_image_url,
    parse_price,
)
from .extractors import (
    extract_text,
    extract_attribute,
    select_items,
)

__all__ = [
    'clean_text',
    'normalize_image_url',
    'parse_price',
    'extract_text',
    'extract_attribute',
    'select_items',
]
