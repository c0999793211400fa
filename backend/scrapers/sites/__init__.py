"""Per-site extractor implementations."""

from .aliexpress import AliExpressExtractor
from .amazon import AmazonExtractor

__all__ = ['AliExpressExtractor', 'AmazonExtractor']
