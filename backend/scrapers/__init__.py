"""
Browser-based product scraper system for Buscador.

This module provides:
- Headless Playwright sessions for JavaScript-rendered search pages
- Per-site extractors (AliExpress, Amazon.es)
- A pipeline that runs one search per site with guaranteed browser cleanup
- A runner that searches every site concurrently with isolated failures
"""

from .base import SiteExtractor, SiteConfig, RawListing, ListingRecord, ExtractionResult
from .config import SITES, get_site_config, get_enabled_sites
from .exceptions import (
    ScraperError,
    InvalidInputError,
    LaunchError,
    NavigationError,
    SelectorTimeoutError,
    EvaluationError,
    SnapshotError,
    ExtractionError,
)
from .pipeline import ExtractionPipeline
from .manager import PipelineRunner, SCRAPER_REGISTRY
from .storage import SnapshotStore, JsonFileSnapshotStore, DatabaseSnapshotStore

__all__ = [
    'SiteExtractor',
    'SiteConfig',
    'RawListing',
    'ListingRecord',
    'ExtractionResult',
    'SITES',
    'get_site_config',
    'get_enabled_sites',
    'ScraperError',
    'InvalidInputError',
    'LaunchError',
    'NavigationError',
    'SelectorTimeoutError',
    'EvaluationError',
    'SnapshotError',
    'ExtractionError',
    'ExtractionPipeline',
    'PipelineRunner',
    'SCRAPER_REGISTRY',
    'SnapshotStore',
    'JsonFileSnapshotStore',
    'DatabaseSnapshotStore',
]
