"""
Pipeline Runner - runs a search against every site.

Each site runs as an independent asyncio task with its own browser session
and its own failure domain. Partial success (one site ok, another failed)
is a normal outcome and is reported per site.
"""

import asyncio
from typing import Dict, List, Optional, Type, Union
import logging

from .base import ExtractionResult, SiteExtractor
from .config import SITES, get_site_config, get_enabled_sites
from .exceptions import ExtractionError
from .pipeline import ExtractionPipeline, SessionFactory, validate_term
from .storage import SnapshotStore

# Import all implemented extractors
from .sites.aliexpress import AliExpressExtractor
from .sites.amazon import AmazonExtractor

logger = logging.getLogger(__name__)

SiteOutcome = Union[ExtractionResult, ExtractionError]


# Registry of implemented extractors
# Add new sites here as they are implemented
SCRAPER_REGISTRY: Dict[str, Type[SiteExtractor]] = {
    'aliexpress': AliExpressExtractor,
    'amazon': AmazonExtractor,
}


class PipelineRunner:
    """
    Runs extraction pipelines for all registered sites.

    Usage:
        runner = PipelineRunner(snapshot_store=store)

        # Search every enabled site concurrently
        results = await runner.run_all('auriculares')

        # Search one site
        outcome = await runner.run_site('amazon', 'auriculares')
    """

    def __init__(
        self,
        session_factory: Optional[SessionFactory] = None,
        snapshot_store: Optional[SnapshotStore] = None,
        settle_seconds: Optional[float] = None,
        extractors: Optional[Dict[str, SiteExtractor]] = None,
    ):
        """
        Initialize the runner.

        Args:
            session_factory: Creates one browser session per site run
            snapshot_store: Snapshot persistence shared by all sites
            settle_seconds: Overrides the per-site settle delay
            extractors: Explicit site_key -> extractor mapping
                (defaults to every enabled site in SCRAPER_REGISTRY)
        """
        self.pipeline = ExtractionPipeline(
            session_factory=session_factory,
            snapshot_store=snapshot_store,
            settle_seconds=settle_seconds,
        )
        if extractors is None:
            extractors = {
                key: SCRAPER_REGISTRY[key]()
                for key in get_enabled_sites()
                if key in SCRAPER_REGISTRY
            }
        self.extractors = extractors

    def get_extractor(self, site_key: str) -> SiteExtractor:
        """
        Get the extractor for a site.

        Raises:
            ValueError: If the site is unknown or not implemented
        """
        if site_key in self.extractors:
            return self.extractors[site_key]
        get_site_config(site_key)
        raise ValueError(f"Scraper not implemented for site: '{site_key}'")

    async def run_site(self, site_key: str, term: str) -> SiteOutcome:
        """
        Run the pipeline for a single site.

        Returns:
            ExtractionResult on success, ExtractionError on failure
        """
        extractor = self.get_extractor(site_key)
        try:
            return await self.pipeline.run(term, extractor)
        except ExtractionError as e:
            return e

    async def run_all(
        self,
        term: str,
        site_keys: Optional[List[str]] = None
    ) -> Dict[str, SiteOutcome]:
        """
        Run all sites concurrently and collect every outcome.

        Args:
            term: Search term
            site_keys: Sites to search (defaults to all registered)

        Returns:
            Dictionary mapping site_key to ExtractionResult or ExtractionError

        Raises:
            InvalidInputError: If the term is empty (nothing is launched)
        """
        term = validate_term(term)
        if site_keys is None:
            site_keys = list(self.extractors.keys())
        for key in site_keys:
            self.get_extractor(key)

        logger.info(f"Searching '{term}' on {len(site_keys)} sites: {site_keys}")

        tasks = [self.run_site(key, term) for key in site_keys]
        outcomes = await asyncio.gather(*tasks, return_exceptions=True)

        results: Dict[str, SiteOutcome] = {}
        for key, outcome in zip(site_keys, outcomes):
            if isinstance(outcome, (ExtractionResult, ExtractionError)):
                results[key] = outcome
            elif isinstance(outcome, Exception):
                logger.error(f"Unexpected failure for {key}: {outcome}")
                results[key] = ExtractionError(key, outcome)
            else:
                raise outcome

        summary = self.get_results_summary(results)
        logger.info(
            f"Search complete: {summary['successful']} ok, {summary['failed']} failed, "
            f"{summary['total_listings']} listings"
        )
        return results

    def list_sites(self) -> List[Dict]:
        """
        List all configured sites and their implementation status.

        Returns:
            List of site info dictionaries
        """
        sites = []
        for key, config in SITES.items():
            sites.append({
                'key': key,
                'name': config.name,
                'short_name': config.short_name,
                'enabled': config.enabled,
                'implemented': key in SCRAPER_REGISTRY,
                'url': config.home_url,
            })
        return sites

    def get_implemented_sites(self) -> List[str]:
        """Get list of implemented site keys."""
        return list(SCRAPER_REGISTRY.keys())

    @staticmethod
    def get_results_summary(results: Dict[str, SiteOutcome]) -> Dict:
        """
        Get summary of a run_all() result.

        Returns:
            Summary dictionary with totals
        """
        successful = [r for r in results.values() if isinstance(r, ExtractionResult)]
        return {
            'total_sites': len(results),
            'successful': len(successful),
            'failed': len(results) - len(successful),
            'total_listings': sum(r.total for r in successful),
        }
