"""
Extraction pipeline - one search against one site.

Sequence: open browser, navigate, settle, submit search, wait for results,
extract, filter, save snapshot, close browser. The browser is closed on
every exit path. Any failure aborts the run and is reported as a single
ExtractionError for the site; no partial listings are ever returned.
"""

from datetime import datetime, timezone
from typing import Callable, Iterable, List, Optional
import logging

from .base import Colors, ExtractionResult, ListingRecord, RawListing, SiteExtractor
from .crawlers.browser import BrowserSession
from .exceptions import ExtractionError, InvalidInputError
from .storage import SnapshotStore

logger = logging.getLogger(__name__)

SessionFactory = Callable[[], BrowserSession]

EMPTY_TERM_MESSAGE = 'El término de búsqueda es requerido.'


def validate_term(term) -> str:
    """
    Check the search term before any browser is started.

    Returns:
        The term with surrounding whitespace removed

    Raises:
        InvalidInputError: If the term is missing, not a string or blank
    """
    if not isinstance(term, str) or not term.strip():
        raise InvalidInputError(EMPTY_TERM_MESSAGE)
    return term.strip()


def filter_listings(raw_items: Iterable[RawListing]) -> List[ListingRecord]:
    """Drop incomplete cards, keeping DOM order."""
    return [ListingRecord.from_raw(item) for item in raw_items if item.is_complete]


class ExtractionPipeline:
    """
    Runs a single site search.

    Usage:
        pipeline = ExtractionPipeline(snapshot_store=JsonFileSnapshotStore('data'))
        result = await pipeline.run('auriculares', AmazonExtractor())
    """

    def __init__(
        self,
        session_factory: Optional[SessionFactory] = None,
        snapshot_store: Optional[SnapshotStore] = None,
        settle_seconds: Optional[float] = None,
    ):
        """
        Initialize the pipeline.

        Args:
            session_factory: Creates an unopened browser session per run
            snapshot_store: Where successful results are persisted (optional)
            settle_seconds: Overrides every site's settle delay when set
        """
        self.session_factory = session_factory or BrowserSession
        self.snapshot_store = snapshot_store
        self.settle_seconds = settle_seconds

    async def run(self, term: str, extractor: SiteExtractor) -> ExtractionResult:
        """
        Search one site for a term.

        Raises:
            InvalidInputError: If the term is empty (no browser is started)
            ExtractionError: If any step from navigation to snapshot fails
        """
        term = validate_term(term)
        config = extractor.config
        log = extractor.logger
        started_at = datetime.now(timezone.utc)

        settle = self.settle_seconds if self.settle_seconds is not None else config.settle_seconds

        log.info(f"{Colors.cyan('❯❯❯')} Starting search for {Colors.bold(term)} on {config.name}")

        session = self.session_factory()
        try:
            try:
                await session.open()

                log.info(f"Navigating to {config.name}...")
                await session.navigate(extractor.search_url())

                log.info("Waiting for content to load...")
                await session.pause(settle)

                await extractor.submit_search(session, term)
                await extractor.wait_for_results(session)

                raw_items = await extractor.extract_raw(session)
                listings = filter_listings(raw_items)

                dropped = len(raw_items) - len(listings)
                if dropped:
                    log.info(f"   {Colors.gray(f'✘ dropped {dropped} incomplete item(s)')}")

                if self.snapshot_store is not None:
                    self.snapshot_store.save(extractor.site_key, listings)

            except Exception as e:
                error = ExtractionError(extractor.site_key, e)
                log.error(f"{Colors.red('[ERR]')} Search failed on {config.name}: {error.cause_name}: {error.message}")
                raise error from e

        finally:
            log.info(f"Closing browser for {config.name}...")
            await session.close()

        result = ExtractionResult(
            site=extractor.site_key,
            term=term,
            started_at=started_at,
            completed_at=datetime.now(timezone.utc),
            listings=listings,
        )
        duration = result.duration_seconds or 0
        log.info(f"✅ {config.name} complete in {duration:.1f}s: {Colors.green(f'{result.total} listings')}")
        return result
