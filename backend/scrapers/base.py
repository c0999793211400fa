"""
Base classes for the browser-based scraper system.

This module defines the abstract site extractor and the data structures
shared by the pipeline, the runner and the snapshot stores.
"""

from abc import ABC, abstractmethod
from typing import List, Dict, Optional, Any
from dataclasses import dataclass, field, asdict
from datetime import datetime
import logging

from bs4 import BeautifulSoup


# Sentinel placeholders substituted for missing DOM fields
NO_TITLE = 'Sin título'
NO_PRICE = 'Sin precio'
NO_IMAGE = 'Sin imagen'

PLACEHOLDERS = {
    'title': NO_TITLE,
    'raw_price': NO_PRICE,
    'image_url': NO_IMAGE,
}


# ANSI color codes for terminal output
class Colors:
    """ANSI color codes for colorized logging."""
    RESET = '\033[0m'
    BOLD = '\033[1m'

    GREEN = '\033[92m'
    RED = '\033[91m'
    CYAN = '\033[96m'
    GRAY = '\033[90m'

    @staticmethod
    def green(text):
        return f"{Colors.GREEN}{text}{Colors.RESET}"

    @staticmethod
    def red(text):
        return f"{Colors.RED}{text}{Colors.RESET}"

    @staticmethod
    def cyan(text):
        return f"{Colors.CYAN}{text}{Colors.RESET}"

    @staticmethod
    def gray(text):
        return f"{Colors.GRAY}{text}{Colors.RESET}"

    @staticmethod
    def bold(text):
        return f"{Colors.BOLD}{text}{Colors.RESET}"


@dataclass
class SiteConfig:
    """Configuration for a target e-commerce site."""
    name: str                           # Full display name
    short_name: str                     # Logger suffix (e.g., 'AMAZON')
    home_url: str                       # Page where the search box lives
    search_input_selector: str          # Search box
    results_selector: str               # Container that appears once results render
    item_selector: str                  # One element per product card
    title_selector: str
    price_selector: str
    image_selector: str
    settle_seconds: float = 5.0         # Fixed delay before touching the page
    search_timeout: float = 30.0        # Wait for the search box
    results_timeout: float = 30.0       # Wait for the results container
    submit_waits_for_navigation: bool = False
    typing_delay_ms: int = 100
    enabled: bool = True                # Whether to include in searches


@dataclass
class RawListing:
    """One product card as read from the DOM, placeholders included."""
    title: str = NO_TITLE
    raw_price: str = NO_PRICE
    image_url: str = NO_IMAGE

    @property
    def is_complete(self) -> bool:
        for name, placeholder in PLACEHOLDERS.items():
            value = getattr(self, name)
            if not value or not value.strip() or value == placeholder:
                return False
        return True


@dataclass
class ListingRecord:
    """A validated listing. The id is assigned by the consuming layer."""
    title: str
    raw_price: str
    image_url: str
    id: Optional[str] = None

    @classmethod
    def from_raw(cls, raw: RawListing) -> 'ListingRecord':
        return cls(title=raw.title, raw_price=raw.raw_price, image_url=raw.image_url)

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        if data['id'] is None:
            del data['id']
        return data


@dataclass
class ExtractionResult:
    """Listings produced by one site for one search, in DOM order."""
    site: str
    term: str
    started_at: datetime
    completed_at: Optional[datetime] = None
    listings: List[ListingRecord] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.listings)

    @property
    def duration_seconds(self) -> Optional[float]:
        if self.completed_at and self.started_at:
            return (self.completed_at - self.started_at).total_seconds()
        return None

    def to_dict(self) -> Dict:
        return {
            'site': self.site,
            'term': self.term,
            'started_at': self.started_at.isoformat(),
            'completed_at': self.completed_at.isoformat() if self.completed_at else None,
            'duration_seconds': self.duration_seconds,
            'total': self.total,
            'listings': [listing.to_dict() for listing in self.listings],
        }


class SiteExtractor(ABC):
    """
    Abstract base class for all site extractors.

    An extractor is a stateless strategy: it holds site configuration only
    and is handed the browser session for every call.

    Subclasses must implement:
    - parse_results(): Map the rendered results page to RawListing objects

    Optional overrides:
    - submit_search(): Custom search box interaction
    - wait_for_results(): Custom readiness check for the results page
    """

    # Registry key, set by subclasses (e.g., 'amazon')
    site_key: str = ''

    def __init__(self, config: SiteConfig):
        self.config = config
        self.logger = logging.getLogger(f"scraper.{config.short_name}")

    def search_url(self) -> str:
        return self.config.home_url

    async def submit_search(self, session, term: str) -> None:
        """Wait for the search box, type the term and submit it."""
        selector = self.config.search_input_selector
        self.logger.info("Waiting for the search field...")
        await session.wait_for_selector(selector, visible=True, timeout=self.config.search_timeout)

        self.logger.info(f"Searching for: {term}")
        await session.type_and_submit(
            selector,
            term,
            delay_ms=self.config.typing_delay_ms,
            wait_for_navigation=self.config.submit_waits_for_navigation,
        )

    async def wait_for_results(self, session) -> None:
        """Block until the results container is visible."""
        self.logger.info("Waiting for results to load...")
        await session.wait_for_selector(
            self.config.results_selector,
            visible=True,
            timeout=self.config.results_timeout,
        )

    async def extract_raw(self, session) -> List[RawListing]:
        self.logger.info(f"Extracting listings from {self.config.name}...")
        return await session.extract(self.parse_results)

    @abstractmethod
    def parse_results(self, soup: BeautifulSoup) -> List[RawListing]:
        """
        Parse the rendered results page.

        Args:
            soup: Parsed HTML of the results page

        Returns:
            List of RawListing objects in DOM order
        """
        pass
