"""
Exception hierarchy for the scraper system.

Browser-level failures (launch, navigation, selector waits, DOM reads) are
raised by the crawler and caught at the pipeline boundary, where they are
wrapped into a single ExtractionError for the site.
"""

from typing import Dict, Optional


class ScraperError(Exception):
    """Base class for all scraper errors."""


class InvalidInputError(ScraperError, ValueError):
    """The search term is empty or missing."""


class LaunchError(ScraperError):
    """The browser process could not be started."""


class NavigationError(ScraperError):
    """The target site was unreachable or navigation timed out."""


class SelectorTimeoutError(ScraperError, TimeoutError):
    """An expected element did not become visible before its deadline."""

    def __init__(self, selector: str, timeout: float):
        self.selector = selector
        self.timeout = timeout
        super().__init__(f"Selector '{selector}' not visible after {timeout:.1f}s")


class EvaluationError(ScraperError):
    """Reading the rendered DOM failed."""


class SnapshotError(ScraperError):
    """The snapshot could not be written."""


class ExtractionError(ScraperError):
    """
    A site's pipeline failed.

    Wraps the underlying cause. Never carries partial listings.
    """

    def __init__(self, site: str, cause: BaseException, message: Optional[str] = None):
        self.site = site
        self.cause = cause
        self.message = message or str(cause) or type(cause).__name__
        super().__init__(f"[{site}] {self.message}")

    @property
    def cause_name(self) -> str:
        return type(self.cause).__name__

    def to_dict(self) -> Dict:
        return {
            'site': self.site,
            'cause': self.cause_name,
            'message': self.message,
        }
