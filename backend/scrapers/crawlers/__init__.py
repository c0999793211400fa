"""Browser session used by the site extractors."""

from .browser import BrowserSession

__all__ = ['BrowserSession']
