"""
Headless browser session for JavaScript-rendered search pages.

Uses Playwright Chromium with realistic headers and automation indicators
hidden. One session owns one browser, one fresh context and one page, and
is used for exactly one search against one site.
"""

import asyncio
from typing import Callable, Optional, TypeVar
from bs4 import BeautifulSoup
from playwright.async_api import (
    async_playwright,
    Browser,
    BrowserContext,
    Page,
    Error as PlaywrightError,
    TimeoutError as PlaywrightTimeoutError,
)
import logging

from ..exceptions import (
    EvaluationError,
    LaunchError,
    NavigationError,
    SelectorTimeoutError,
)

logger = logging.getLogger(__name__)

T = TypeVar('T')

USER_AGENT = (
    'Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 '
    '(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36'
)

LAUNCH_ARGS = [
    '--disable-blink-features=AutomationControlled',
    '--disable-dev-shm-usage',
    '--no-sandbox',
    '--disable-setuid-sandbox',
    '--disable-gpu',
]

HIDE_AUTOMATION_SCRIPT = """
    Object.defineProperty(navigator, 'webdriver', {
        get: () => undefined
    });
    Object.defineProperty(navigator, 'languages', {
        get: () => ['es-ES', 'es', 'en']
    });
"""


class BrowserSession:
    """
    One isolated Playwright browser used for a single search.

    Usage:
        async with BrowserSession() as session:
            await session.navigate('https://www.amazon.es/')
            await session.wait_for_selector('input[name="field-keywords"]')
            ...

    close() is idempotent and safe to call after a failed open().
    """

    def __init__(
        self,
        headless: bool = True,
        timeout: float = 30.0,
        locale: str = 'es-ES',
    ):
        """
        Initialize the session (nothing is launched until open()).

        Args:
            headless: Run browser in headless mode
            timeout: Default timeout in seconds for navigation and waits
            locale: Browser locale sent to the target site
        """
        self.headless = headless
        self.timeout = timeout
        self.locale = locale
        self._playwright = None
        self._browser: Optional[Browser] = None
        self._context: Optional[BrowserContext] = None
        self._page: Optional[Page] = None

    @property
    def page(self) -> Page:
        if self._page is None:
            raise RuntimeError("Browser session is not open")
        return self._page

    @property
    def is_open(self) -> bool:
        return self._page is not None

    async def open(self) -> 'BrowserSession':
        """
        Launch Chromium and create a fresh context and page.

        Raises:
            LaunchError: If the browser cannot be started
        """
        try:
            self._playwright = await async_playwright().start()

            logger.debug("Launching Chromium browser...")
            self._browser = await self._playwright.chromium.launch(
                headless=self.headless,
                args=LAUNCH_ARGS,
                handle_sigint=False,
                handle_sigterm=False,
                handle_sighup=False,
            )

            if not self._browser.is_connected():
                raise LaunchError("Browser launched but not connected")

            # Fresh context per session: no cookies or storage shared between searches
            self._context = await self._browser.new_context(
                viewport={'width': 1920, 'height': 1080},
                user_agent=USER_AGENT,
                locale=self.locale,
                extra_http_headers={
                    'Accept': 'text/html,application/xhtml+xml,application/xml;q=0.9,image/avif,image/webp,*/*;q=0.8',
                    'Accept-Language': 'es-ES,es;q=0.9,en;q=0.8',
                    'Upgrade-Insecure-Requests': '1',
                },
            )
            await self._context.add_init_script(HIDE_AUTOMATION_SCRIPT)
            self._context.set_default_timeout(self.timeout * 1000)

            self._page = await self._context.new_page()
            logger.debug("Browser session opened")
            return self

        except Exception as e:
            logger.error(f"Failed to launch browser: {e}")
            await self._cleanup()
            if isinstance(e, LaunchError):
                raise
            raise LaunchError(f"Could not start browser: {e}") from e

    async def navigate(self, url: str, timeout: Optional[float] = None) -> None:
        """
        Navigate to a URL and wait for DOMContentLoaded.

        HTTP error statuses are not failures here; a page served with 503
        still counts as loaded if its search box renders.

        Raises:
            NavigationError: On network/DNS failure or timeout
        """
        timeout = timeout or self.timeout
        try:
            await self.page.goto(
                url,
                wait_until='domcontentloaded',
                timeout=timeout * 1000
            )
        except PlaywrightTimeoutError as e:
            raise NavigationError(f"Timed out after {timeout:.0f}s loading {url}") from e
        except PlaywrightError as e:
            raise NavigationError(f"Failed to load {url}: {e.message}") from e

    async def pause(self, seconds: float) -> None:
        """Fixed settle delay for client-side rendering."""
        if seconds > 0:
            await asyncio.sleep(seconds)

    async def wait_for_selector(
        self,
        selector: str,
        visible: bool = True,
        timeout: Optional[float] = None
    ) -> None:
        """
        Wait for an element to be attached (and visible, by default).

        Raises:
            SelectorTimeoutError: If the element does not appear in time
            NavigationError: If the page crashed or was closed while waiting
        """
        timeout = timeout or self.timeout
        try:
            await self.page.wait_for_selector(
                selector,
                state='visible' if visible else 'attached',
                timeout=timeout * 1000
            )
        except PlaywrightTimeoutError as e:
            raise SelectorTimeoutError(selector, timeout) from e
        except PlaywrightError as e:
            raise NavigationError(f"Page failed while waiting for '{selector}': {e.message}") from e

    async def type_and_submit(
        self,
        selector: str,
        text: str,
        delay_ms: int = 100,
        wait_for_navigation: bool = False
    ) -> None:
        """
        Type text into an input with a per-key delay and press Enter.

        Args:
            selector: Input element selector
            text: Text to type
            delay_ms: Delay between key presses
            wait_for_navigation: Also wait for the navigation Enter triggers
        """
        try:
            await self.page.type(selector, text, delay=delay_ms)
            if wait_for_navigation:
                async with self.page.expect_navigation(
                    wait_until='domcontentloaded',
                    timeout=self.timeout * 1000
                ):
                    await self.page.keyboard.press('Enter')
            else:
                await self.page.keyboard.press('Enter')
        except PlaywrightTimeoutError as e:
            raise NavigationError(f"Timed out waiting for search results page after submitting '{text}'") from e
        except PlaywrightError as e:
            raise NavigationError(f"Failed to submit search: {e.message}") from e

    async def extract(self, parser: Callable[[BeautifulSoup], T]) -> T:
        """
        Read the rendered DOM and hand it to a parser.

        Args:
            parser: Function mapping the parsed page to records

        Returns:
            Whatever the parser returns

        Raises:
            EvaluationError: If the page content cannot be read
        """
        try:
            html = await self.page.content()
        except PlaywrightError as e:
            raise EvaluationError(f"Could not read page content: {e.message}") from e
        return parser(BeautifulSoup(html, 'html.parser'))

    async def _cleanup(self):
        """Clean up browser resources with timeouts to prevent hanging."""
        cleanup_timeout = 2.0  # 2 second timeout per cleanup operation

        if self._page:
            try:
                await asyncio.wait_for(self._page.close(), timeout=cleanup_timeout)
            except asyncio.TimeoutError:
                logger.warning("Page close timed out, forcing cleanup")
            except Exception as e:
                logger.debug(f"Error closing page: {e}")
            self._page = None

        if self._context:
            try:
                await asyncio.wait_for(self._context.close(), timeout=cleanup_timeout)
            except asyncio.TimeoutError:
                logger.warning("Context close timed out, forcing cleanup")
            except Exception as e:
                logger.warning(f"Error closing context: {e}")
            self._context = None

        if self._browser:
            try:
                await asyncio.wait_for(self._browser.close(), timeout=cleanup_timeout)
            except asyncio.TimeoutError:
                logger.warning("Browser close timed out, forcing cleanup")
            except Exception as e:
                logger.warning(f"Error closing browser: {e}")
            self._browser = None

        if self._playwright:
            try:
                await asyncio.wait_for(self._playwright.stop(), timeout=cleanup_timeout)
            except asyncio.TimeoutError:
                logger.warning("Playwright stop timed out, forcing cleanup")
            except Exception as e:
                logger.warning(f"Error stopping playwright: {e}")
            self._playwright = None

    async def close(self):
        """Close the browser and cleanup resources."""
        await self._cleanup()

    async def __aenter__(self):
        """Async context manager entry."""
        return await self.open()

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self._cleanup()
