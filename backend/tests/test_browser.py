"""
Tests for BrowserSession error mapping and cleanup, with a mocked Playwright page.
"""

import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest
from playwright.async_api import Error as PlaywrightError, TimeoutError as PlaywrightTimeoutError

from scrapers.crawlers import browser
from scrapers.crawlers.browser import BrowserSession
from scrapers.exceptions import (
    EvaluationError,
    LaunchError,
    NavigationError,
    SelectorTimeoutError,
)


def open_session(page=None):
    """BrowserSession with a mocked page, as if open() had succeeded."""
    session = BrowserSession(timeout=5.0)
    session._page = page or AsyncMock()
    session._context = AsyncMock()
    return session


class TestNavigate:
    """Test BrowserSession.navigate()."""

    def test_success(self):
        session = open_session()
        session.page.goto.return_value = MagicMock(status=200)

        asyncio.run(session.navigate("https://www.amazon.es/"))

        session.page.goto.assert_awaited_once_with(
            "https://www.amazon.es/", wait_until="domcontentloaded", timeout=5000.0
        )

    def test_timeout(self):
        session = open_session()
        session.page.goto.side_effect = PlaywrightTimeoutError("Timeout 5000ms exceeded")

        with pytest.raises(NavigationError):
            asyncio.run(session.navigate("https://www.amazon.es/"))

    def test_dns_failure(self):
        session = open_session()
        session.page.goto.side_effect = PlaywrightError("net::ERR_NAME_NOT_RESOLVED")

        with pytest.raises(NavigationError, match="ERR_NAME_NOT_RESOLVED"):
            asyncio.run(session.navigate("https://no-such-shop.invalid/"))

    def test_http_error_status_is_not_a_failure(self):
        session = open_session()
        session.page.goto.return_value = MagicMock(status=503)

        asyncio.run(session.navigate("https://www.amazon.es/"))

        session.page.goto.assert_awaited_once()


class TestWaitForSelector:
    """Test BrowserSession.wait_for_selector()."""

    def test_visible_state(self):
        session = open_session()

        asyncio.run(session.wait_for_selector(".s-main-slot", timeout=60.0))

        session.page.wait_for_selector.assert_awaited_once_with(
            ".s-main-slot", state="visible", timeout=60000.0
        )

    def test_timeout_raises_selector_timeout(self):
        session = open_session()
        session.page.wait_for_selector.side_effect = PlaywrightTimeoutError("Timeout exceeded")

        with pytest.raises(SelectorTimeoutError) as exc_info:
            asyncio.run(session.wait_for_selector(".s-main-slot"))

        assert exc_info.value.selector == ".s-main-slot"
        assert exc_info.value.timeout == 5.0


class TestTypeAndSubmit:
    """Test BrowserSession.type_and_submit()."""

    def test_types_with_delay_and_presses_enter(self):
        session = open_session()

        asyncio.run(session.type_and_submit('input[type="text"]', "auriculares", delay_ms=100))

        session.page.type.assert_awaited_once_with('input[type="text"]', "auriculares", delay=100)
        session.page.keyboard.press.assert_awaited_once_with("Enter")

    def test_waits_for_navigation(self):
        session = open_session()
        session.page.expect_navigation = MagicMock()

        asyncio.run(session.type_and_submit("#q", "auriculares", wait_for_navigation=True))

        session.page.expect_navigation.assert_called_once_with(
            wait_until="domcontentloaded", timeout=5000.0
        )
        session.page.keyboard.press.assert_awaited_once_with("Enter")

    def test_navigation_timeout(self):
        session = open_session()
        session.page.type.side_effect = PlaywrightTimeoutError("Timeout exceeded")

        with pytest.raises(NavigationError):
            asyncio.run(session.type_and_submit("#q", "auriculares"))


class TestExtract:
    """Test BrowserSession.extract()."""

    def test_parser_receives_soup(self):
        session = open_session()
        session.page.content.return_value = "<p class='price'>19,99€</p>"

        text = asyncio.run(session.extract(lambda soup: soup.select_one(".price").get_text()))

        assert text == "19,99€"

    def test_content_failure(self):
        session = open_session()
        session.page.content.side_effect = PlaywrightError("Target page, context or browser has been closed")

        with pytest.raises(EvaluationError):
            asyncio.run(session.extract(lambda soup: soup))


class TestLifecycle:
    """Test open/close behaviour."""

    def test_page_requires_open(self):
        with pytest.raises(RuntimeError):
            BrowserSession().page

    def test_close_is_idempotent(self):
        session = open_session()
        page = session.page

        asyncio.run(session.close())
        asyncio.run(session.close())

        page.close.assert_awaited_once()
        assert session.is_open is False

    def test_close_without_open(self):
        asyncio.run(BrowserSession().close())

    def test_launch_failure(self, monkeypatch):
        playwright_cm = MagicMock()
        playwright_cm.start = AsyncMock(side_effect=RuntimeError("Executable doesn't exist"))
        monkeypatch.setattr(browser, "async_playwright", MagicMock(return_value=playwright_cm))

        session = BrowserSession()
        with pytest.raises(LaunchError, match="Executable doesn't exist"):
            asyncio.run(session.open())

        assert session.is_open is False

    def test_context_manager_closes(self, monkeypatch):
        session = BrowserSession()
        opened = open_session()
        monkeypatch.setattr(session, "open", AsyncMock(return_value=session))
        session._page = opened.page

        async def use():
            async with session:
                pass

        asyncio.run(use())

        assert session.is_open is False
