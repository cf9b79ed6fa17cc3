"""
Browser Session - thin facade over a single Playwright page.

Only the primitives the action interpreter needs are exposed. Element waits
that time out are reported as ElementResolutionError so callers never deal
with Playwright exception types directly.
"""

from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any, AsyncIterator, Union

from playwright.async_api import TimeoutError as PlaywrightTimeoutError
from playwright.async_api import async_playwright

from .config import config
from .diagnostics import get_logger
from .exceptions import ElementResolutionError

logger = get_logger(__name__)


class BrowserSession:
    """Facade over one page/context, owned by a single run."""

    def __init__(self, page):
        self.page = page

    async def goto(self, url: str) -> None:
        await self.page.goto(url)

    async def fill(self, selector: str, text: str) -> None:
        await self.page.fill(selector, text)

    async def click(self, selector: str, timeout_ms: int) -> None:
        """Click the first element matching selector once it is actionable."""
        try:
            await self.page.locator(selector).first.click(timeout=timeout_ms)
        except PlaywrightTimeoutError as e:
            raise ElementResolutionError(selector, timeout_ms, str(e)) from e

    async def wait_for_selector(self, selector: str, timeout_ms: int) -> Any:
        try:
            handle = await self.page.wait_for_selector(selector, timeout=timeout_ms)
        except PlaywrightTimeoutError as e:
            raise ElementResolutionError(selector, timeout_ms, str(e)) from e
        if handle is None:
            raise ElementResolutionError(selector, timeout_ms, "no matching element")
        return handle

    async def inner_html(self, handle: Any) -> str:
        return await handle.inner_html()

    async def wait_for_timeout(self, ms: int) -> None:
        await self.page.wait_for_timeout(ms)

    async def screenshot(self, path: Union[str, Path]) -> str:
        await self.page.screenshot(path=str(path))
        logger.debug(f"Screenshot saved: {path}")
        return str(path)


@asynccontextmanager
async def open_browser_session(headless: bool = None) -> AsyncIterator[BrowserSession]:
    """
    Launch Chromium and yield a BrowserSession over a fresh page.

    The browser is closed when the block exits, including on error.
    """
    headless = config.headless if headless is None else headless
    async with async_playwright() as p:
        browser = await p.chromium.launch(headless=headless)
        try:
            context = await browser.new_context()
            page = await context.new_page()
            logger.info(f"Browser session opened (headless={headless})")
            yield BrowserSession(page)
        finally:
            await browser.close()
            logger.info("Browser session closed")
