"""
Browser controller that applies scroll commands to a Playwright page.
"""
import logging
from typing import Optional

from playwright.async_api import async_playwright, Browser, Page, Playwright

logger = logging.getLogger(__name__)


class BrowserController:
    """
    Scroll sink backed by a Chromium page driven through Playwright.

    Either launches its own browser or attaches to a running one over CDP.
    """

    def __init__(self, url: str = "https://example.com", headless: bool = False,
                 cdp_url: Optional[str] = None, page: Optional[Page] = None):
        """
        Initialize the browser controller.

        Args:
            url: Page to open on start
            headless: Launch Chromium without a window
            cdp_url: Attach to an existing browser at this CDP endpoint instead of launching
            page: Already-open page to scroll (skips launching)
        """
        self.url = url
        self.headless = headless
        self.cdp_url = cdp_url
        self.page: Optional[Page] = page
        self._playwright: Optional[Playwright] = None
        self._browser: Optional[Browser] = None

    async def start(self) -> None:
        """Launch or attach to the browser and open the target page."""
        if self.page is not None:
            return

        self._playwright = await async_playwright().start()

        if self.cdp_url:
            logger.info("🔌 Connecting to browser over CDP: %s", self.cdp_url)
            self._browser = await self._playwright.chromium.connect_over_cdp(self.cdp_url)
            context = self._browser.contexts[0] if self._browser.contexts else await self._browser.new_context()
            self.page = context.pages[0] if context.pages else await context.new_page()
        else:
            self._browser = await self._playwright.chromium.launch(headless=self.headless)
            self.page = await self._browser.new_page()

        if self.url:
            logger.info("🌐 Opening %s", self.url)
            await self.page.goto(self.url)

    async def scroll(self, dy_px: float) -> None:
        """Scroll the page vertically by dy_px pixels."""
        if self.page is None:
            raise RuntimeError("Browser not started; call start() first")
        await self.page.mouse.wheel(0, dy_px)

    async def close(self) -> None:
        """Close the browser and stop Playwright."""
        if self._browser is not None:
            await self._browser.close()
            self._browser = None
        if self._playwright is not None:
            await self._playwright.stop()
            self._playwright = None
        self.page = None
        logger.info("✅ Browser controller closed")
