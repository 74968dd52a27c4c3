"""Playwright browser session lifecycle for one extraction request.

A BrowserSession owns one Chromium process and one page. It is created by
launch_session(), used by exactly one request, and closed exactly once.
"""

from playwright.async_api import (
    Browser,
    BrowserContext,
    Page,
    Playwright,
    async_playwright,
)
from playwright.async_api import Error as PlaywrightError

from exam_scraper.config import ScraperConfig
from exam_scraper.errors import LaunchFailure
from exam_scraper.logging import get_logger

logger = get_logger(__name__)

# Flags for containers and CI hosts without a user namespace sandbox or GPU
LAUNCH_ARGS: tuple[str, ...] = (
    "--no-sandbox",
    "--disable-setuid-sandbox",
    "--disable-dev-shm-usage",
    "--disable-accelerated-2d-canvas",
    "--no-first-run",
    "--no-zygote",
    "--disable-gpu",
)


class BrowserSession:
    """Exclusively-owned handle to a running browser and its single page."""

    def __init__(
        self,
        playwright: Playwright,
        browser: Browser,
        context: BrowserContext,
        page: Page,
    ) -> None:
        self.playwright = playwright
        self.browser = browser
        self.context = context
        self.page = page
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    async def close(self) -> None:
        """Close the browser and stop the Playwright driver.

        Subsequent calls are no-ops, so the process is released only once.
        """
        if self._closed:
            return
        self._closed = True
        try:
            await self.browser.close()
        finally:
            await self.playwright.stop()
        logger.debug("browser_session_closed")


async def launch_session(config: ScraperConfig) -> BrowserSession:
    """Start Chromium and open a fresh page.

    Args:
        config: Scraper configuration (headless mode, user agent, launch timeout).

    Returns:
        A live BrowserSession. The caller must close it.

    Raises:
        LaunchFailure: If the driver or browser process cannot be started.
    """
    try:
        playwright = await async_playwright().start()
    except PlaywrightError as e:
        logger.error("playwright_start_failed", error=str(e))
        raise LaunchFailure(f"Playwright driver failed to start: {e}") from e

    browser: Browser | None = None
    try:
        browser = await playwright.chromium.launch(
            headless=config.headless,
            args=list(LAUNCH_ARGS),
            timeout=config.launch_timeout_ms,
        )
        context = await browser.new_context(user_agent=config.user_agent)
        page = await context.new_page()
    except PlaywrightError as e:
        logger.error("browser_launch_failed", error=str(e))
        try:
            if browser is not None:
                await browser.close()
        finally:
            await playwright.stop()
        raise LaunchFailure(f"Browser failed to launch: {e}") from e

    logger.info("browser_session_launched", headless=config.headless)
    return BrowserSession(playwright, browser, context, page)
