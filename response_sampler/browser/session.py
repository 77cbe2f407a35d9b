"""Browser session — the single Playwright page shared by every sampler."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from playwright.async_api import Page, async_playwright

logger = logging.getLogger(__name__)


@asynccontextmanager
async def open_browser_page(headed: bool = False, timeout_ms: int = 300_000) -> AsyncIterator[Page]:
    """Launch Chromium, open one page and close the browser on exit.

    ``timeout_ms`` becomes the page default timeout, which bounds every
    navigation and ready wait.
    """
    async with async_playwright() as p:
        logger.debug("Launching Chromium (headless=%s)...", not headed)
        browser = await p.chromium.launch(headless=not headed)
        try:
            page = await browser.new_page(bypass_csp=True)
            page.set_default_timeout(timeout_ms)
            yield page
        finally:
            logger.debug("Closing browser")
            await browser.close()
