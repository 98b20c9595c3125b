"""Playwright-backed page rendering."""

from __future__ import annotations

import logging
from typing import List, Optional

from playwright.async_api import (
    Browser,
    Error as PlaywrightError,
    Page,
    Playwright,
    TimeoutError as PlaywrightTimeoutError,
    async_playwright,
)

from .config import CrawlConfig
from .errors import CrawlSetupError, PageLoadError
from .models import ImageRef

logger = logging.getLogger("imgcrawl")

IMAGES_SCRIPT = """
() => Array.from(document.images).map((img) => ({
  src: img.src,
  alt: img.alt,
  width: img.width,
  height: img.height,
}))
"""

LINKS_SCRIPT = "() => Array.from(document.links).map((link) => link.href)"


class PageRenderer:
    """Loads URLs in headless Chromium and exposes their images and links.

    Use as an async context manager; the browser and the Playwright driver are
    shut down on exit, including when the crawl raises.
    """

    def __init__(self, config: CrawlConfig) -> None:
        self.config = config
        self._playwright: Optional[Playwright] = None
        self._browser: Optional[Browser] = None

    async def __aenter__(self) -> "PageRenderer":
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.stop()

    async def start(self) -> None:
        try:
            self._playwright = await async_playwright().start()
            self._browser = await self._playwright.chromium.launch(
                headless=self.config.headless
            )
        except PlaywrightError as exc:
            await self.stop()
            raise CrawlSetupError(f"Unable to launch browser: {exc}") from exc
        logger.debug("Browser launched")

    async def stop(self) -> None:
        if self._browser is not None:
            try:
                await self._browser.close()
            except PlaywrightError as exc:
                logger.warning("Error while closing browser: %s", exc)
            self._browser = None
        if self._playwright is not None:
            await self._playwright.stop()
            self._playwright = None

    async def open(self, url: str) -> Page:
        """Navigate a fresh page to ``url`` and wait for its images."""
        if self._browser is None:
            raise RuntimeError("PageRenderer used outside of its context")
        try:
            page = await self._browser.new_page(user_agent=self.config.user_agent)
        except PlaywrightError as exc:
            raise PageLoadError(f"Unable to open a page for {url}: {exc}") from exc
        try:
            page.set_default_navigation_timeout(self.config.navigation_timeout * 1000)
            await page.goto(url, wait_until="networkidle")
        except PlaywrightTimeoutError as exc:
            await self.close(page)
            raise PageLoadError(f"Timeout while loading {url}: {exc}") from exc
        except PlaywrightError as exc:
            await self.close(page)
            raise PageLoadError(f"Failed to load page {url}: {exc}") from exc

        try:
            await page.wait_for_selector(
                "img",
                state="attached",
                timeout=self.config.image_wait * 1000,
            )
        except PlaywrightTimeoutError:
            logger.info("No img tags found or timed out on %s", url)
        except PlaywrightError as exc:
            await self.close(page)
            raise PageLoadError(f"Page {url} failed while waiting for images: {exc}") from exc
        return page

    async def list_images(self, page: Page) -> List[ImageRef]:
        try:
            raw = await page.evaluate(IMAGES_SCRIPT)
        except PlaywrightError as exc:
            raise PageLoadError(f"Unable to read images from {page.url}: {exc}") from exc
        return [ImageRef.from_dom(item) for item in raw or []]

    async def list_links(self, page: Page) -> List[str]:
        try:
            raw = await page.evaluate(LINKS_SCRIPT)
        except PlaywrightError as exc:
            raise PageLoadError(f"Unable to read links from {page.url}: {exc}") from exc
        return [href for href in raw or [] if isinstance(href, str) and href]

    async def close(self, page: Page) -> None:
        try:
            await page.close()
        except PlaywrightError as exc:
            logger.debug("Error while closing page %s: %s", page.url, exc)
