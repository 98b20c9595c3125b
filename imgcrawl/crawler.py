"""High-level orchestration for crawling pages and collecting images."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Sequence, Set

from .config import CrawlConfig
from .errors import CrawlSetupError, ImageFetchError, PageLoadError
from .images import ImageFetcher
from .manifest import write_manifest
from .models import CrawlStats, DownloadedImage, ImageRef, PageRef
from .renderer import PageRenderer
from .utils import normalize_url

logger = logging.getLogger("imgcrawl")


@dataclass
class CrawlResult:
    """Outcome of a finished crawl run."""

    images: List[DownloadedImage]
    stats: CrawlStats
    manifest_path: Path
    visited: Set[str] = field(default_factory=set)


class CrawlEngine:
    """Depth-first, depth-bounded crawl over rendered pages.

    Pages are taken from an explicit LIFO work list. Links are pushed in
    reverse so they come off in the order the page reported them, which
    finishes each page's subtree before moving to its next sibling.
    """

    def __init__(self, renderer: PageRenderer, fetcher: ImageFetcher, max_depth: int) -> None:
        if max_depth < 1:
            raise ValueError(f"max_depth must be >= 1, got {max_depth}")
        self.renderer = renderer
        self.fetcher = fetcher
        self.max_depth = max_depth
        self.visited: Set[str] = set()
        self.manifest: List[DownloadedImage] = []
        self.stats = CrawlStats()
        self._seen_images: Set[str] = set()

    async def crawl(self, seed_url: str) -> List[DownloadedImage]:
        seed = normalize_url(seed_url)
        if seed is None:
            raise ValueError(f"Invalid start URL: {seed_url}")

        stack: List[PageRef] = [PageRef(seed, 1)]
        while stack:
            ref = stack.pop()
            if ref.depth > self.max_depth or ref.url in self.visited:
                continue
            self.visited.add(ref.url)
            links = await self._process_page(ref)
            for link in reversed(links):
                stack.append(PageRef(link, ref.depth + 1))
        return self.manifest

    async def _process_page(self, ref: PageRef) -> List[str]:
        """Render one page, download its images and return links to follow."""
        logger.info("Crawling: %s (depth %d)", ref.url, ref.depth)
        try:
            page = await self.renderer.open(ref.url)
        except PageLoadError as exc:
            logger.error("%s", exc)
            self.stats.pages_failed += 1
            return []

        try:
            images = await self.renderer.list_images(page)
            logger.info("Found %d images on %s", len(images), ref.url)
            self._download_images(images, ref)

            links: List[str] = []
            if ref.depth < self.max_depth:
                links = self._eligible_links(await self.renderer.list_links(page))
            self.stats.pages_crawled += 1
            return links
        except PageLoadError as exc:
            logger.error("%s", exc)
            self.stats.pages_failed += 1
            return []
        finally:
            await self.renderer.close(page)

    def _download_images(self, images: Sequence[ImageRef], ref: PageRef) -> None:
        self.stats.images_found += len(images)
        for image in images:
            if image.src and image.src in self._seen_images:
                logger.debug("Already downloaded %s, skipping", image.src)
                self.stats.images_skipped += 1
                continue
            try:
                record = self.fetcher.fetch(image, ref.url, ref.depth)
            except ImageFetchError as exc:
                logger.warning("%s", exc)
                self.stats.images_failed += 1
                continue
            if record is None:
                self.stats.images_skipped += 1
                continue
            self._seen_images.add(image.src)
            self.manifest.append(record)
            self.stats.images_downloaded += 1

    def _eligible_links(self, hrefs: Sequence[str]) -> List[str]:
        links: List[str] = []
        for href in hrefs:
            target = normalize_url(href)
            if target is None:
                logger.debug("Dropping non-http link %s", href)
                continue
            if target not in self.visited:
                links.append(target)
        return links


async def run_crawler(start_url: str, config: CrawlConfig) -> CrawlResult:
    """Crawl from ``start_url`` and write the manifest once traversal ends."""
    if normalize_url(start_url) is None:
        raise CrawlSetupError(f"Invalid start URL: {start_url}")
    try:
        config.images_dir.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise CrawlSetupError(
            f"Unable to create images directory {config.images_dir}: {exc}"
        ) from exc

    start = time.perf_counter()
    fetcher = ImageFetcher(
        config.images_dir,
        user_agent=config.user_agent,
        timeout=config.request_timeout,
    )
    try:
        async with PageRenderer(config) as renderer:
            engine = CrawlEngine(renderer, fetcher, config.max_depth)
            images = await engine.crawl(start_url)
    finally:
        fetcher.close()

    stats = engine.stats
    logger.info(
        "Crawling completed in %.2fs: %d pages (%d failed), %d images downloaded, "
        "%d skipped, %d failed",
        time.perf_counter() - start,
        stats.pages_crawled,
        stats.pages_failed,
        stats.images_downloaded,
        stats.images_skipped,
        stats.images_failed,
    )

    manifest_path = write_manifest(images, config.manifest_path)
    return CrawlResult(
        images=images,
        stats=stats,
        manifest_path=manifest_path,
        visited=set(engine.visited),
    )
