"""Exception types raised by the crawler."""

from __future__ import annotations


class ImageCrawlerError(Exception):
    """Base class for crawler errors."""


class CrawlSetupError(ImageCrawlerError):
    """The run cannot start: bad seed URL, output directory or browser launch."""


class PageLoadError(ImageCrawlerError):
    """A page could not be rendered or queried."""


class ImageFetchError(ImageCrawlerError):
    """An image could not be fetched or stored."""


class ManifestWriteError(ImageCrawlerError):
    """The manifest could not be written."""
