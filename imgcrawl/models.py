"""Data models used throughout the crawler pipeline."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping


@dataclass(frozen=True)
class PageRef:
    """A page waiting on the crawl work list."""

    url: str
    depth: int


@dataclass(frozen=True)
class ImageRef:
    """Image element as reported by the rendered page."""

    src: str
    alt: str = ""
    width: int = 0
    height: int = 0

    @classmethod
    def from_dom(cls, data: Mapping[str, Any]) -> "ImageRef":
        """Build a reference from the object returned by ``page.evaluate``."""
        return cls(
            src=str(data.get("src") or ""),
            alt=str(data.get("alt") or ""),
            width=_as_int(data.get("width")),
            height=_as_int(data.get("height")),
        )


@dataclass(frozen=True)
class DownloadedImage:
    """Downloaded and validated image stored on disk."""

    url: str
    page: str
    depth: int
    filename: str
    alt: str
    width: int
    height: int


@dataclass
class CrawlStats:
    """Counters collected during a crawl for progress and summary output."""

    pages_crawled: int = 0
    pages_failed: int = 0
    images_found: int = 0
    images_downloaded: int = 0
    images_skipped: int = 0
    images_failed: int = 0


def _as_int(value: Any) -> int:
    try:
        return int(value or 0)
    except (TypeError, ValueError):
        return 0
