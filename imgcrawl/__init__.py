"""Depth-bounded website crawler that downloads every image it finds."""

from .config import CrawlConfig
from .crawler import CrawlEngine, CrawlResult, run_crawler
from .models import DownloadedImage, ImageRef, PageRef

__version__ = "0.1.0"
__all__ = [
    "CrawlConfig",
    "CrawlEngine",
    "CrawlResult",
    "DownloadedImage",
    "ImageRef",
    "PageRef",
    "run_crawler",
]
