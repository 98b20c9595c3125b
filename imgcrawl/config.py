"""Configuration objects and constants for the crawler."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/91.0.4472.124 Safari/537.36"
)
IMAGES_DIRNAME = "images"
MANIFEST_FILENAME = "index.json"


@dataclass
class CrawlConfig:
    """Top-level settings that control crawling and image downloads."""

    output_root: Path
    max_depth: int = 1
    navigation_timeout: float = 60.0
    image_wait: float = 5.0
    request_timeout: float = 30.0
    user_agent: str = DEFAULT_USER_AGENT
    headless: bool = True

    @property
    def images_dir(self) -> Path:
        return self.output_root / IMAGES_DIRNAME

    @property
    def manifest_path(self) -> Path:
        return self.images_dir / MANIFEST_FILENAME
