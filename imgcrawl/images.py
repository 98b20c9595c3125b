"""Image downloading and validation utilities."""

from __future__ import annotations

import logging
import random
import re
import time
from pathlib import Path
from typing import Optional, Set

import requests
from filetype import guess

from .config import DEFAULT_USER_AGENT
from .errors import ImageFetchError
from .models import DownloadedImage, ImageRef
from .utils import is_http_url

logger = logging.getLogger("imgcrawl")

FALLBACK_EXTENSION = "img"
SUBTYPE_ALIASES = {"x-icon": "ico", "vnd.microsoft.icon": "ico", "pjpeg": "jpeg"}
_SAFE_EXTENSION = re.compile(r"^[a-z0-9]{1,10}$")


def is_image_content_type(content_type: Optional[str]) -> bool:
    return bool(content_type) and content_type.strip().lower().startswith("image/")


def detect_image_format(data: bytes) -> Optional[str]:
    """Detect image type using filetype; returns lowercase extension."""
    kind = guess(data)
    if kind and kind.mime.startswith("image/"):
        return kind.extension.lower()
    return None


def infer_image_extension(content_type: str, data: bytes) -> str:
    """Derive a file extension from the content-type subtype.

    ``image/png`` gives ``png``, ``image/svg+xml`` gives ``svg``. Subtypes that
    do not make a sane extension fall back to sniffing the file signature.
    """
    subtype = content_type.split(";")[0].split("/", 1)[-1].strip().lower()
    subtype = SUBTYPE_ALIASES.get(subtype, subtype)
    subtype = subtype.split("+")[0]
    if _SAFE_EXTENSION.match(subtype):
        return subtype
    return detect_image_format(data) or FALLBACK_EXTENSION


class ImageFetcher:
    """Fetches image URLs and persists validated responses to ``images_dir``."""

    def __init__(
        self,
        images_dir: Path,
        user_agent: str = DEFAULT_USER_AGENT,
        timeout: float = 30.0,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.images_dir = images_dir
        self.user_agent = user_agent
        self.timeout = timeout
        self.session = session or requests.Session()
        self._issued: Set[str] = set()

    def close(self) -> None:
        self.session.close()

    def generate_filename(self, extension: str) -> str:
        """Return ``<epoch-millis>-<rand>.<ext>``, unique within this fetcher."""
        while True:
            filename = f"{int(time.time() * 1000)}-{random.randint(0, 999)}.{extension}"
            if filename not in self._issued and not (self.images_dir / filename).exists():
                self._issued.add(filename)
                return filename

    def fetch(self, image: ImageRef, page_url: str, depth: int) -> Optional[DownloadedImage]:
        """Download one image referenced from ``page_url``.

        Returns the stored record, or None when the image is skipped. Network
        failures, non-2xx responses and write errors raise ImageFetchError.
        """
        if not is_http_url(image.src):
            logger.info("Skipping invalid image URL: %r", image.src)
            return None

        headers = {"User-Agent": self.user_agent, "Referer": page_url}
        try:
            resp = self.session.get(image.src, headers=headers, timeout=self.timeout)
            resp.raise_for_status()
        except requests.RequestException as exc:
            raise ImageFetchError(f"Failed to download image {image.src}: {exc}") from exc
        if not 200 <= resp.status_code < 300:
            raise ImageFetchError(
                f"Failed to download image {image.src}: HTTP {resp.status_code}"
            )

        content_type = resp.headers.get("Content-Type", "")
        if not is_image_content_type(content_type):
            logger.info(
                "Skipping non-image content: %s (Content-Type=%s)",
                image.src,
                content_type or "missing",
            )
            return None

        data = resp.content
        if not data:
            logger.info("Skipping empty response: %s", image.src)
            return None

        filename = self.generate_filename(infer_image_extension(content_type, data))
        destination = self.images_dir / filename
        try:
            destination.write_bytes(data)
        except OSError as exc:
            raise ImageFetchError(f"Failed to write image {destination}: {exc}") from exc

        logger.info("Downloaded: %s", filename)
        return DownloadedImage(
            url=image.src,
            page=page_url,
            depth=depth,
            filename=filename,
            alt=image.alt,
            width=image.width,
            height=image.height,
        )
