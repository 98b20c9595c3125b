"""
Shared fixtures: an in-memory page renderer and canned HTTP responses.
"""

from typing import Dict, List, Optional, Union
from unittest.mock import MagicMock

import pytest
import requests
from requests.structures import CaseInsensitiveDict

from imgcrawl.errors import PageLoadError
from imgcrawl.models import ImageRef


PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 64
JPEG_BYTES = b"\xff\xd8\xff\xe0" + b"jpeg-body" * 8


def make_response(
    status: int = 200,
    content: bytes = JPEG_BYTES,
    content_type: Optional[str] = "image/jpeg",
    url: str = "https://example.com/image",
) -> requests.Response:
    resp = requests.Response()
    resp.status_code = status
    resp._content = content
    resp.url = url
    resp.headers = CaseInsensitiveDict()
    if content_type is not None:
        resp.headers["Content-Type"] = content_type
    return resp


def make_session(responses: Dict[str, Union[requests.Response, Exception]]) -> MagicMock:
    """Mock session whose ``get`` answers from ``responses`` by URL."""
    session = MagicMock(spec=requests.Session)

    def _get(url, headers=None, timeout=None):
        outcome = responses.get(url)
        if outcome is None:
            return make_response(status=404, content=b"not found", content_type="text/html", url=url)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    session.get.side_effect = _get
    return session


class FakePage:
    def __init__(self, url: str):
        self.url = url


class FakeRenderer:
    """Renderer double serving a fixed site graph.

    ``site`` maps a URL to ``(images, links)`` or to an exception raised by
    ``open``. Unknown URLs fail to load. ``query_errors`` maps a URL to
    ``{"list_images" | "list_links": exception}`` for queries that fail after
    the page opened.
    """

    def __init__(self, site, query_errors=None):
        self.site = site
        self.query_errors = query_errors or {}
        self.opened: List[str] = []
        self.closed: List[str] = []
        self.entered = False
        self.exited = False

    async def __aenter__(self):
        self.entered = True
        return self

    async def __aexit__(self, exc_type, exc, tb):
        self.exited = True

    async def open(self, url: str) -> FakePage:
        self.opened.append(url)
        entry = self.site.get(url)
        if entry is None:
            raise PageLoadError(f"Failed to load page {url}: net::ERR_NAME_NOT_RESOLVED")
        if isinstance(entry, Exception):
            raise entry
        return FakePage(url)

    async def list_images(self, page: FakePage) -> List[ImageRef]:
        self._maybe_fail(page, "list_images")
        images, _ = self.site[page.url]
        return [image if isinstance(image, ImageRef) else ImageRef(src=image) for image in images]

    async def list_links(self, page: FakePage) -> List[str]:
        self._maybe_fail(page, "list_links")
        _, links = self.site[page.url]
        return list(links)

    async def close(self, page: FakePage) -> None:
        self.closed.append(page.url)

    def _maybe_fail(self, page: FakePage, query: str) -> None:
        error = self.query_errors.get(page.url, {}).get(query)
        if error is not None:
            raise error


@pytest.fixture
def images_dir(tmp_path):
    path = tmp_path / "images"
    path.mkdir()
    return path
