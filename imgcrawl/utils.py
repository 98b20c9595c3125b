"""Utility helpers for URL normalization."""

from __future__ import annotations

from typing import Optional
from urllib.parse import urldefrag, urlparse, urlunparse

HTTP_SCHEMES = ("http", "https")


def is_http_url(url: Optional[str]) -> bool:
    """Return True when ``url`` is an absolute http(s) URL with a host."""
    if not url:
        return False
    parsed = urlparse(url.strip())
    return parsed.scheme.lower() in HTTP_SCHEMES and bool(parsed.netloc)


def normalize_url(url: Optional[str]) -> Optional[str]:
    """
    Normalize an absolute URL for visited-set comparison.

    - Drops fragments (#...)
    - Lowercases scheme and host
    - Removes default ports (:80, :443)
    - Keeps querystrings

    Returns None for anything that is not an absolute http(s) URL.
    """
    if not is_http_url(url):
        return None

    joined, _ = urldefrag(url.strip())
    parsed = urlparse(joined)
    scheme = parsed.scheme.lower()

    hostname = (parsed.hostname or "").lower()
    if ":" in hostname:
        hostname = f"[{hostname}]"
    try:
        port = parsed.port
    except ValueError:
        return None

    if (scheme == "http" and port == 80) or (scheme == "https" and port == 443):
        netloc = hostname
    elif port:
        netloc = f"{hostname}:{port}"
    else:
        netloc = hostname
    if parsed.username or parsed.password:
        credentials = parsed.username or ""
        if parsed.password:
            credentials += f":{parsed.password}"
        netloc = f"{credentials}@{netloc}"

    return urlunparse((
        scheme,
        netloc,
        parsed.path or "/",
        parsed.params,
        parsed.query,
        "",
    ))
