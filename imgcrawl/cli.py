"""Command-line entry point for the image crawler."""

from __future__ import annotations

import argparse
import asyncio
import logging
from pathlib import Path
from typing import Sequence

from .config import CrawlConfig, DEFAULT_USER_AGENT
from .crawler import run_crawler
from .errors import CrawlSetupError, ManifestWriteError

logger = logging.getLogger("imgcrawl.cli")


def _positive_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid depth: {value!r}") from None
    if number < 1:
        raise argparse.ArgumentTypeError(f"depth must be a positive integer, got {number}")
    return number


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Crawl a website with a headless browser and download every image it links to.",
    )
    parser.add_argument("start_url", help="Starting URL for crawling")
    parser.add_argument("depth", type=_positive_int, help="Crawl depth (the start page is depth 1)")
    parser.add_argument(
        "--output",
        default="output",
        type=Path,
        help="Directory where images and index.json should be written",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=60.0,
        help="Navigation timeout in seconds",
    )
    parser.add_argument(
        "--image-wait",
        type=float,
        default=5.0,
        help="Seconds to wait for <img> elements after the page loads",
    )
    parser.add_argument(
        "--request-timeout",
        type=float,
        default=30.0,
        help="Timeout in seconds for each image download",
    )
    parser.add_argument(
        "--user-agent",
        default=DEFAULT_USER_AGENT,
        help="User-Agent used for pages and image requests",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )
    return parser.parse_args(argv)


def main(argv: Sequence[str] | None = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        force=True,
    )

    config = CrawlConfig(
        output_root=Path(args.output).resolve(),
        max_depth=args.depth,
        navigation_timeout=args.timeout,
        image_wait=args.image_wait,
        request_timeout=args.request_timeout,
        user_agent=args.user_agent,
    )

    try:
        result = asyncio.run(run_crawler(args.start_url, config))
    except CrawlSetupError as exc:
        logger.error("Setup failed: %s", exc)
        return 1
    except ManifestWriteError as exc:
        logger.error("%s", exc)
        return 1

    logger.info(
        "Downloaded %d images. Results saved in %s",
        len(result.images),
        result.manifest_path.parent,
    )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
