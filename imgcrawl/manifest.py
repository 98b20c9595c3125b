"""JSON manifest of downloaded images."""

from __future__ import annotations

import json
import logging
import os
from dataclasses import asdict
from pathlib import Path
from typing import List, Sequence

from .errors import ManifestWriteError
from .models import DownloadedImage

logger = logging.getLogger("imgcrawl")


def write_manifest(images: Sequence[DownloadedImage], path: Path) -> Path:
    """Write ``{"images": [...]}`` to ``path``, replacing any earlier manifest."""
    payload = {"images": [asdict(image) for image in images]}
    tmp_path = path.with_name(path.name + ".tmp")
    try:
        tmp_path.write_text(
            json.dumps(payload, ensure_ascii=False, indent=2) + "\n",
            encoding="utf-8",
        )
        os.replace(tmp_path, path)
    except OSError as exc:
        tmp_path.unlink(missing_ok=True)
        raise ManifestWriteError(f"Failed to write manifest {path}: {exc}") from exc
    logger.info("Saved manifest with %d images to %s", len(images), path)
    return path


def load_manifest(path: Path) -> List[DownloadedImage]:
    """Read a manifest written by :func:`write_manifest`."""
    payload = json.loads(path.read_text(encoding="utf-8"))
    return [DownloadedImage(**entry) for entry in payload.get("images", [])]
