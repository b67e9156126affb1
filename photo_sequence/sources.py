"""Image source resolution, remote staging and dimension probing."""

from __future__ import annotations

import logging
from pathlib import Path, PurePosixPath
from typing import List, Optional, Sequence
from urllib.parse import urlparse

import cv2
import numpy as np
import requests

from photo_sequence.errors import SourceError
from photo_sequence.models import FrameSize, ImageSource
from photo_sequence.workspace import temporary_sibling

DEFAULT_REMOTE_SUFFIX = ".jpg"


def read_image_dimensions(path: Path) -> FrameSize:
    """Decode ``path`` and return its pixel dimensions."""
    try:
        # np.fromfile + imdecode copes with non-ASCII paths where cv2.imread does not.
        data = np.fromfile(str(path), dtype=np.uint8)
    except OSError as exc:
        raise SourceError(f"Failed to read image {path}: {exc}") from exc

    image = cv2.imdecode(data, cv2.IMREAD_UNCHANGED) if data.size else None
    if image is None:
        raise SourceError(f"Failed to decode image {path}")

    height, width = image.shape[:2]
    return FrameSize(width=int(width), height=int(height))


class SourceResolver:
    """Turn image references into local files ffmpeg can read."""

    def __init__(
        self,
        logger: logging.Logger,
        *,
        http_timeout: int = 10,
        session: Optional[requests.Session] = None,
        chunk_size: int = 1024 * 1024,
    ) -> None:
        self.logger = logger
        self.http_timeout = http_timeout
        self.session = session
        self.chunk_size = chunk_size

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def resolve(self, images: Sequence[ImageSource], staging_dir: Path) -> List[Path]:
        """Return one local path per image, preserving input order."""
        resolved: List[Path] = []
        for index, source in enumerate(images):
            if source.is_remote:
                resolved.append(self.fetch(source, self._staging_path(source, index, staging_dir)))
                continue

            path = source.local_path()
            if not path.is_file():
                raise SourceError(f"Image source not found: {source.uri}")
            resolved.append(path.resolve())
        return resolved

    def fetch(self, source: ImageSource, destination: Path) -> Path:
        """Download a remote image to ``destination``."""
        destination.parent.mkdir(parents=True, exist_ok=True)
        temp_path = temporary_sibling(destination)
        session = self.session or requests.Session()

        self.logger.info("Fetching remote image %s", source.uri)
        try:
            with session.get(source.uri, stream=True, timeout=self.http_timeout) as response:
                response.raise_for_status()
                with temp_path.open("wb") as handle:
                    for chunk in response.iter_content(chunk_size=self.chunk_size):
                        if chunk:
                            handle.write(chunk)
            temp_path.replace(destination)
        except (requests.RequestException, OSError) as exc:
            raise SourceError(f"Failed to fetch image {source.uri}: {exc}") from exc
        finally:
            if temp_path.exists():
                temp_path.unlink()

        return destination.resolve()

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _staging_path(source: ImageSource, index: int, staging_dir: Path) -> Path:
        suffix = PurePosixPath(urlparse(source.uri).path).suffix.lower() or DEFAULT_REMOTE_SUFFIX
        return staging_dir / f"image_{index:04d}{suffix}"


__all__ = ["SourceResolver", "read_image_dimensions"]
