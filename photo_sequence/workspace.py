"""Per-request working directories and the artifact paths inside them."""

from __future__ import annotations

import re
import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from photo_sequence.errors import ValidationError

MANIFEST_FILENAME = "image_list.txt"
SILENT_VIDEO_FILENAME = "photo_sequence.mp4"
FINAL_VIDEO_FILENAME = "final_video.mp4"
STAGING_DIRNAME = "sources"

_REQUEST_ID_PATTERN = re.compile(r"^[A-Za-z0-9][A-Za-z0-9_.-]*$")


def temporary_sibling(path: Path) -> Path:
    """Return a unique hidden path next to ``path`` for write-then-rename."""
    return path.with_name(f".tmp_{uuid.uuid4().hex}_{path.name}")


@dataclass(frozen=True)
class Workspace:
    """Directory holding one request's manifest, staged sources and videos.

    Paths are fixed for a given directory, so running a stage twice against
    the same workspace overwrites the earlier artifacts.
    """

    root: Path
    request_id: Optional[str] = None

    @classmethod
    def for_request(
        cls,
        base_dir: Path | str,
        request_id: Optional[str] = None,
        *,
        isolate: bool = False,
    ) -> "Workspace":
        if request_id is None and isolate:
            request_id = uuid.uuid4().hex
        if request_id is not None and not _REQUEST_ID_PATTERN.match(request_id):
            raise ValidationError(f"Invalid request id: {request_id!r}")
        return cls(root=Path(base_dir), request_id=request_id)

    @property
    def directory(self) -> Path:
        if self.request_id is None:
            return self.root
        return self.root / self.request_id

    @property
    def manifest_path(self) -> Path:
        return self.directory / MANIFEST_FILENAME

    @property
    def silent_video_path(self) -> Path:
        return self.directory / SILENT_VIDEO_FILENAME

    @property
    def final_video_path(self) -> Path:
        return self.directory / FINAL_VIDEO_FILENAME

    @property
    def staging_dir(self) -> Path:
        return self.directory / STAGING_DIRNAME

    def ensure(self) -> Path:
        self.directory.mkdir(parents=True, exist_ok=True)
        return self.directory


__all__ = [
    "FINAL_VIDEO_FILENAME",
    "MANIFEST_FILENAME",
    "SILENT_VIDEO_FILENAME",
    "Workspace",
    "temporary_sibling",
]
