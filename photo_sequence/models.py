"""Data models used across the photo sequence pipeline."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union
from urllib.parse import unquote, urlparse

REMOTE_SCHEMES = ("http", "https")


def is_remote_uri(uri: str) -> bool:
    return urlparse(uri).scheme.lower() in REMOTE_SCHEMES


def uri_to_path(uri: str) -> Path:
    """Map a plain path or file:// URI to a filesystem path."""
    if is_remote_uri(uri):
        raise ValueError(f"Location is remote: {uri}")
    parsed = urlparse(uri)
    if parsed.scheme.lower() == "file":
        return Path(unquote(parsed.path))
    return Path(uri)


@dataclass(frozen=True)
class ImageSource:
    """Location reference for one selected photo."""

    uri: str

    @property
    def is_remote(self) -> bool:
        return is_remote_uri(self.uri)

    def local_path(self) -> Path:
        return uri_to_path(self.uri)


@dataclass(frozen=True)
class FrameSize:
    """Width and height of the output canvas in pixels."""

    width: int
    height: int

    @property
    def aspect_ratio(self) -> float:
        return self.height / self.width


@dataclass(frozen=True)
class CompositionOptions:
    """Style and format options for the silent photo sequence.

    ``None`` means "unset"; defaults are resolved by the composer so the same
    options object can be reused with differently configured composers.
    """

    scale: Optional[FrameSize] = None
    zoom_effect: Optional[bool] = None
    fade_effect: Optional[bool] = None
    frame_duration: Optional[float] = None


@dataclass(frozen=True)
class MixSpec:
    """Inputs for the audio mixing stage."""

    video_path: Path
    audio_track: str
    volume: Optional[float] = None


@dataclass(frozen=True)
class ProcessingResult:
    """Outcome of a single engine-backed stage."""

    success: bool
    output_path: Optional[Path]
    diagnostics: str = ""

    @classmethod
    def succeeded(cls, output_path: Union[str, Path], diagnostics: str = "") -> "ProcessingResult":
        return cls(success=True, output_path=Path(output_path), diagnostics=diagnostics)

    @classmethod
    def failed(cls, diagnostics: str) -> "ProcessingResult":
        return cls(success=False, output_path=None, diagnostics=diagnostics)


@dataclass(frozen=True)
class EngineResult:
    """Exit status and captured log output of one engine run."""

    exit_status: int
    diagnostics: str
    timed_out: bool = False

    @property
    def ok(self) -> bool:
        return self.exit_status == 0 and not self.timed_out


__all__ = [
    "CompositionOptions",
    "EngineResult",
    "FrameSize",
    "ImageSource",
    "MixSpec",
    "ProcessingResult",
    "is_remote_uri",
    "uri_to_path",
]
