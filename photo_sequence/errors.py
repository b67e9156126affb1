"""Exception types raised by the photo sequence pipeline."""

from __future__ import annotations

from typing import Optional

from photo_sequence.models import ProcessingResult


class SlideshowError(RuntimeError):
    """Base class for all pipeline failures."""


class ValidationError(SlideshowError, ValueError):
    """Raised when caller input is rejected before any work is done."""


class ProcessingError(SlideshowError):
    """Raised when the engine or the filesystem fails during a stage."""

    def __init__(self, message: str, diagnostics: str = "", *, stage: Optional[str] = None) -> None:
        super().__init__(message)
        self.diagnostics = diagnostics or message
        self.stage = stage
        self.result = ProcessingResult.failed(self.diagnostics)


class EngineUnavailableError(ProcessingError):
    """Raised when the ffmpeg binary cannot be located."""


class SourceError(ProcessingError):
    """Raised when an image source cannot be read or fetched."""


__all__ = [
    "EngineUnavailableError",
    "ProcessingError",
    "SlideshowError",
    "SourceError",
    "ValidationError",
]
