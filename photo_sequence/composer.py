"""Sequence composer: ordered photos to a silent pan/zoom slideshow video."""

from __future__ import annotations

import logging
import math
from pathlib import Path
from typing import Callable, List, Optional, Sequence, Union

from photo_sequence.config import (
    DEFAULT_CANVAS_WIDTH,
    DEFAULT_FRAME_DURATION,
    EncodingSettings,
    Settings,
)
from photo_sequence.engine import Engine, EngineInput
from photo_sequence.errors import ProcessingError, ValidationError
from photo_sequence.filters import VideoFilterChain, build_video_filter_chain, format_number
from photo_sequence.manifests import write_manifest
from photo_sequence.models import CompositionOptions, FrameSize, ImageSource, ProcessingResult
from photo_sequence.rendering import run_stage
from photo_sequence.sources import SourceResolver, read_image_dimensions
from photo_sequence.workspace import Workspace

MIN_IMAGES = 2

ImageLike = Union[ImageSource, str, Path]


def as_image_sources(images: Sequence[ImageLike]) -> List[ImageSource]:
    return [image if isinstance(image, ImageSource) else ImageSource(str(image)) for image in images]


def derive_canvas(first_image: FrameSize, width: int = DEFAULT_CANVAS_WIDTH) -> FrameSize:
    """Fixed-width canvas whose height follows the first image's aspect ratio."""
    if first_image.width <= 0 or first_image.height <= 0:
        raise ValidationError(f"Invalid image dimensions: {first_image.width}x{first_image.height}")
    height = math.floor(width * first_image.height / first_image.width + 0.5)
    return FrameSize(width=width, height=max(1, height))


def _is_number(value: object) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def validate_composition(images: Sequence[ImageSource], options: CompositionOptions) -> None:
    """Reject inputs the engine cannot handle, before anything touches disk."""
    if len(images) < MIN_IMAGES:
        raise ValidationError(f"Select at least {MIN_IMAGES} images (got {len(images)})")

    if options.frame_duration is not None:
        duration = options.frame_duration
        if not _is_number(duration) or not math.isfinite(duration) or duration <= 0:
            raise ValidationError(f"frame_duration must be a positive number, got {duration!r}")

    if options.scale is not None:
        width, height = options.scale.width, options.scale.height
        if not all(isinstance(value, int) and not isinstance(value, bool) for value in (width, height)):
            raise ValidationError(f"scale must use integer dimensions, got {width!r}x{height!r}")
        if width <= 0 or height <= 0:
            raise ValidationError(f"scale must be positive, got {width}x{height}")


class SequenceComposer:
    """Build the photo-sequence filter chain and encode a silent video."""

    def __init__(
        self,
        engine: Engine,
        workspace: Workspace,
        *,
        logger: Optional[logging.Logger] = None,
        resolver: Optional[SourceResolver] = None,
        probe: Callable[[Path], FrameSize] = read_image_dimensions,
        default_width: int = DEFAULT_CANVAS_WIDTH,
        frame_duration: float = DEFAULT_FRAME_DURATION,
        zoom_effect: bool = True,
        fade_effect: bool = True,
        encoding: Optional[EncodingSettings] = None,
    ) -> None:
        self.engine = engine
        self.workspace = workspace
        self.logger = logger or logging.getLogger("photo_sequence")
        self.resolver = resolver or SourceResolver(self.logger)
        self.probe = probe
        self.default_width = default_width
        self.frame_duration = frame_duration
        self.zoom_effect = zoom_effect
        self.fade_effect = fade_effect
        self.encoding = encoding or EncodingSettings()

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        engine: Engine,
        workspace: Workspace,
        *,
        logger: Optional[logging.Logger] = None,
    ) -> "SequenceComposer":
        logger = logger or logging.getLogger("photo_sequence")
        return cls(
            engine,
            workspace,
            logger=logger,
            resolver=SourceResolver(logger, http_timeout=settings.http_timeout),
            default_width=settings.default_width,
            frame_duration=settings.frame_duration,
            zoom_effect=settings.zoom_effect,
            fade_effect=settings.fade_effect,
            encoding=settings.encoding,
        )

    # ------------------------------------------------------------------
    # Command construction
    # ------------------------------------------------------------------

    def resolve_canvas(self, options: CompositionOptions, first_image: Path) -> FrameSize:
        if options.scale is not None:
            return options.scale
        return derive_canvas(self.probe(first_image), self.default_width)

    def build_filter_chain(self, canvas: FrameSize, options: CompositionOptions) -> VideoFilterChain:
        zoom = self.zoom_effect if options.zoom_effect is None else options.zoom_effect
        fade = self.fade_effect if options.fade_effect is None else options.fade_effect
        return build_video_filter_chain(canvas, zoom_effect=zoom, fade_effect=fade)

    def output_options(self, frame_duration: float) -> List[str]:
        encoding = self.encoding
        return [
            "-r",
            f"1/{format_number(frame_duration)}",
            "-c:v",
            encoding.video_codec,
            "-preset",
            encoding.preset,
            "-crf",
            str(encoding.crf),
            "-pix_fmt",
            encoding.pixel_format,
        ]

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def compose(
        self,
        images: Sequence[ImageLike],
        options: Optional[CompositionOptions] = None,
    ) -> ProcessingResult:
        """Encode ``images`` in order into the workspace's silent video."""
        options = options or CompositionOptions()
        sources = as_image_sources(images)
        validate_composition(sources, options)
        frame_duration = options.frame_duration or self.frame_duration

        try:
            self.workspace.ensure()
            local_paths = self.resolver.resolve(sources, self.workspace.staging_dir)
            manifest_path = write_manifest(self.workspace.manifest_path, local_paths)
        except OSError as exc:
            self.logger.error("Failed to prepare photo sequence inputs: %s", exc)
            raise ProcessingError(
                "Failed to prepare photo sequence inputs",
                str(exc),
                stage="compose",
            ) from exc

        canvas = self.resolve_canvas(options, local_paths[0])
        chain = self.build_filter_chain(canvas, options)
        output_path = self.workspace.silent_video_path

        self.logger.info(
            "Composing %s images into %s (%sx%s, stages: %s, %ss per image)",
            len(sources),
            output_path,
            canvas.width,
            canvas.height,
            " -> ".join(chain.stage_names()),
            format_number(frame_duration),
        )

        return run_stage(
            self.engine,
            chain,
            [EngineInput.concat_manifest(manifest_path)],
            output_path,
            output_options=self.output_options(frame_duration),
            stage="compose",
            logger=self.logger,
        )


__all__ = [
    "MIN_IMAGES",
    "SequenceComposer",
    "as_image_sources",
    "derive_canvas",
    "validate_composition",
]
