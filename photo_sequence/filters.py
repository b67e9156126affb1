"""Typed ffmpeg filter-graph stages and their serialization."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple, Union

from photo_sequence.models import FrameSize

# Zoom ramp and fades share one effect window measured in output frames.
EFFECT_WINDOW_FRAMES = 50
ZOOM_STEP = 0.05
MAX_ZOOM = 1.5
FADE_SECONDS = 1
FADE_OUT_START = EFFECT_WINDOW_FRAMES - FADE_SECONDS


def format_number(value: Union[int, float]) -> str:
    """Render a number for the filter mini-language, independent of locale."""
    if isinstance(value, bool):
        raise TypeError("Booleans are not valid filter parameters")
    if isinstance(value, int):
        return str(value)
    number = float(value)
    if number.is_integer():
        return str(int(number))
    return repr(number)


@dataclass(frozen=True)
class ScaleStage:
    """Fit the frame inside the canvas, keeping its aspect ratio."""

    width: int
    height: int

    name = "scale"

    def serialize(self) -> str:
        return f"scale={self.width}:{self.height}:force_original_aspect_ratio=decrease"


@dataclass(frozen=True)
class PadStage:
    """Letterbox the scaled frame to exactly fill the canvas, centered."""

    width: int
    height: int

    name = "pad"

    def serialize(self) -> str:
        return f"pad={self.width}:{self.height}:(ow-iw)/2:(oh-ih)/2"


@dataclass(frozen=True)
class ZoomPanStage:
    """Continuous zoom from 1.0 toward ``max_zoom`` over ``frames`` output frames."""

    step: float = ZOOM_STEP
    max_zoom: float = MAX_ZOOM
    frames: int = EFFECT_WINDOW_FRAMES

    name = "zoompan"

    def serialize(self) -> str:
        expression = f"min(zoom+{format_number(self.step)},{format_number(self.max_zoom)})"
        return f"zoompan=z='{expression}':d={self.frames}"


@dataclass(frozen=True)
class FadeStage:
    direction: str
    start: Union[int, float]
    duration: Union[int, float] = FADE_SECONDS

    name = "fade"

    def __post_init__(self) -> None:
        if self.direction not in ("in", "out"):
            raise ValueError(f"Unknown fade direction: {self.direction!r}")

    def serialize(self) -> str:
        return (
            f"fade=t={self.direction}:st={format_number(self.start)}"
            f":d={format_number(self.duration)}"
        )


VideoStage = Union[ScaleStage, PadStage, ZoomPanStage, FadeStage]


@dataclass(frozen=True)
class VideoFilterChain:
    """Simple (``-vf``) filter chain with one slot per stage.

    Stages are always emitted as scale, pad, zoompan, fade-in, fade-out; the
    optional slots are skipped when empty.
    """

    scale: ScaleStage
    pad: PadStage
    zoom: Optional[ZoomPanStage] = None
    fade_in: Optional[FadeStage] = None
    fade_out: Optional[FadeStage] = None

    option = "-vf"

    def __post_init__(self) -> None:
        if self.fade_in is not None and self.fade_in.direction != "in":
            raise ValueError("fade_in slot requires an 'in' fade")
        if self.fade_out is not None and self.fade_out.direction != "out":
            raise ValueError("fade_out slot requires an 'out' fade")

    @property
    def canvas(self) -> FrameSize:
        return FrameSize(self.pad.width, self.pad.height)

    def stages(self) -> Tuple[VideoStage, ...]:
        ordered = (self.scale, self.pad, self.zoom, self.fade_in, self.fade_out)
        return tuple(stage for stage in ordered if stage is not None)

    def stage_names(self) -> Tuple[str, ...]:
        return tuple(stage.name for stage in self.stages())

    def serialize(self) -> str:
        return ",".join(stage.serialize() for stage in self.stages())


@dataclass(frozen=True)
class AudioMixGraph:
    """Complex (``-filter_complex``) graph mixing two audio inputs into one label."""

    weights: Tuple[Union[int, float], ...]
    input_labels: Tuple[str, ...] = ("0:a", "1:a")
    duration: str = "first"
    output_label: str = "a"

    option = "-filter_complex"

    def __post_init__(self) -> None:
        if len(self.weights) != len(self.input_labels):
            raise ValueError("amix needs one weight per input")

    @property
    def output_map(self) -> str:
        return f"[{self.output_label}]"

    def serialize(self) -> str:
        labels = "".join(f"[{label}]" for label in self.input_labels)
        weights = " ".join(format_number(weight) for weight in self.weights)
        return (
            f"{labels}amix=inputs={len(self.input_labels)}"
            f":duration={self.duration}:weights={weights}"
            f"[{self.output_label}]"
        )


FilterGraph = Union[VideoFilterChain, AudioMixGraph]


def build_video_filter_chain(
    canvas: FrameSize,
    *,
    zoom_effect: bool = True,
    fade_effect: bool = True,
) -> VideoFilterChain:
    """Assemble the photo-sequence chain for the given canvas and effect flags."""
    return VideoFilterChain(
        scale=ScaleStage(canvas.width, canvas.height),
        pad=PadStage(canvas.width, canvas.height),
        zoom=ZoomPanStage() if zoom_effect else None,
        fade_in=FadeStage("in", 0) if fade_effect else None,
        fade_out=FadeStage("out", FADE_OUT_START) if fade_effect else None,
    )


def build_audio_mix_graph(volume: float) -> AudioMixGraph:
    """Mix the video's own audio at full weight with the music at ``volume``."""
    return AudioMixGraph(weights=(1, volume))


__all__ = [
    "AudioMixGraph",
    "EFFECT_WINDOW_FRAMES",
    "FADE_OUT_START",
    "FADE_SECONDS",
    "FadeStage",
    "FilterGraph",
    "MAX_ZOOM",
    "PadStage",
    "ScaleStage",
    "VideoFilterChain",
    "ZOOM_STEP",
    "ZoomPanStage",
    "build_audio_mix_graph",
    "build_video_filter_chain",
    "format_number",
]
