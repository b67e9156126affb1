"""Configuration dataclasses and loading helpers for the photo sequence pipeline."""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping, Optional

DEFAULT_WORK_DIR = Path("output")
DEFAULT_CANVAS_WIDTH = 1280
DEFAULT_FRAME_DURATION = 3.0
DEFAULT_MUSIC_VOLUME = 0.5
DEFAULT_FFMPEG_TIMEOUT = 600.0


def _parse_bool(value: Any, default: bool) -> bool:
    """Parse truthy/falsy values from multiple input types."""
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return value.strip().lower() in {"1", "true", "yes", "on"}
    if isinstance(value, (int, float)):
        return value != 0
    return default


def _parse_positive_int(value: Any, default: int) -> int:
    """Parse a positive integer with fallback to default."""
    try:
        parsed = int(value)
    except (TypeError, ValueError):
        return default
    return parsed if parsed > 0 else default


def _parse_positive_float(value: Any, default: float) -> float:
    """Parse a strictly positive float with fallback to default."""
    try:
        parsed = float(value)
    except (TypeError, ValueError):
        return default
    return parsed if parsed > 0 else default


def _parse_unit_float(value: Any, default: float) -> float:
    """Parse a float in [0, 1] with fallback to default."""
    try:
        parsed = float(value)
    except (TypeError, ValueError):
        return default
    return parsed if 0.0 <= parsed <= 1.0 else default


def _parse_optional_path(value: Any) -> Optional[Path]:
    if value is None or value == "":
        return None
    return Path(str(value))


@dataclass(frozen=True)
class EncodingSettings:
    """Codec parameters passed to ffmpeg for both stages."""

    video_codec: str = "libx264"
    preset: str = "medium"
    crf: int = 23
    pixel_format: str = "yuv420p"
    audio_codec: str = "aac"


@dataclass(frozen=True)
class Settings:
    """Top-level configuration for composing and mixing slideshow videos."""

    work_dir: Path = DEFAULT_WORK_DIR
    ffmpeg_binary: str = "ffmpeg"
    ffmpeg_timeout_seconds: float = DEFAULT_FFMPEG_TIMEOUT
    default_width: int = DEFAULT_CANVAS_WIDTH
    frame_duration: float = DEFAULT_FRAME_DURATION
    zoom_effect: bool = True
    fade_effect: bool = True
    music_volume: float = DEFAULT_MUSIC_VOLUME
    isolate_requests: bool = False
    http_timeout: int = 10
    log_file: Optional[Path] = None
    encoding: EncodingSettings = field(default_factory=EncodingSettings)


def _parse_encoding_settings(raw: Any) -> EncodingSettings:
    default = EncodingSettings()
    if not isinstance(raw, Mapping):
        return default
    return EncodingSettings(
        video_codec=str(raw.get("video_codec") or default.video_codec),
        preset=str(raw.get("preset") or default.preset),
        crf=_parse_positive_int(raw.get("crf"), default.crf),
        pixel_format=str(raw.get("pixel_format") or default.pixel_format),
        audio_codec=str(raw.get("audio_codec") or default.audio_codec),
    )


def _parse_settings(data: Mapping[str, Any]) -> Settings:
    default = Settings()
    return Settings(
        work_dir=Path(data.get("work_dir") or default.work_dir),
        ffmpeg_binary=str(data.get("ffmpeg_binary") or default.ffmpeg_binary),
        ffmpeg_timeout_seconds=_parse_positive_float(
            data.get("ffmpeg_timeout_seconds"),
            default.ffmpeg_timeout_seconds,
        ),
        default_width=_parse_positive_int(data.get("default_width"), default.default_width),
        frame_duration=_parse_positive_float(data.get("frame_duration"), default.frame_duration),
        zoom_effect=_parse_bool(data.get("zoom_effect"), default.zoom_effect),
        fade_effect=_parse_bool(data.get("fade_effect"), default.fade_effect),
        music_volume=_parse_unit_float(data.get("music_volume"), default.music_volume),
        isolate_requests=_parse_bool(data.get("isolate_requests"), default.isolate_requests),
        http_timeout=_parse_positive_int(data.get("http_timeout"), default.http_timeout),
        log_file=_parse_optional_path(data.get("log_file")),
        encoding=_parse_encoding_settings(data.get("encoding", {})),
    )


def _load_env_settings(env: Mapping[str, str]) -> Settings:
    """Fallback configuration derived from environment variables."""
    return _parse_settings({
        "work_dir": env.get("PHOTO_SEQUENCE_WORK_DIR"),
        "ffmpeg_binary": env.get("FFMPEG_BINARY"),
        "ffmpeg_timeout_seconds": env.get("FFMPEG_TIMEOUT"),
        "default_width": env.get("DEFAULT_WIDTH"),
        "frame_duration": env.get("FRAME_DURATION"),
        "zoom_effect": env.get("ZOOM_EFFECT", "true"),
        "fade_effect": env.get("FADE_EFFECT", "true"),
        "music_volume": env.get("MUSIC_VOLUME"),
        "isolate_requests": env.get("ISOLATE_REQUESTS", "false"),
        "http_timeout": env.get("HTTP_TIMEOUT"),
        "log_file": env.get("PHOTO_SEQUENCE_LOG_FILE"),
        "encoding": {
            "video_codec": env.get("VIDEO_CODEC"),
            "preset": env.get("VIDEO_PRESET"),
            "crf": env.get("VIDEO_CRF"),
            "pixel_format": env.get("PIXEL_FORMAT"),
            "audio_codec": env.get("AUDIO_CODEC"),
        },
    })


def load_config(config_path: Path | str | None, env: Mapping[str, str] | None = None) -> Settings:
    """Load settings from a JSON file, or from the environment when it is missing."""
    source_env = os.environ if env is None else env

    if config_path is not None:
        path = Path(config_path)
        if path.exists():
            with path.open("r", encoding="utf-8") as handle:
                data = json.load(handle)
            if not isinstance(data, Mapping):
                data = {}
            return _parse_settings(data)

    return _load_env_settings(source_env)


__all__ = [
    "EncodingSettings",
    "Settings",
    "load_config",
    "_parse_bool",
    "_parse_positive_int",
]
