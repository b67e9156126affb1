"""Audio mixer: lay a background track under the silent photo sequence."""

from __future__ import annotations

import logging
import math
from pathlib import Path
from typing import List, Optional, Union

from photo_sequence.config import DEFAULT_MUSIC_VOLUME, EncodingSettings, Settings
from photo_sequence.engine import Engine, EngineInput
from photo_sequence.errors import SourceError, ValidationError
from photo_sequence.filters import AudioMixGraph, build_audio_mix_graph, format_number
from photo_sequence.models import MixSpec, ProcessingResult, is_remote_uri, uri_to_path
from photo_sequence.rendering import run_stage
from photo_sequence.workspace import Workspace


def validate_volume(volume: object) -> float:
    """Return ``volume`` as a float, rejecting anything outside [0, 1]."""
    if isinstance(volume, bool) or not isinstance(volume, (int, float)):
        raise ValidationError(f"volume must be a number, got {volume!r}")
    if not math.isfinite(volume) or not 0.0 <= volume <= 1.0:
        raise ValidationError(f"volume must be between 0.0 and 1.0, got {volume!r}")
    return float(volume)


def resolve_audio_track(audio_track: Union[str, Path]) -> str:
    """Return the location ffmpeg should read the track from.

    Remote URLs are passed through untouched; local paths and ``file://``
    URIs must name an existing file.
    """
    audio_track = str(audio_track)
    if is_remote_uri(audio_track):
        return audio_track
    track_path = uri_to_path(audio_track)
    if not track_path.is_file():
        raise SourceError(f"Audio track not found: {audio_track}", stage="mix")
    return str(track_path)


class AudioMixer:
    """Mix a music track into a video while copying its video stream."""

    def __init__(
        self,
        engine: Engine,
        workspace: Workspace,
        *,
        logger: Optional[logging.Logger] = None,
        default_volume: float = DEFAULT_MUSIC_VOLUME,
        encoding: Optional[EncodingSettings] = None,
    ) -> None:
        self.engine = engine
        self.workspace = workspace
        self.logger = logger or logging.getLogger("photo_sequence")
        self.default_volume = validate_volume(default_volume)
        self.encoding = encoding or EncodingSettings()

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        engine: Engine,
        workspace: Workspace,
        *,
        logger: Optional[logging.Logger] = None,
    ) -> "AudioMixer":
        return cls(
            engine,
            workspace,
            logger=logger,
            default_volume=settings.music_volume,
            encoding=settings.encoding,
        )

    def build_graph(self, volume: Optional[float] = None) -> AudioMixGraph:
        weight = self.default_volume if volume is None else validate_volume(volume)
        return build_audio_mix_graph(weight)

    def output_options(self, graph: AudioMixGraph) -> List[str]:
        return [
            "-map",
            "0:v",
            "-map",
            graph.output_map,
            "-c:v",
            "copy",
            "-c:a",
            self.encoding.audio_codec,
        ]

    def mix(
        self,
        video_path: Union[str, Path],
        audio_track: str,
        volume: Optional[float] = None,
    ) -> ProcessingResult:
        """Produce the workspace's final video from ``video_path`` and ``audio_track``."""
        graph = self.build_graph(volume)
        video_path = Path(video_path)

        if not video_path.is_file():
            raise SourceError(f"Video not found: {video_path}", stage="mix")
        track_location = resolve_audio_track(audio_track)

        output_path = self.workspace.final_video_path
        self.logger.info(
            "Mixing %s into %s at weight %s -> %s",
            audio_track,
            video_path,
            format_number(graph.weights[-1]),
            output_path,
        )

        return run_stage(
            self.engine,
            graph,
            [EngineInput.file(video_path), EngineInput(location=track_location)],
            output_path,
            output_options=self.output_options(graph),
            stage="mix",
            logger=self.logger,
        )

    def mix_spec(self, spec: MixSpec) -> ProcessingResult:
        return self.mix(spec.video_path, spec.audio_track, spec.volume)


__all__ = ["AudioMixer", "resolve_audio_track", "validate_volume"]
