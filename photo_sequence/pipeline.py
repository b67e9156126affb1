"""End-to-end flow: compose the photo sequence, then mix in the music."""

from __future__ import annotations

import logging
from typing import Optional, Sequence

from photo_sequence.composer import ImageLike, SequenceComposer, as_image_sources, validate_composition
from photo_sequence.config import Settings
from photo_sequence.engine import Engine, FFmpegEngine
from photo_sequence.mixer import AudioMixer, resolve_audio_track, validate_volume
from photo_sequence.models import CompositionOptions, ProcessingResult
from photo_sequence.workspace import Workspace


class SlideshowPipeline:
    """Run the composer and the mixer strictly one after the other."""

    def __init__(
        self,
        composer: SequenceComposer,
        mixer: AudioMixer,
        *,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.composer = composer
        self.mixer = mixer
        self.logger = logger or logging.getLogger("photo_sequence")

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        *,
        request_id: Optional[str] = None,
        engine: Optional[Engine] = None,
        logger: Optional[logging.Logger] = None,
    ) -> "SlideshowPipeline":
        logger = logger or logging.getLogger("photo_sequence")
        workspace = Workspace.for_request(
            settings.work_dir,
            request_id,
            isolate=settings.isolate_requests,
        )
        engine = engine or FFmpegEngine(
            settings.ffmpeg_binary,
            timeout=settings.ffmpeg_timeout_seconds,
            logger=logger,
        )
        return cls(
            SequenceComposer.from_settings(settings, engine, workspace, logger=logger),
            AudioMixer.from_settings(settings, engine, workspace, logger=logger),
            logger=logger,
        )

    @property
    def workspace(self) -> Workspace:
        return self.composer.workspace

    def run(
        self,
        images: Sequence[ImageLike],
        audio_track: str,
        *,
        options: Optional[CompositionOptions] = None,
        volume: Optional[float] = None,
    ) -> ProcessingResult:
        """Return the final video result; the mixer only runs after a successful compose."""
        options = options or CompositionOptions()
        sources = as_image_sources(images)
        validate_composition(sources, options)
        if volume is not None:
            validate_volume(volume)
        resolve_audio_track(audio_track)

        self.logger.info(
            "Creating slideshow from %s images in %s",
            len(sources),
            self.workspace.directory,
        )
        sequence = self.composer.compose(sources, options)
        final = self.mixer.mix(sequence.output_path, audio_track, volume)
        self.logger.info("Slideshow ready: %s", final.output_path)
        return final


def create_slideshow(
    images: Sequence[ImageLike],
    audio_track: str,
    *,
    settings: Optional[Settings] = None,
    options: Optional[CompositionOptions] = None,
    volume: Optional[float] = None,
    request_id: Optional[str] = None,
    engine: Optional[Engine] = None,
    logger: Optional[logging.Logger] = None,
) -> ProcessingResult:
    pipeline = SlideshowPipeline.from_settings(
        settings or Settings(),
        request_id=request_id,
        engine=engine,
        logger=logger,
    )
    return pipeline.run(images, audio_track, options=options, volume=volume)


__all__ = ["SlideshowPipeline", "create_slideshow"]
