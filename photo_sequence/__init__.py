"""
Photo slideshow builder: ordered photos to a pan/zoom video with background music,
rendered by ffmpeg.
"""

from .composer import SequenceComposer
from .config import EncodingSettings, Settings, load_config
from .engine import Engine, EngineInput, FFmpegEngine
from .errors import (
    EngineUnavailableError,
    ProcessingError,
    SlideshowError,
    SourceError,
    ValidationError,
)
from .mixer import AudioMixer
from .models import (
    CompositionOptions,
    EngineResult,
    FrameSize,
    ImageSource,
    MixSpec,
    ProcessingResult,
)
from .pipeline import SlideshowPipeline, create_slideshow
from .workspace import Workspace

__all__ = [
    "AudioMixer",
    "CompositionOptions",
    "EncodingSettings",
    "Engine",
    "EngineInput",
    "EngineResult",
    "EngineUnavailableError",
    "FFmpegEngine",
    "FrameSize",
    "ImageSource",
    "MixSpec",
    "ProcessingError",
    "ProcessingResult",
    "SequenceComposer",
    "Settings",
    "SlideshowError",
    "SlideshowPipeline",
    "SourceError",
    "ValidationError",
    "Workspace",
    "create_slideshow",
    "load_config",
]
