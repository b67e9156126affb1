"""
Command line entry point for composing slideshow videos from photos.
"""

from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import replace
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from .composer import SequenceComposer
from .config import Settings, load_config
from .engine import FFmpegEngine
from .errors import ProcessingError, ValidationError
from .logging_setup import configure_logging
from .mixer import AudioMixer
from .models import CompositionOptions, FrameSize
from .pipeline import SlideshowPipeline
from .workspace import Workspace

EXIT_OK = 0
EXIT_PROCESSING_FAILED = 1
EXIT_INVALID_INPUT = 2


def _composition_options(args: argparse.Namespace) -> CompositionOptions:
    scale = None
    if args.width is not None or args.height is not None:
        if args.width is None or args.height is None:
            raise ValidationError("--width and --height must be given together")
        scale = FrameSize(width=args.width, height=args.height)
    return CompositionOptions(
        scale=scale,
        zoom_effect=False if args.no_zoom else None,
        fade_effect=False if args.no_fade else None,
        frame_duration=args.frame_duration,
    )


def _load_settings(args: argparse.Namespace) -> Settings:
    settings = load_config(args.config)
    if args.work_dir is not None:
        settings = replace(settings, work_dir=args.work_dir)
    if args.ffmpeg is not None:
        settings = replace(settings, ffmpeg_binary=args.ffmpeg)
    if args.timeout is not None:
        settings = replace(settings, ffmpeg_timeout_seconds=args.timeout)
    return settings


def _add_composition_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("images", nargs="+", help="Photo paths or URLs, in playback order.")
    parser.add_argument("--width", type=int, help="Canvas width (requires --height).")
    parser.add_argument("--height", type=int, help="Canvas height (requires --width).")
    parser.add_argument(
        "--frame-duration",
        type=float,
        help="Seconds each photo stays on screen (default: from config, 3).",
    )
    parser.add_argument("--no-zoom", action="store_true", help="Disable the zoom/pan ramp.")
    parser.add_argument("--no-fade", action="store_true", help="Disable fade in/out.")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Turn an ordered set of photos into a slideshow video with music.",
    )
    parser.add_argument("--config", type=Path, help="Path to a JSON settings file.")
    parser.add_argument("--work-dir", type=Path, help="Directory for manifests and videos.")
    parser.add_argument("--request-id", help="Subdirectory of the work dir for this request.")
    parser.add_argument("--ffmpeg", help="ffmpeg binary to invoke (default: ffmpeg).")
    parser.add_argument("--timeout", type=float, help="Seconds before ffmpeg is killed.")
    parser.add_argument("--log-file", type=Path, help="Also write logs to this file.")
    parser.add_argument("--verbose", action="store_true", help="Enable verbose logging.")

    subparsers = parser.add_subparsers(dest="command", required=True)

    compose_parser = subparsers.add_parser(
        "compose",
        help="Encode photos into a silent slideshow video.",
    )
    _add_composition_arguments(compose_parser)

    mix_parser = subparsers.add_parser(
        "mix",
        help="Mix a music track into an existing video.",
    )
    mix_parser.add_argument("video", type=Path, help="Video to add music to.")
    mix_parser.add_argument("track", help="Music track path or URL.")
    mix_parser.add_argument("--volume", type=float, help="Music weight between 0 and 1 (default: 0.5).")

    create_parser = subparsers.add_parser(
        "create",
        help="Compose photos and mix in music in one go.",
    )
    _add_composition_arguments(create_parser)
    create_parser.add_argument("--music", required=True, help="Music track path or URL.")
    create_parser.add_argument("--volume", type=float, help="Music weight between 0 and 1 (default: 0.5).")

    return parser


def run_command(args: argparse.Namespace, settings: Settings, logger: logging.Logger) -> Path:
    """Execute the selected subcommand and return the produced file."""
    workspace = Workspace.for_request(
        settings.work_dir,
        args.request_id,
        isolate=settings.isolate_requests,
    )
    engine = FFmpegEngine(
        settings.ffmpeg_binary,
        timeout=settings.ffmpeg_timeout_seconds,
        logger=logger,
    )

    if args.command == "compose":
        composer = SequenceComposer.from_settings(settings, engine, workspace, logger=logger)
        result = composer.compose(args.images, _composition_options(args))
    elif args.command == "mix":
        mixer = AudioMixer.from_settings(settings, engine, workspace, logger=logger)
        result = mixer.mix(args.video, args.track, args.volume)
    elif args.command == "create":
        pipeline = SlideshowPipeline(
            SequenceComposer.from_settings(settings, engine, workspace, logger=logger),
            AudioMixer.from_settings(settings, engine, workspace, logger=logger),
            logger=logger,
        )
        result = pipeline.run(
            args.images,
            args.music,
            options=_composition_options(args),
            volume=args.volume,
        )
    else:
        raise ValidationError(f"Unhandled command: {args.command}")

    return result.output_path


def main(argv: Optional[list[str]] = None) -> int:
    load_dotenv()
    parser = build_parser()
    args = parser.parse_args(argv)

    settings = _load_settings(args)
    logger = configure_logging(
        level=logging.DEBUG if args.verbose else logging.INFO,
        log_file=args.log_file or settings.log_file,
        work_dir=settings.work_dir,
    )

    try:
        output_path = run_command(args, settings, logger)
    except ValidationError as exc:
        logger.error("Invalid input: %s", exc)
        return EXIT_INVALID_INPUT
    except ProcessingError as exc:
        logger.error("Processing failed: %s", exc)
        return EXIT_PROCESSING_FAILED

    print(output_path)
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
