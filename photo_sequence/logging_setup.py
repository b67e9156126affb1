"""Logging for slideshow runs.

Each run logs to the console and to ``photo_sequence.log`` inside the work
directory unless a different file is configured. Relative log files are
placed under the work directory as well, next to the manifests and videos
they describe.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional, Tuple, Union

DEFAULT_LOGGER_NAME = "photo_sequence"
LOG_FILENAME = "photo_sequence.log"
LOG_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"

PathLike = Union[str, Path]


def resolve_log_path(log_file: Optional[PathLike], work_dir: Optional[PathLike] = None) -> Optional[Path]:
    """Return where the run log goes, or ``None`` when file logging is off."""
    if log_file is None:
        if work_dir is None:
            return None
        return Path(work_dir) / LOG_FILENAME
    log_path = Path(log_file)
    if log_path.is_absolute():
        return log_path
    base = Path(work_dir) if work_dir is not None else Path.cwd()
    return base / log_path


def _open_log_file(log_path: Path) -> Tuple[Optional[logging.Handler], List[str]]:
    # A work dir that cannot be created (read-only mount, path is a file)
    # degrades to a log in the current directory rather than aborting the run.
    warnings: List[str] = []
    for candidate in (log_path, Path.cwd() / log_path.name):
        try:
            candidate.parent.mkdir(parents=True, exist_ok=True)
            handler = logging.FileHandler(candidate, encoding="utf-8")
        except OSError as exc:
            warnings.append(f"Cannot write log file '{candidate}': {exc}")
            continue
        if candidate != log_path:
            warnings.append(f"Logging to '{candidate}' instead of '{log_path}'")
        return handler, warnings
    return None, warnings


def configure_logging(
    logger_name: Optional[str] = None,
    *,
    level: int = logging.INFO,
    log_file: Optional[PathLike] = None,
    work_dir: Optional[PathLike] = None,
    include_stream: bool = True,
) -> logging.Logger:
    """Install root handlers for a run and return the named logger.

    ``work_dir`` anchors the default and relative log file locations; with
    neither ``log_file`` nor ``work_dir`` only the console handler is used.
    """
    formatter = logging.Formatter(LOG_FORMAT)
    handlers: List[logging.Handler] = []
    warnings: List[str] = []

    log_path = resolve_log_path(log_file, work_dir)
    if log_path is not None:
        file_handler, warnings = _open_log_file(log_path)
        if file_handler is not None:
            handlers.append(file_handler)

    if include_stream:
        handlers.append(logging.StreamHandler())

    for handler in handlers:
        handler.setFormatter(formatter)
    logging.basicConfig(level=level, handlers=handlers, force=True)

    logger = logging.getLogger(logger_name or DEFAULT_LOGGER_NAME)
    logger.setLevel(level)
    for message in warnings:
        logger.warning(message)
    return logger


__all__ = ["DEFAULT_LOGGER_NAME", "LOG_FILENAME", "configure_logging", "resolve_log_path"]
