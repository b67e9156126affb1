"""Concat-demuxer manifest files listing the photo sequence frames."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, List, Union

from photo_sequence.workspace import temporary_sibling


def escape_for_concat(path: Union[str, Path]) -> str:
    """Escape single quotes for FFmpeg concat demuxer entries."""
    return str(path).replace("'", "'\\''")


def format_manifest_line(path: Union[str, Path]) -> str:
    return f"file '{escape_for_concat(path)}'"


def write_manifest(manifest_path: Path, entries: Iterable[Union[str, Path]]) -> Path:
    """Write one ``file`` line per entry, in order, replacing any previous manifest."""
    lines = [format_manifest_line(entry) for entry in entries]
    manifest_path.parent.mkdir(parents=True, exist_ok=True)
    target = temporary_sibling(manifest_path)
    try:
        target.write_text("\n".join(lines) + "\n", encoding="utf-8")
        target.replace(manifest_path)
    finally:
        if target.exists():
            target.unlink()
    return manifest_path


def read_manifest(manifest_path: Path) -> List[str]:
    """Return the unescaped paths listed in a manifest, in file order."""
    entries: List[str] = []
    for raw_line in manifest_path.read_text(encoding="utf-8").splitlines():
        line = raw_line.strip()
        if not line.startswith("file '") or not line.endswith("'"):
            continue
        entries.append(line[len("file '"):-1].replace("'\\''", "'"))
    return entries


__all__ = [
    "escape_for_concat",
    "format_manifest_line",
    "read_manifest",
    "write_manifest",
]
