"""Boundary to the external ffmpeg process."""

from __future__ import annotations

import logging
import shutil
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Protocol, Sequence, Tuple, Union

from photo_sequence.errors import EngineUnavailableError
from photo_sequence.filters import FilterGraph
from photo_sequence.models import EngineResult


@dataclass(frozen=True)
class EngineInput:
    """One ``-i`` input together with the options that must precede it."""

    location: str
    options: Tuple[str, ...] = ()

    @classmethod
    def file(cls, path: Union[str, Path]) -> "EngineInput":
        return cls(location=str(path))

    @classmethod
    def concat_manifest(cls, manifest_path: Union[str, Path]) -> "EngineInput":
        return cls(location=str(manifest_path), options=("-f", "concat", "-safe", "0"))


class Engine(Protocol):
    """Anything that can run a filter graph over inputs into an output file."""

    def invoke(
        self,
        graph: FilterGraph,
        inputs: Sequence[EngineInput],
        output: Path,
        *,
        output_options: Sequence[str] = (),
    ) -> EngineResult:
        ...


def _decode(stream: Union[bytes, str, None]) -> str:
    if stream is None:
        return ""
    if isinstance(stream, bytes):
        return stream.decode("utf-8", errors="replace")
    return stream


class FFmpegEngine:
    """Run ffmpeg as a blocking subprocess with an optional timeout."""

    def __init__(
        self,
        binary: str = "ffmpeg",
        *,
        timeout: Optional[float] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.binary = binary
        self.timeout = timeout
        self.logger = logger or logging.getLogger("photo_sequence")

    def build_command(
        self,
        graph: FilterGraph,
        inputs: Sequence[EngineInput],
        output: Path,
        *,
        output_options: Sequence[str] = (),
    ) -> List[str]:
        cmd = [self.binary, "-y"]
        for engine_input in inputs:
            cmd.extend(engine_input.options)
            cmd.extend(["-i", engine_input.location])
        cmd.extend([graph.option, graph.serialize()])
        cmd.extend(output_options)
        cmd.append(str(output))
        return cmd

    def invoke(
        self,
        graph: FilterGraph,
        inputs: Sequence[EngineInput],
        output: Path,
        *,
        output_options: Sequence[str] = (),
    ) -> EngineResult:
        if shutil.which(self.binary) is None:
            raise EngineUnavailableError(
                f"{self.binary} not found on PATH. Install ffmpeg with libx264 and aac support."
            )

        cmd = self.build_command(graph, inputs, output, output_options=output_options)
        self.logger.debug("Running %s", subprocess.list2cmdline(cmd))

        try:
            result = subprocess.run(
                cmd,
                capture_output=True,
                check=False,
                timeout=self.timeout,
            )
        except subprocess.TimeoutExpired as exc:
            # subprocess.run has already killed the child at this point.
            partial = _decode(exc.stderr).strip()
            message = f"{self.binary} timed out after {self.timeout}s and was killed"
            return EngineResult(
                exit_status=-1,
                diagnostics=f"{message}\n{partial}" if partial else message,
                timed_out=True,
            )
        except OSError as exc:
            raise EngineUnavailableError(f"Failed to start {self.binary}: {exc}") from exc

        diagnostics = _decode(result.stderr) or _decode(result.stdout)
        return EngineResult(exit_status=result.returncode, diagnostics=diagnostics)


__all__ = ["Engine", "EngineInput", "FFmpegEngine"]
