"""Run one engine-backed stage and publish its output atomically."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Sequence

from photo_sequence.engine import Engine, EngineInput
from photo_sequence.errors import ProcessingError
from photo_sequence.filters import FilterGraph
from photo_sequence.models import ProcessingResult
from photo_sequence.workspace import temporary_sibling


def run_stage(
    engine: Engine,
    graph: FilterGraph,
    inputs: Sequence[EngineInput],
    output_path: Path,
    *,
    output_options: Sequence[str],
    stage: str,
    logger: logging.Logger,
) -> ProcessingResult:
    """Invoke ``engine`` into a temporary file, then move it to ``output_path``.

    Raises ProcessingError carrying the engine log when the run fails, times
    out or leaves no output behind. A failed run never replaces an earlier
    artifact at ``output_path``.
    """
    output_path.parent.mkdir(parents=True, exist_ok=True)
    temp_output = temporary_sibling(output_path)

    try:
        result = engine.invoke(graph, inputs, temp_output, output_options=output_options)

        if not result.ok:
            diagnostics = result.diagnostics.strip()
            if not diagnostics:
                diagnostics = f"ffmpeg exited with status {result.exit_status}"
            if result.timed_out:
                logger.error("%s timed out: %s", stage, diagnostics)
                raise ProcessingError(f"{stage} timed out", diagnostics, stage=stage)
            logger.error("%s failed (exit %s): %s", stage, result.exit_status, diagnostics)
            raise ProcessingError(f"{stage} failed", diagnostics, stage=stage)

        logger.debug("%s engine log:\n%s", stage, result.diagnostics)

        try:
            temp_output.replace(output_path)
        except OSError as exc:
            logger.error("%s produced no readable output at %s: %s", stage, temp_output, exc)
            raise ProcessingError(
                f"{stage} failed",
                f"Engine reported success but output is unavailable: {exc}",
                stage=stage,
            ) from exc
    finally:
        if temp_output.exists():
            temp_output.unlink()

    return ProcessingResult.succeeded(output_path, result.diagnostics)


__all__ = ["run_stage"]
