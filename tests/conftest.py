import sys
from pathlib import Path
from typing import List, Optional, Tuple

import cv2
import numpy as np
import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from photo_sequence.models import EngineResult  # noqa: E402


class FakeEngine:
    """Records invocations and writes a placeholder file on success."""

    def __init__(
        self,
        exit_status: int = 0,
        diagnostics: str = "frame=    3 fps=0.0 q=-1.0 Lsize=      12kB",
        *,
        timed_out: bool = False,
        write_output: bool = True,
        fail_on_call: Optional[int] = None,
    ) -> None:
        self.exit_status = exit_status
        self.diagnostics = diagnostics
        self.timed_out = timed_out
        self.write_output = write_output
        self.fail_on_call = fail_on_call
        self.calls: List[dict] = []

    def invoke(self, graph, inputs, output, *, output_options=()):
        self.calls.append(
            {
                "graph": graph,
                "serialized": graph.serialize(),
                "inputs": list(inputs),
                "output": output,
                "output_options": list(output_options),
            }
        )
        exit_status = self.exit_status
        if self.fail_on_call is not None and len(self.calls) == self.fail_on_call:
            exit_status = 1
        if exit_status == 0 and not self.timed_out and self.write_output:
            output.write_bytes(b"fake-video")
        return EngineResult(
            exit_status=exit_status,
            diagnostics=self.diagnostics,
            timed_out=self.timed_out,
        )


def write_image(path: Path, width: int, height: int, color: Tuple[int, int, int] = (0, 0, 0)) -> Path:
    image = np.zeros((height, width, 3), dtype=np.uint8)
    image[...] = color
    assert cv2.imwrite(str(path), image)
    return path


@pytest.fixture
def fake_engine() -> FakeEngine:
    return FakeEngine()


@pytest.fixture
def make_engine():
    return FakeEngine


@pytest.fixture
def photos(tmp_path: Path) -> List[Path]:
    """Three landscape photos; the first one is 1920x1080."""
    source_dir = tmp_path / "photos"
    source_dir.mkdir()
    return [
        write_image(source_dir / "first.png", 1920, 1080),
        write_image(source_dir / "second.png", 800, 600, (255, 0, 0)),
        write_image(source_dir / "third.png", 600, 900, (0, 255, 0)),
    ]


@pytest.fixture
def music(tmp_path: Path) -> Path:
    track = tmp_path / "background_music.mp3"
    track.write_bytes(b"ID3fake-mp3")
    return track
