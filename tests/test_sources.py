import logging
import sys
from pathlib import Path

import cv2
import numpy as np
import pytest
import requests

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from photo_sequence.errors import SourceError  # noqa: E402
from photo_sequence.models import FrameSize, ImageSource  # noqa: E402
from photo_sequence.sources import SourceResolver, read_image_dimensions  # noqa: E402

from conftest import write_image  # noqa: E402


class FakeResponse:
    def __init__(self, payload: bytes, status_code: int = 200):
        self.payload = payload
        self.status_code = status_code

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        return False

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Client Error")

    def iter_content(self, chunk_size=1):
        for start in range(0, len(self.payload), chunk_size):
            yield self.payload[start:start + chunk_size]


class FakeSession:
    def __init__(self, responses):
        self.responses = dict(responses)
        self.requested = []

    def get(self, url, stream=False, timeout=None):
        self.requested.append((url, timeout))
        return self.responses[url]


def png_bytes(width: int, height: int) -> bytes:
    success, buffer = cv2.imencode(".png", np.zeros((height, width, 3), dtype=np.uint8))
    assert success
    return buffer.tobytes()


def test_read_image_dimensions(tmp_path):
    path = write_image(tmp_path / "photo.png", 1920, 1080)

    assert read_image_dimensions(path) == FrameSize(1920, 1080)


def test_read_image_dimensions_rejects_garbage(tmp_path):
    path = tmp_path / "not-an-image.png"
    path.write_bytes(b"definitely not a png")

    with pytest.raises(SourceError):
        read_image_dimensions(path)


def test_read_image_dimensions_missing_file(tmp_path):
    with pytest.raises(SourceError):
        read_image_dimensions(tmp_path / "missing.png")


def test_remote_images_are_staged_in_order(tmp_path):
    local = write_image(tmp_path / "local.png", 20, 10)
    session = FakeSession(
        {
            "https://cdn.example.com/a.png": FakeResponse(png_bytes(32, 16)),
            "https://cdn.example.com/b": FakeResponse(png_bytes(8, 8)),
        }
    )
    resolver = SourceResolver(logging.getLogger("photo-sequence-tests"), http_timeout=3, session=session)
    staging = tmp_path / "sources"

    resolved = resolver.resolve(
        [
            ImageSource("https://cdn.example.com/a.png"),
            ImageSource(str(local)),
            ImageSource("https://cdn.example.com/b"),
        ],
        staging,
    )

    assert resolved == [
        (staging / "image_0000.png").resolve(),
        local.resolve(),
        (staging / "image_0002.jpg").resolve(),
    ]
    assert read_image_dimensions(resolved[0]) == FrameSize(32, 16)
    assert [timeout for _, timeout in session.requested] == [3, 3]


def test_remote_http_error_raises_source_error(tmp_path):
    session = FakeSession({"https://cdn.example.com/gone.png": FakeResponse(b"", status_code=404)})
    resolver = SourceResolver(logging.getLogger("photo-sequence-tests"), session=session)

    with pytest.raises(SourceError):
        resolver.resolve([ImageSource("https://cdn.example.com/gone.png")], tmp_path / "sources")

    assert list((tmp_path / "sources").iterdir()) == []
