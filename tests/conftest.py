"""
Pytest configuration and fixtures for travel_gallery tests.
"""

import io
from pathlib import Path
from typing import Callable

import pytest
from PIL import Image

from travel_gallery.core.database import ImageDatabase


class FakeClock:
    """Manually advanced monotonic clock for cache tests."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def db_path(tmp_path: Path) -> Path:
    """Backing file inside a directory that does not exist yet."""
    return tmp_path / "data" / "images.json"


@pytest.fixture
def database(db_path: Path, clock: FakeClock) -> ImageDatabase:
    return ImageDatabase(db_path, clock=clock)


@pytest.fixture
def images_dir(tmp_path: Path) -> Path:
    directory = tmp_path / "images"
    directory.mkdir()
    return directory


@pytest.fixture
def make_image() -> Callable[..., Path]:
    """Write a small real image file and return its path."""

    def _make(path: Path, color: str = "red", fmt: str = "JPEG") -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        Image.new("RGB", (32, 32), color=color).save(path, format=fmt)
        return path

    return _make


@pytest.fixture
def png_bytes() -> bytes:
    buffer = io.BytesIO()
    Image.new("RGB", (32, 32), color="blue").save(buffer, format="PNG")
    return buffer.getvalue()
