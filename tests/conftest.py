"""Pytest fixtures for ogimage tests."""

import io

import pytest
from PIL import Image

from ogimage.config import Settings
from ogimage.models import OptimizedImage


class FakeExtractor:
    """Extractor returning fixed candidates, or raising a fixed error."""

    def __init__(self, candidates=None, error=None):
        self.candidates = candidates or []
        self.error = error
        self.calls = []

    def fetch_candidates(self, url):
        self.calls.append(url)
        if self.error:
            raise self.error
        return list(self.candidates)


class FakeOptimizer:
    """Optimizer returning a fixed result, or raising a fixed error."""

    def __init__(self, stats=None, error=None):
        self.stats = stats if stats is not None else {}
        self.error = error
        self.calls = []

    def optimize(self, image_url, image_format, max_width):
        self.calls.append((image_url, image_format, max_width))
        if self.error:
            raise self.error
        return self.stats


def make_image_bytes(width: int, height: int, fmt: str = "PNG", mode: str = "RGB") -> bytes:
    """Create an in-memory test image."""
    img = Image.new(mode, (width, height), color=0 if mode == "P" else "orange")
    buffer = io.BytesIO()
    img.save(buffer, format=fmt)
    return buffer.getvalue()


@pytest.fixture
def test_settings():
    """Create test settings with default TTLs."""
    return Settings(
        default_image_format="png",
        not_found_ttl_seconds=86400,
        error_ttl_seconds=300,
    )


@pytest.fixture
def png_bytes():
    """Raw bytes standing in for an optimized PNG."""
    return b"\x89PNG\r\n\x1a\nfake-image-data"


@pytest.fixture
def png_stats(png_bytes):
    """Optimizer result with a single PNG variant."""
    return {
        "png": [
            OptimizedImage(format="png", source_type="image/png", buffer=png_bytes),
        ]
    }
