"""Tests for web routes."""

import pytest
from fastapi.testclient import TestClient

from ogimage import __version__
from ogimage.exceptions import ExtractionError
from ogimage.fallback import PLACEHOLDER_SVG
from ogimage.services.image_proxy import ImageProxyService

from conftest import FakeExtractor, FakeOptimizer

IMAGE_URL = "https://example.com/og.png"


@pytest.fixture
def web_app():
    """Create a test FastAPI app; services are set per test."""
    from ogimage.web.app import create_app

    return create_app()


def make_client(web_app, test_settings, extractor, optimizer):
    """Install fake collaborators and create a test client."""
    web_app.state.image_proxy = ImageProxyService(extractor, optimizer, test_settings)
    # Use TestClient without context manager to avoid lifespan issues
    return TestClient(web_app, raise_server_exceptions=False)


class TestHealth:
    """Tests for the health route."""

    def test_health(self, web_app, test_settings):
        """Health reports status and version."""
        client = make_client(web_app, test_settings, FakeExtractor(), FakeOptimizer())

        response = client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "ok", "version": __version__}


class TestImageRoute:
    """Tests for the image proxy route."""

    def test_success(self, web_app, test_settings, png_stats, png_bytes):
        """Optimized images are served as raw bytes."""
        extractor = FakeExtractor([IMAGE_URL])
        optimizer = FakeOptimizer(png_stats)
        client = make_client(web_app, test_settings, extractor, optimizer)

        response = client.get("/https%3A%2F%2Fexample.com%2Fpost%2F/small/_20240101/")

        assert response.status_code == 200
        assert response.headers["content-type"] == "image/png"
        assert response.headers["x-cache-buster"] == "_20240101"
        assert "cache-control" not in response.headers
        assert response.content == png_bytes
        assert extractor.calls == ["https://example.com/post/"]
        assert optimizer.calls == [(IMAGE_URL, "png", 375)]

    def test_not_found(self, web_app, test_settings):
        """Pages without images get the placeholder cached for a day."""
        client = make_client(web_app, test_settings, FakeExtractor([]), FakeOptimizer())

        response = client.get("/https%3A%2F%2Fexample.com%2F/")

        assert response.status_code == 200
        assert response.headers["content-type"] == "image/svg+xml"
        assert response.headers["cache-control"] == "public, s-maxage=86400"
        assert "https://example.com/" in response.headers["x-error-message"]
        assert response.text == PLACEHOLDER_SVG

    def test_not_found_error_mode(self, web_app, test_settings):
        """Error mode returns an empty body."""
        client = make_client(web_app, test_settings, FakeExtractor([]), FakeOptimizer())

        response = client.get("/https%3A%2F%2Fexample.com%2F/onerror/")

        assert response.status_code == 200
        assert response.content == b""
        assert response.headers["cache-control"] == "public, s-maxage=86400"

    def test_transient_error(self, web_app, test_settings):
        """Fetch failures get the placeholder cached for five minutes."""
        extractor = FakeExtractor(error=ExtractionError("Timed out fetching page"))
        client = make_client(web_app, test_settings, extractor, FakeOptimizer())

        response = client.get("/https%3A%2F%2Fexample.com%2F/onerror/_v1/")

        assert response.status_code == 200
        assert response.headers["cache-control"] == "public, s-maxage=300"
        assert response.headers["x-error-message"] == "Timed out fetching page"
        assert response.headers["x-cache-buster"] == "_v1"
        assert response.text == PLACEHOLDER_SVG

    def test_control_character_in_url(self, web_app, test_settings):
        """A NUL in the target URL still yields a valid placeholder response."""
        client = make_client(web_app, test_settings, FakeExtractor([]), FakeOptimizer())

        response = client.get("/https%3A%2F%2Fexample.com%2F%00x/")

        assert response.status_code == 200
        assert response.headers["x-error-message"] == (
            "No Open Graph images found for https://example.com/%00x"
        )
        assert response.text == PLACEHOLDER_SVG

    def test_root_path(self, web_app, test_settings):
        """A request without a target URL still gets an image."""
        extractor = FakeExtractor([IMAGE_URL])
        client = make_client(web_app, test_settings, extractor, FakeOptimizer())

        response = client.get("/")

        assert response.status_code == 200
        assert response.headers["x-error-message"] == "Missing target URL"
        assert response.text == PLACEHOLDER_SVG
        assert extractor.calls == []
