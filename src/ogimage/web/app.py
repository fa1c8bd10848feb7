"""FastAPI application factory for the Open Graph image proxy."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from ogimage import __version__
from ogimage.config import settings
from ogimage.services.image_optimizer import ImageOptimizer
from ogimage.services.image_proxy import ImageProxyService
from ogimage.services.og_html import OgImageHtml

logger = logging.getLogger("ogimage.web")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan - initialize shared resources."""
    app.state.image_proxy = ImageProxyService(
        OgImageHtml(
            timeout=settings.fetch_timeout_seconds,
            user_agent=settings.user_agent,
        ),
        ImageOptimizer(
            quality=settings.image_quality,
            max_image_size_bytes=settings.max_image_size_bytes,
            timeout=settings.fetch_timeout_seconds,
            user_agent=settings.user_agent,
        ),
        settings,
    )
    logger.info(f"Open Graph image proxy {__version__} ready")

    yield


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title="Open Graph Image Proxy",
        description="Serves the Open Graph preview image of any web page",
        version=__version__,
        lifespan=lifespan,
    )

    # Register routes; the catch-all image route must come last
    from ogimage.web.routes import health, images

    app.include_router(health.router)
    app.include_router(images.router)

    return app
