"""FastAPI dependency injection for the web server."""

from fastapi import Request

from ogimage.services.image_proxy import ImageProxyService


def get_image_proxy(request: Request) -> ImageProxyService:
    """Get image proxy service from app state."""
    return request.app.state.image_proxy
