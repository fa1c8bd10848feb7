"""Services package for ogimage."""

from .image_optimizer import ImageOptimizer
from .image_proxy import ImageProxyService
from .og_html import OgImageHtml

__all__ = ["ImageOptimizer", "ImageProxyService", "OgImageHtml"]
