"""Request orchestration for the Open Graph image proxy.

Every request ends in exactly one HttpResponse with status 200: the optimized
image, or a placeholder carrying the failure in ``x-error-message``. Pages
without an Open Graph image are cached for a day; fetch and transcode errors
only for five minutes so they get retried soon.
"""

import base64
import logging

from starlette.concurrency import run_in_threadpool

from ogimage.config import Settings, settings as default_settings
from ogimage.exceptions import MalformedUrlError, OgImageError, OptimizationError
from ogimage.fallback import render_fallback
from ogimage.models import FallbackSpec, HttpResponse, OptimizedImage, RequestDescriptor
from ogimage.path_decoder import decode_path
from ogimage.services.image_optimizer import ImageOptimizer
from ogimage.services.og_html import OgImageHtml
from ogimage.size_policy import resolve_max_width


def select_variant(stats: dict[str, list[OptimizedImage]]) -> tuple[str, OptimizedImage]:
    """Pick the variant to serve from an optimizer result.

    The most recently inserted format wins, and only its first variant is
    used.

    Raises:
        OptimizationError: If the result holds no variants
    """
    if not stats:
        raise OptimizationError("Image optimizer returned no formats")

    image_format = list(stats)[-1]
    variants = stats[image_format]
    if not variants:
        raise OptimizationError(f"Image optimizer returned no {image_format} variants")
    return image_format, variants[0]


class ImageProxyService:
    """Turns proxy request paths into image responses."""

    def __init__(
        self,
        extractor: OgImageHtml,
        optimizer: ImageOptimizer,
        settings: Settings | None = None,
        logger: logging.Logger | None = None,
    ):
        """Initialize the proxy service.

        Args:
            extractor: Client returning candidate image URLs for a page
            optimizer: Client transcoding an image URL
            settings: Settings for default format and TTLs
            logger: Logger receiving request diagnostics
        """
        self.extractor = extractor
        self.optimizer = optimizer
        self.settings = settings or default_settings
        self.logger = logger or logging.getLogger("ogimage")

    async def handle(self, raw_path: str) -> HttpResponse:
        """Build the response for a request path.

        Never raises; failures become placeholder responses.
        """
        cache_buster = None
        try:
            request = decode_path(raw_path)
            cache_buster = request.cache_buster
            return await self._process(request)
        except MalformedUrlError as e:
            self.logger.warning(f"Malformed request path {raw_path!r}: {e}")
            return self._error_fallback(e, e.cache_buster)
        except OgImageError as e:
            self.logger.warning(f"Error serving {raw_path!r}: {e}")
            return self._error_fallback(e, cache_buster)
        except Exception as e:
            self.logger.exception(f"Unexpected error serving {raw_path!r}")
            return self._error_fallback(e, cache_buster)

    async def _process(self, request: RequestDescriptor) -> HttpResponse:
        """Fetch, extract and optimize for a decoded request."""
        max_width = resolve_max_width(request.size)

        self.logger.info(
            f"Request url={request.url} size={request.size} "
            f"format={request.image_format} cache_buster={request.cache_buster}",
            extra={"og_request": {**request.model_dump(), "max_width": max_width}},
        )

        image_urls = await run_in_threadpool(self.extractor.fetch_candidates, request.url)
        if not image_urls:
            return render_fallback(
                FallbackSpec(
                    message=f"No Open Graph images found for {request.url}",
                    status_code=200,
                    ttl_seconds=self.settings.not_found_ttl_seconds,
                    cache_buster=request.cache_buster,
                    empty_body=request.error_mode,
                )
            )

        stats = await run_in_threadpool(
            self.optimizer.optimize,
            image_urls[0],
            request.image_format or self.settings.default_image_format,
            max_width,
        )
        image_format, variant = select_variant(stats)

        self.logger.info(
            f"Found match {request.url} {image_format} {variant.source_type}",
            extra={
                "og_match": {
                    "url": request.url,
                    "image_url": image_urls[0],
                    "format": image_format,
                    "source_type": variant.source_type,
                    "width": variant.width,
                    "height": variant.height,
                    "size": len(variant.buffer),
                }
            },
        )

        headers = {"content-type": variant.source_type}
        if request.cache_buster:
            headers["x-cache-buster"] = request.cache_buster

        return HttpResponse(
            status_code=200,
            headers=headers,
            body=base64.b64encode(variant.buffer).decode("ascii"),
            is_binary=True,
        )

    def _error_fallback(self, error: Exception, cache_buster: str | None) -> HttpResponse:
        """Placeholder for a failed request; error mode is not honored here."""
        return render_fallback(
            FallbackSpec(
                message=str(error) or error.__class__.__name__,
                status_code=200,
                ttl_seconds=self.settings.error_ttl_seconds,
                cache_buster=cache_buster,
                empty_body=False,
            )
        )
