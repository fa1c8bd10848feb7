"""Image optimization service for ogimage."""

import io
import logging

import requests
from PIL import Image

from ogimage.config import settings
from ogimage.exceptions import OptimizationError
from ogimage.models import OptimizedImage

logger = logging.getLogger("ogimage")

FORMAT_ALIASES = {"jpg": "jpeg"}

# Output format -> (PIL format, MIME type)
OUTPUT_FORMATS = {
    "png": ("PNG", "image/png"),
    "jpeg": ("JPEG", "image/jpeg"),
    "webp": ("WEBP", "image/webp"),
    "gif": ("GIF", "image/gif"),
    "avif": ("AVIF", "image/avif"),
}

AUTO_FORMAT = "auto"


class ImageOptimizer:
    """Downloads an image, resizes it and re-encodes it."""

    def __init__(
        self,
        quality: int | None = None,
        max_image_size_bytes: int | None = None,
        timeout: float | None = None,
        user_agent: str | None = None,
    ):
        """Initialize the optimizer.

        Args:
            quality: JPEG/WebP/AVIF quality (1-100)
            max_image_size_bytes: Largest source image accepted
            timeout: Download timeout in seconds
            user_agent: User-Agent header value
        """
        self.quality = quality or settings.image_quality
        self.max_image_size_bytes = max_image_size_bytes or settings.max_image_size_bytes
        self.timeout = timeout if timeout is not None else settings.fetch_timeout_seconds
        self.user_agent = user_agent or settings.user_agent

    def optimize(
        self,
        image_url: str,
        image_format: str,
        max_width: int,
    ) -> dict[str, list[OptimizedImage]]:
        """Fetch and transcode an image.

        Args:
            image_url: URL of the source image
            image_format: Output format name, or "auto" to keep the source format
            max_width: Maximum output width; smaller images are not upscaled

        Returns:
            Mapping of output format to encoded variants

        Raises:
            OptimizationError: If the image cannot be fetched or encoded
        """
        data = self._download(image_url)

        try:
            img = Image.open(io.BytesIO(data))
            img.load()
        except (OSError, ValueError, Image.DecompressionBombError) as e:
            raise OptimizationError(f"Could not open image {image_url}: {e}") from e

        output_format = self._resolve_format(image_format, img.format)
        pil_format, source_type = OUTPUT_FORMATS[output_format]

        if img.width > max_width:
            height = max(1, round(img.height * max_width / img.width))
            img = img.resize((max_width, height), Image.LANCZOS)

        # Convert to a mode the encoder accepts
        if output_format == "jpeg" and img.mode not in ("RGB", "L"):
            img = img.convert("RGB")
        elif output_format in ("webp", "avif") and img.mode == "P":
            img = img.convert("RGBA")

        buffer = io.BytesIO()
        try:
            img.save(buffer, format=pil_format, quality=self.quality)
        except (OSError, ValueError, KeyError) as e:
            raise OptimizationError(f"Could not encode {output_format}: {e}") from e

        logger.debug(f"Optimized {image_url} to {output_format} {img.width}x{img.height}")

        return {
            output_format: [
                OptimizedImage(
                    format=output_format,
                    source_type=source_type,
                    buffer=buffer.getvalue(),
                    width=img.width,
                    height=img.height,
                )
            ]
        }

    def _download(self, image_url: str) -> bytes:
        """Download the source image bytes."""
        try:
            logger.debug(f"Fetching image: {image_url}")
            response = requests.get(
                image_url,
                headers={"User-Agent": self.user_agent},
                timeout=self.timeout,
                stream=True,
            )
            with response:
                response.raise_for_status()

                declared = response.headers.get("Content-Length")
                if declared and declared.isdigit() and int(declared) > self.max_image_size_bytes:
                    raise self._too_large(int(declared))

                data = bytearray()
                for chunk in response.iter_content(chunk_size=64 * 1024):
                    data.extend(chunk)
                    if len(data) > self.max_image_size_bytes:
                        raise self._too_large(len(data))
        except requests.exceptions.Timeout as e:
            raise OptimizationError(f"Timed out fetching image {image_url}") from e
        except requests.exceptions.RequestException as e:
            raise OptimizationError(f"Failed to fetch image {image_url}: {e}") from e

        return bytes(data)

    def _too_large(self, size: int) -> OptimizationError:
        return OptimizationError(f"Image too large: {size} bytes (max {self.max_image_size_bytes})")

    def _resolve_format(self, image_format: str, source_format: str | None) -> str:
        """Normalize a requested format name."""
        name = (image_format or AUTO_FORMAT).strip().lower()
        if name == AUTO_FORMAT:
            # Keep the source format when it can be written back, else PNG
            source = (source_format or "").lower()
            source = FORMAT_ALIASES.get(source, source)
            return source if source in OUTPUT_FORMATS else "png"
        name = FORMAT_ALIASES.get(name, name)

        if name not in OUTPUT_FORMATS:
            raise OptimizationError(f"Unsupported image format: {image_format}")
        return name
