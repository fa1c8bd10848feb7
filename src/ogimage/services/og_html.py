"""Open Graph image extraction for ogimage.

Fetches a page and returns the image URLs it declares in its social-preview
metadata, in document order with Open Graph tags ahead of Twitter cards.
"""

import logging
from urllib.parse import urljoin, urlparse

import requests
from bs4 import BeautifulSoup

from ogimage.config import settings
from ogimage.exceptions import ExtractionError

logger = logging.getLogger("ogimage")

OG_IMAGE_KEYS = ("og:image", "og:image:url", "og:image:secure_url")
TWITTER_IMAGE_KEYS = ("twitter:image", "twitter:image:src")


class OgImageHtml:
    """Fetches a page and extracts its Open Graph image candidates."""

    def __init__(
        self,
        timeout: float | None = None,
        user_agent: str | None = None,
    ):
        """Initialize the extractor.

        Args:
            timeout: Request timeout in seconds (default: from settings)
            user_agent: User-Agent header value (default: from settings)
        """
        self.timeout = timeout if timeout is not None else settings.fetch_timeout_seconds
        self.user_agent = user_agent or settings.user_agent

    def fetch_candidates(self, url: str) -> list[str]:
        """Fetch a page and return its candidate image URLs.

        Args:
            url: Absolute http(s) URL of the page

        Returns:
            Absolute image URLs, de-duplicated, possibly empty

        Raises:
            ExtractionError: If the URL is invalid or the page cannot be fetched
        """
        if urlparse(url).scheme not in ("http", "https"):
            raise ExtractionError(f"Invalid URL: {url}")

        try:
            logger.debug(f"Fetching page: {url}")
            response = requests.get(
                url,
                headers={"User-Agent": self.user_agent},
                timeout=self.timeout,
            )
            response.raise_for_status()
        except requests.exceptions.Timeout as e:
            raise ExtractionError(f"Timed out fetching {url}") from e
        except requests.exceptions.RequestException as e:
            raise ExtractionError(f"Failed to fetch {url}: {e}") from e

        base_url = response.url or url
        return self.extract_images(response.text, base_url)

    def extract_images(self, html: str, base_url: str) -> list[str]:
        """Extract image URLs from page markup.

        Args:
            html: Page markup
            base_url: URL used to resolve relative image URLs

        Returns:
            Absolute image URLs in priority order
        """
        soup = BeautifulSoup(html, "html.parser")

        found = []
        for keys in (OG_IMAGE_KEYS, TWITTER_IMAGE_KEYS):
            for meta in soup.find_all("meta"):
                attrs = (meta.get("property"), meta.get("name"))
                if not any(attr and attr.strip().lower() in keys for attr in attrs):
                    continue
                content = (meta.get("content") or "").strip()
                if content:
                    found.append(urljoin(base_url, content))

        # dedupe, keep order
        return list(dict.fromkeys(found))
