"""Exceptions raised while building an Open Graph image response."""


class OgImageError(Exception):
    """Base class for failures that end in a fallback image."""


class MalformedUrlError(OgImageError):
    """The request path did not contain a decodable target URL."""

    def __init__(self, message: str, cache_buster: str | None = None):
        super().__init__(message)
        self.cache_buster = cache_buster


class ExtractionError(OgImageError):
    """The target page could not be fetched or parsed."""


class OptimizationError(OgImageError):
    """The candidate image could not be fetched or transcoded."""
