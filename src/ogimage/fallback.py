"""Placeholder responses for requests that cannot return an Open Graph image.

Fallbacks are always served with the requested status and a real image body,
because browsers do not reliably fire ``<img onerror>`` for 404s or redirects.
Callers that want to handle failures client-side opt into an empty body with
the ``onerror`` path segment.
"""

from urllib.parse import quote

from ogimage.models import FallbackSpec, HttpResponse
from ogimage.size_policy import IMAGE_HEIGHT, IMAGE_WIDTH

PLACEHOLDER_CONTENT_TYPE = "image/svg+xml"

PLACEHOLDER_SVG = (
    f'<svg version="1.1" xmlns="http://www.w3.org/2000/svg" '
    f'width="{IMAGE_WIDTH}" height="{IMAGE_HEIGHT}" x="0" y="0" '
    f'viewBox="0 0 1569.4 2186" xml:space="preserve" aria-hidden="true" focusable="false">'
    "<style>.st0{fill:#bbb;stroke:#bbb;stroke-width:28;stroke-miterlimit:10}</style>"
    "</svg>"
)


def header_safe(value: str) -> str:
    """Make a message usable as an HTTP header value."""
    value = " ".join(value.splitlines())
    # Control characters and non-ASCII are not legal in header values
    return "".join(
        quote(char) if ord(char) < 0x20 or ord(char) >= 0x7F else char for char in value
    )


def render_fallback(spec: FallbackSpec) -> HttpResponse:
    """Build the placeholder response described by a FallbackSpec.

    Args:
        spec: Message, status, TTL, cache-buster and body mode

    Returns:
        HttpResponse with diagnostic headers and, unless ``empty_body`` is
        set, the gray placeholder SVG
    """
    headers = {"x-error-message": header_safe(spec.message)}
    if spec.cache_buster:
        headers["x-cache-buster"] = spec.cache_buster

    response = HttpResponse(
        status_code=spec.status_code,
        headers=headers,
        ttl_seconds=spec.ttl_seconds,
    )

    if not spec.empty_body:
        response.headers["content-type"] = PLACEHOLDER_CONTENT_TYPE
        response.body = PLACEHOLDER_SVG
        response.is_binary = False

    return response
