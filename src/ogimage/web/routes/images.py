"""Open Graph image proxy route."""

import base64

from fastapi import APIRouter, Depends, Request, Response

from ogimage.models import HttpResponse
from ogimage.services.image_proxy import ImageProxyService
from ogimage.web.dependencies import get_image_proxy

router = APIRouter()


def raw_request_path(request: Request) -> str:
    """Return the request path with percent-escapes intact.

    The target URL travels percent-encoded inside the path, so ``%2F`` must
    not be turned into a segment separator before decoding.
    """
    raw_path = request.scope.get("raw_path")
    if not raw_path:
        return request.url.path
    return raw_path.split(b"?", 1)[0].decode("utf-8", errors="replace")


def to_response(result: HttpResponse) -> Response:
    """Convert a proxy result into a Starlette response.

    The TTL hint becomes an edge-cache lifetime; results without one leave
    caching to the edge default.
    """
    if result.body is None:
        content = b""
    elif result.is_binary:
        content = base64.b64decode(result.body)
    else:
        content = result.body.encode("utf-8")

    headers = dict(result.headers)
    if result.ttl_seconds is not None:
        headers["cache-control"] = f"public, s-maxage={result.ttl_seconds}"

    return Response(content=content, status_code=result.status_code, headers=headers)


@router.get("/{path:path}")
async def serve_og_image(
    request: Request,
    path: str,
    image_proxy: ImageProxyService = Depends(get_image_proxy),
):
    """Serve the Open Graph image of the page encoded in the path.

    Args:
        path: ``<encoded-url>[/<size>][/<format>][/<cache-buster>]``

    Returns:
        Image bytes, or a placeholder with ``x-error-message`` set
    """
    result = await image_proxy.handle(raw_request_path(request))
    return to_response(result)
