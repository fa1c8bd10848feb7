"""Decode proxy request paths into request descriptors.

Paths look like ``/<encoded-url>/<size>/<format>/<cache-buster>/`` but every
optional segment is overloaded: a segment starting with ``_`` is always a
cache-buster and the literal ``onerror`` always switches on error mode, no
matter which slot it sits in.
"""

import re
from urllib.parse import unquote

from ogimage.exceptions import MalformedUrlError
from ogimage.models import RequestDescriptor, Segment, SegmentKind

CACHE_BUSTER_PREFIX = "_"
ERROR_MODE_SEGMENT = "onerror"

# Nominal meaning of optional segments by 1-based position
POSITION_KINDS = {
    2: SegmentKind.SIZE,
    3: SegmentKind.FORMAT,
}
LAST_POSITION = 5

_BAD_ESCAPE = re.compile(r"%(?![0-9A-Fa-f]{2})")


def classify_segment(segment: str, position: int) -> Segment:
    """Classify one optional path segment.

    Args:
        segment: Raw (non-empty) path segment
        position: 1-based position of the segment in the path

    Returns:
        Segment tagged with what the segment means
    """
    if segment.startswith(CACHE_BUSTER_PREFIX):
        return Segment(kind=SegmentKind.CACHE_BUSTER, value=segment)
    if segment == ERROR_MODE_SEGMENT:
        return Segment(kind=SegmentKind.ERROR_MODE, value=segment)
    return Segment(kind=POSITION_KINDS.get(position, SegmentKind.UNKNOWN), value=segment)


def decode_url_segment(segment: str) -> str:
    """Percent-decode a segment, rejecting malformed escapes."""
    if _BAD_ESCAPE.search(segment):
        raise MalformedUrlError(f"URI malformed: {segment}")
    try:
        return unquote(segment, errors="strict")
    except UnicodeDecodeError as e:
        raise MalformedUrlError(f"URI malformed: {segment}") from e


def decode_path(path: str) -> RequestDescriptor:
    """Decode a request path.

    Args:
        path: Raw request path, still percent-encoded

    Returns:
        RequestDescriptor for the request

    Raises:
        MalformedUrlError: If the target URL is missing or cannot be decoded
    """
    segments = [entry for entry in path.split("/") if entry]

    size = None
    image_format = None
    error_mode = False
    cache_buster = None
    trailing_cache_buster = None

    for position, segment in enumerate(segments[1:LAST_POSITION], start=2):
        classified = classify_segment(segment, position)
        if classified.kind == SegmentKind.CACHE_BUSTER:
            if position == LAST_POSITION:
                trailing_cache_buster = classified.value
            else:
                cache_buster = classified.value
        elif classified.kind == SegmentKind.ERROR_MODE:
            error_mode = True
        elif classified.kind == SegmentKind.SIZE:
            size = classified.value
        elif classified.kind == SegmentKind.FORMAT:
            image_format = classified.value

    # An in-path cache-buster wins over the trailing one
    if cache_buster is None:
        cache_buster = trailing_cache_buster

    if not segments:
        raise MalformedUrlError("Missing target URL", cache_buster=cache_buster)

    try:
        url = decode_url_segment(segments[0])
    except MalformedUrlError as e:
        e.cache_buster = cache_buster
        raise

    return RequestDescriptor(
        url=url,
        size=size,
        image_format=image_format,
        error_mode=error_mode,
        cache_buster=cache_buster,
    )
