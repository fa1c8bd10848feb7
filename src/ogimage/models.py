"""Pydantic models for request-scoped proxy values."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class SegmentKind(str, Enum):
    """What an optional path segment was classified as."""

    SIZE = "size"
    FORMAT = "format"
    CACHE_BUSTER = "cache_buster"
    ERROR_MODE = "error_mode"
    UNKNOWN = "unknown"


class Segment(BaseModel):
    """A classified optional path segment."""

    model_config = ConfigDict(frozen=True)

    kind: SegmentKind
    value: str


class RequestDescriptor(BaseModel):
    """Parameters decoded from a proxy request path."""

    model_config = ConfigDict(frozen=True)

    url: str
    size: Optional[str] = None
    image_format: Optional[str] = None
    error_mode: bool = False
    cache_buster: Optional[str] = None


class FallbackSpec(BaseModel):
    """Parameters for a placeholder response."""

    message: str
    status_code: int = 200
    ttl_seconds: int
    cache_buster: Optional[str] = None
    empty_body: bool = False


class OptimizedImage(BaseModel):
    """One encoded variant returned by the image optimizer."""

    format: str
    source_type: str
    buffer: bytes
    width: Optional[int] = None
    height: Optional[int] = None


class HttpResponse(BaseModel):
    """Transport-neutral response produced for every request.

    ``body`` is base64 text when ``is_binary`` is set, literal markup
    otherwise, and ``None`` when the body is omitted. ``ttl_seconds`` is a
    hint for the edge cache, not a header.
    """

    status_code: int = 200
    headers: dict[str, str] = Field(default_factory=dict)
    body: Optional[str] = None
    is_binary: bool = False
    ttl_seconds: Optional[int] = None
