"""Size keyword to maximum output width mapping."""

IMAGE_WIDTH = 1200
IMAGE_HEIGHT = 630

SIZE_WIDTHS = {
    "tiny": 150,
    "small": 375,
    "medium": 650,
}


def resolve_max_width(size: str | None) -> int:
    """Return the maximum pixel width for a size keyword.

    Unknown or missing keywords resolve to the full width.
    """
    return SIZE_WIDTHS.get(size, IMAGE_WIDTH) if size else IMAGE_WIDTH
