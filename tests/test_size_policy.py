"""Tests for size keyword resolution."""

from ogimage.size_policy import IMAGE_WIDTH, resolve_max_width


class TestResolveMaxWidth:
    """Tests for resolve_max_width."""

    def test_keywords(self):
        """Known keywords map to fixed widths."""
        assert resolve_max_width("tiny") == 150
        assert resolve_max_width("small") == 375
        assert resolve_max_width("medium") == 650

    def test_absent_is_full_width(self):
        """No keyword means the full width."""
        assert resolve_max_width(None) == 1200
        assert resolve_max_width("") == IMAGE_WIDTH

    def test_unknown_is_full_width(self):
        """Unknown keywords fall back to the full width."""
        assert resolve_max_width("bogus") == 1200
        assert resolve_max_width("SMALL") == 1200
