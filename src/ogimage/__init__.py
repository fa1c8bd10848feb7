"""Open Graph image proxy."""

__version__ = "1.0.0"
