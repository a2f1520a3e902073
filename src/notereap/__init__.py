"""notereap — recursive note deletion with backlink cleanup."""

__version__ = "0.1.0"
