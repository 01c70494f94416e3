"""Resolve Facebook posts and videos into oEmbed metadata records."""

__version__ = "0.1.0"
