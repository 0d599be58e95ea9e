"""Exact-size file generation with chunked streaming."""

__version__ = "1.0.0"
