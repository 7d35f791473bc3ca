"""
Database models for URL shortener.

Only the relational storage backend uses these; the in-memory and file
backends keep plain URLRecord objects.
"""

from .url import URL

__all__ = ["URL"]
