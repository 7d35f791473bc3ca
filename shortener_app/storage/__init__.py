"""
URL storage module.

This module implements the Strategy Pattern for pluggable URL storage:
in-memory, append-only file, and relational database backends behind
one interface.
"""

from .exceptions import StorageError, URLAlreadyExistsError, URLNotFoundError, URLDeletedError
from .models import URLRecord, OwnedURL, StorageStats
from .strategies import URLStorageStrategy, InMemoryURLStorage, FileURLStorage, DatabaseURLStorage
from .factory import StorageFactory, StorageBackend

__all__ = [
    "StorageError",
    "URLAlreadyExistsError",
    "URLNotFoundError",
    "URLDeletedError",
    "URLRecord",
    "OwnedURL",
    "StorageStats",
    "URLStorageStrategy",
    "InMemoryURLStorage",
    "FileURLStorage",
    "DatabaseURLStorage",
    "StorageFactory",
    "StorageBackend",
]
