"""
Storage error kinds.

Routers map each kind to a status code; anything else that subclasses
StorageError is treated as an internal failure.
"""


class StorageError(Exception):
    """Generic backend failure (connection lost, bad log line, ...)"""


class URLAlreadyExistsError(StorageError):
    """The original URL is already stored; `short_code` is the existing code."""

    def __init__(self, short_code: str):
        self.short_code = short_code
        super().__init__(f"URL already exists under short code {short_code!r}")


class URLNotFoundError(StorageError):
    def __init__(self, short_code: str):
        self.short_code = short_code
        super().__init__(f"Short code {short_code!r} not found")


class URLDeletedError(StorageError):
    def __init__(self, short_code: str):
        self.short_code = short_code
        super().__init__(f"Short code {short_code!r} was deleted")
