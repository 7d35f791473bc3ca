from .url import (
    ShortenRequest,
    ShortenResponse,
    BatchShortenItem,
    BatchShortenResult,
    UserURL,
    StatsResponse,
)

__all__ = [
    "ShortenRequest",
    "ShortenResponse",
    "BatchShortenItem",
    "BatchShortenResult",
    "UserURL",
    "StatsResponse",
]
