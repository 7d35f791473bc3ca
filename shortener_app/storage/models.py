"""
Data models shared by all storage backends.
"""

from typing import Optional

from pydantic import BaseModel, Field


class URLRecord(BaseModel):
    """One short code -> original URL mapping."""

    short_code: str = Field(..., description="Derived short code, the storage key")
    original_url: str = Field(..., description="URL exactly as submitted")
    user_id: Optional[str] = Field(None, description="Owner from the session token")
    correlation_id: Optional[str] = Field(None, description="Batch item id, batch-only")
    is_deleted: bool = False


class OwnedURL(BaseModel):
    """Row of a per-user listing (short code is not yet expanded to a URL)."""

    short_code: str
    original_url: str


class StorageStats(BaseModel):
    url_count: int = 0
    user_count: int = 0
