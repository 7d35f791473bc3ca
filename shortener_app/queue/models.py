"""
Data models for queue messages.
"""

from pydantic import BaseModel, Field
from datetime import datetime, timezone
from typing import List, Optional


class DeleteTask(BaseModel):
    """
    Request to soft-delete a user's short codes.

    Published by the DELETE /api/user/urls handler; consumed by the
    delete worker after the client already got its 202.
    """

    user_id: str = Field(..., description="Owner whose codes should be deleted")
    short_codes: List[str] = Field(..., description="Short codes to mark as deleted")
    enqueued_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="When the request was accepted"
    )

    # Set by queues that need acknowledgment (Redis Streams)
    message_id: Optional[str] = Field(None, exclude=True)

    model_config = {
        "json_schema_extra": {
            "example": {
                "user_id": "6f1c0b9e-3d4a-4c36-9a57-0e4f0b5d2f11",
                "short_codes": ["Aa0bb1Cc2dd3Ee4ff5Gg6hh7Ii8", "Jj9kk0Ll1mm2Nn3oo4Pp5qq6Rr7"],
                "enqueued_at": "2025-10-29T10:30:00Z"
            }
        }
    }
