from pydantic import BaseModel, Field


class ShortenRequest(BaseModel):
    url: str = Field("", description="The original URL to be shortened")


class ShortenResponse(BaseModel):
    result: str = Field(..., description="Full short URL")


class BatchShortenItem(BaseModel):
    correlation_id: str = Field(..., description="Caller-supplied id echoed in the response")
    original_url: str


class BatchShortenResult(BaseModel):
    correlation_id: str
    short_url: str


class UserURL(BaseModel):
    short_url: str
    original_url: str


class StatsResponse(BaseModel):
    urls: int
    users: int
