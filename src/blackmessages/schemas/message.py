"""Message-related Pydantic schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class MessageCreate(BaseModel):
    """Schema for posting a new ephemeral message."""

    sender: str = Field(..., min_length=1, description="Free-text sender label")
    content: str = Field(..., min_length=1)
    timestamp: datetime | None = Field(
        None, description="Optional capture time; the server clock is used when omitted"
    )
    latitude: float = Field(..., allow_inf_nan=False)
    longitude: float = Field(..., allow_inf_nan=False)


class MessageResponse(BaseModel):
    """Schema for message information returned by the API."""

    message_id: str = Field(..., alias="messageId")
    sender: str
    content: str
    timestamp: datetime
    latitude: float
    longitude: float
    expires_at: datetime = Field(..., alias="expiresAt")

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)
