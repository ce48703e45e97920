"""Localization Pydantic schemas."""

from pydantic import BaseModel, ConfigDict, Field


class LocalizationUpdate(BaseModel):
    """Schema for reporting a device's current position."""

    device_id: str = Field(..., alias="deviceId", min_length=1)
    latitude: float = Field(..., allow_inf_nan=False, description="Degrees, signed")
    longitude: float = Field(..., allow_inf_nan=False, description="Degrees, signed")

    model_config = ConfigDict(populate_by_name=True)
