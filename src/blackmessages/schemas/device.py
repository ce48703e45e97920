"""Registration and login Pydantic schemas."""

from pydantic import BaseModel, ConfigDict, Field


class RegisterRequest(BaseModel):
    """Schema for pseudonymous device registration."""

    pin_hash: str = Field(..., alias="pinHash", min_length=1, description="Client-side hash of the PIN")

    model_config = ConfigDict(populate_by_name=True)


class RegisterResponse(BaseModel):
    """Credentials issued to a freshly registered device."""

    username: str = Field(..., description="Generated pseudonym")
    device_id: str = Field(..., alias="deviceId", description="Device identifier (UUID)")
    transaction_key: str = Field(
        ..., alias="transactionKey", description="Bearer secret for privileged calls"
    )

    model_config = ConfigDict(populate_by_name=True)


class LoginRequest(BaseModel):
    """Schema for login submissions."""

    device_id: str = Field(..., alias="deviceId", min_length=1)
    pin_hash: str = Field(..., alias="pinHash", min_length=1)

    model_config = ConfigDict(populate_by_name=True)


class LoginResponse(BaseModel):
    """Response returned after a successful login.

    The transaction key replaces every key issued earlier for the device.
    """

    username: str
    transaction_key: str = Field(..., alias="transactionKey")

    model_config = ConfigDict(populate_by_name=True)


class DeviceCredentials(BaseModel):
    """Device identifier plus current transaction key."""

    device_id: str = Field(..., alias="deviceId", min_length=1)
    transaction_key: str = Field(..., alias="transactionKey", min_length=1)

    model_config = ConfigDict(populate_by_name=True)
