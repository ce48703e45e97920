# src/blackmessages/api/v1/endpoints/auth.py
"""Registration and login endpoints."""

from __future__ import annotations

from fastapi import APIRouter, status

from blackmessages.api.v1.dependencies import CredentialStoreDep, raise_http_error
from blackmessages.core.errors import BlackMessagesError
from blackmessages.schemas.device import (
    LoginRequest,
    LoginResponse,
    RegisterRequest,
    RegisterResponse,
)

router = APIRouter(prefix="/auth", tags=["authentication"])


@router.post(
    "/register",
    summary="Register a new pseudonymous device",
    status_code=status.HTTP_201_CREATED,
    response_model=RegisterResponse,
)
async def register_device(
    payload: RegisterRequest,
    credentials: CredentialStoreDep,
) -> RegisterResponse:
    """Create a user and device and hand out the first transaction key."""
    try:
        registration = credentials.register(payload.pin_hash)
    except BlackMessagesError as err:
        raise_http_error(err)

    return RegisterResponse(
        username=registration.username,
        device_id=registration.device_id,
        transaction_key=registration.transaction_key,
    )


@router.post(
    "/login",
    summary="Log in and rotate the device's transaction key",
    status_code=status.HTTP_200_OK,
    response_model=LoginResponse,
)
async def login_device(
    payload: LoginRequest,
    credentials: CredentialStoreDep,
) -> LoginResponse:
    """Verify the PIN hash; every previously issued key for the device stops working."""
    try:
        result = credentials.login(payload.device_id, payload.pin_hash)
    except BlackMessagesError as err:
        raise_http_error(err)

    return LoginResponse(username=result.username, transaction_key=result.transaction_key)
