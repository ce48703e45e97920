# src/blackmessages/api/v1/endpoints/messages.py
"""Ephemeral message endpoints."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Response, status

from blackmessages.api.v1.dependencies import (
    AuthenticationGateDep,
    LocalizationStoreDep,
    MessageStoreDep,
    SettingsDep,
    raise_http_error,
)
from blackmessages.core.errors import BlackMessagesError
from blackmessages.schemas.device import DeviceCredentials
from blackmessages.schemas.message import MessageCreate, MessageResponse

router = APIRouter(prefix="/messages", tags=["messages"])
logger = logging.getLogger(__name__)


@router.post("", status_code=status.HTTP_201_CREATED, response_class=Response)
async def post_message(
    message_data: MessageCreate,
    messages: MessageStoreDep,
) -> Response:
    """Post a message that stays visible until its TTL elapses."""
    try:
        messages.create(
            message_data.sender,
            message_data.content,
            message_data.latitude,
            message_data.longitude,
            timestamp=message_data.timestamp,
        )
    except BlackMessagesError as err:
        raise_http_error(err)
    return Response(status_code=status.HTTP_201_CREATED)


@router.post("/nearby", response_model=list[MessageResponse])
async def fetch_nearby_messages(
    credentials: DeviceCredentials,
    gate: AuthenticationGateDep,
    localizations: LocalizationStoreDep,
    messages: MessageStoreDep,
    app_settings: SettingsDep,
) -> list[MessageResponse]:
    """Return live messages around the device's last reported position.

    Authentication, then position lookup, then the query; the first failure
    ends the request.
    """
    try:
        device = gate.authenticate(credentials.device_id, credentials.transaction_key)
        position = localizations.get(device.device_id)
        nearby = messages.find_nearby(
            position.latitude,
            position.longitude,
            app_settings.search_radius_km,
        )
    except BlackMessagesError as err:
        raise_http_error(err)

    logger.debug("Returning %d messages to device %s", len(nearby), device.device_id)
    return [MessageResponse.model_validate(message) for message in nearby]
