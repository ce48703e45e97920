# src/blackmessages/api/v1/endpoints/localization.py
"""Device position endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Response, status

from blackmessages.api.v1.dependencies import LocalizationStoreDep, raise_http_error
from blackmessages.core.errors import BlackMessagesError
from blackmessages.schemas.localization import LocalizationUpdate

router = APIRouter(prefix="/localization", tags=["localization"])


@router.post("", status_code=status.HTTP_200_OK, response_class=Response)
async def update_localization(
    payload: LocalizationUpdate,
    localizations: LocalizationStoreDep,
) -> Response:
    """Replace the device's current position."""
    try:
        localizations.upsert(payload.device_id, payload.latitude, payload.longitude)
    except BlackMessagesError as err:
        raise_http_error(err)
    return Response(status_code=status.HTTP_200_OK)
