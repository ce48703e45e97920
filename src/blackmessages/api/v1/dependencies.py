"""Shared API dependencies for stores, clock and error translation."""

from typing import Annotated, NoReturn

from fastapi import Depends, HTTPException, status
from sqlalchemy.orm import Session

from blackmessages.core.errors import (
    BlackMessagesError,
    InvalidInputError,
    NotFoundError,
    StorageError,
    UnauthorizedError,
)
from blackmessages.core.settings import Settings, settings
from blackmessages.db.session import get_db
from blackmessages.db.time import Clock, utcnow
from blackmessages.services import (
    AuthenticationGate,
    CredentialStore,
    LocalizationStore,
    MessageStore,
)

# Type alias for database session dependency
SessionDep = Annotated[Session, Depends(get_db)]


def get_settings() -> Settings:
    """Return the process-wide settings instance."""
    return settings


def get_clock() -> Clock:
    """Return the server clock used for timestamps and expiry."""
    return utcnow


SettingsDep = Annotated[Settings, Depends(get_settings)]
ClockDep = Annotated[Clock, Depends(get_clock)]


def get_credential_store(db: SessionDep, app_settings: SettingsDep, clock: ClockDep) -> CredentialStore:
    return CredentialStore(db, username_length=app_settings.username_length, clock=clock)


def get_authentication_gate(db: SessionDep) -> AuthenticationGate:
    return AuthenticationGate(db)


def get_localization_store(db: SessionDep, clock: ClockDep) -> LocalizationStore:
    return LocalizationStore(db, clock=clock)


def get_message_store(db: SessionDep, app_settings: SettingsDep, clock: ClockDep) -> MessageStore:
    return MessageStore(db, ttl_seconds=app_settings.message_ttl_seconds, clock=clock)


CredentialStoreDep = Annotated[CredentialStore, Depends(get_credential_store)]
AuthenticationGateDep = Annotated[AuthenticationGate, Depends(get_authentication_gate)]
LocalizationStoreDep = Annotated[LocalizationStore, Depends(get_localization_store)]
MessageStoreDep = Annotated[MessageStore, Depends(get_message_store)]


def raise_http_error(err: BlackMessagesError) -> NoReturn:
    """Translate a domain error into the matching HTTPException.

    Storage failures are reported generically; their cause was already logged
    where it was caught.
    """
    if isinstance(err, InvalidInputError):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(err)) from err
    if isinstance(err, UnauthorizedError):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=err.detail) from err
    if isinstance(err, NotFoundError):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(err)) from err
    if isinstance(err, StorageError):
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=err.detail,
        ) from err
    raise HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail="Internal error",
    ) from err
