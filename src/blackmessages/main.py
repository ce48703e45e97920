# src/blackmessages/main.py
"""Main entry point for the blackmessages application."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from blackmessages.api.v1 import auth_router, localization_router, messages_router
from blackmessages.core.settings import settings
from blackmessages.db.session import Database
from blackmessages.services.reaper import ExpiredMessageReaper
from blackmessages.utils.logging import setup_logging

logger = logging.getLogger(__name__)

# Initialize FastAPI app
app = FastAPI(
    title="blackmessages API",
    description="Ephemeral, location-scoped anonymous messaging",
    version=settings.app_version,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=settings.cors_allow_credentials,
    allow_methods=settings.cors_allow_methods,
    allow_headers=settings.cors_allow_headers,
)

# Add GZip middleware for compression
app.add_middleware(GZipMiddleware)

# Include API routers
app.include_router(auth_router, prefix="/api/v1")
app.include_router(localization_router, prefix="/api/v1")
app.include_router(messages_router, prefix="/api/v1")


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Report malformed request bodies as 400 instead of FastAPI's 422."""
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": jsonable_encoder(exc.errors())},
    )


@app.on_event("startup")
async def on_startup() -> None:
    setup_logging(settings.log_level)
    database = Database.from_settings(settings)
    app.state.database = database
    try:
        database.create_tables()
    except SQLAlchemyError as e:
        # Keep serving; storage-backed calls fail with 500 until the database is reachable.
        logger.error("Database unavailable at startup: %s", e)

    reaper = ExpiredMessageReaper(
        database,
        interval_seconds=settings.message_purge_interval_seconds,
        ttl_seconds=settings.message_ttl_seconds,
    )
    await reaper.start()
    app.state.reaper = reaper


@app.on_event("shutdown")
async def on_shutdown() -> None:
    reaper: ExpiredMessageReaper | None = getattr(app.state, "reaper", None)
    if reaper:
        await reaper.stop()
    database: Database | None = getattr(app.state, "database", None)
    if database:
        database.dispose()


@app.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint to verify the service is running."""
    return {"status": "ok"}


@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint with basic information about the API."""
    return {
        "name": settings.app_name,
        "version": settings.app_version,
        "description": "Ephemeral, location-scoped anonymous messaging",
        "docs": "/docs",
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("blackmessages.main:app", host="0.0.0.0", port=8000, reload=settings.debug)
