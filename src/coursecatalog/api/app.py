"""FastAPI application setup."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from coursecatalog import __version__
from coursecatalog.api.dependencies import close_service, init_service
from coursecatalog.api.models import APIResponse
from coursecatalog.api.routes import courses, users
from coursecatalog.catalog import (
    ConflictError,
    CourseNotFoundError,
    NotFoundError,
    OwnerNotFoundError,
    UnauthorizedError,
    UserNotFoundError,
    ValidationError,
)
from coursecatalog.config import Settings
from coursecatalog.store import StoreError

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator

logger = logging.getLogger(__name__)

UNPROCESSABLE = 422

_NOT_FOUND_MESSAGES: dict[type[NotFoundError], str] = {
    CourseNotFoundError: "Course not found",
    OwnerNotFoundError: "Owner not found",
    UserNotFoundError: "User not found",
}


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=APIResponse[None](data=None, error=message).model_dump(),
    )


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager."""
    settings: Settings = app.state.settings
    init_service(settings)
    logger.info("Catalog service started (db=%s)", settings.db_path)
    yield
    close_service()


def create_app(db_path: str | None = None, settings: Settings | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        db_path: SQLite database path; overrides ``settings.db_path`` when given.
        settings: Service settings; read from the environment if omitted.
    """
    if settings is None:
        settings = Settings.from_env()
    if db_path is not None:
        settings.db_path = db_path

    app = FastAPI(
        title="Course Catalog API",
        description="REST API for provider course listings and search",
        version=__version__,
        lifespan=lifespan,
    )

    # Store config for lifespan manager
    app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Exception handlers
    @app.exception_handler(NotFoundError)
    async def not_found_handler(_request: Request, exc: NotFoundError) -> JSONResponse:
        message = _NOT_FOUND_MESSAGES.get(type(exc), "Not found")
        return _error(status.HTTP_404_NOT_FOUND, message)

    @app.exception_handler(ConflictError)
    async def conflict_handler(_request: Request, exc: ConflictError) -> JSONResponse:
        return _error(status.HTTP_409_CONFLICT, str(exc))

    @app.exception_handler(ValidationError)
    async def validation_handler(_request: Request, exc: ValidationError) -> JSONResponse:
        return _error(UNPROCESSABLE, str(exc))

    @app.exception_handler(UnauthorizedError)
    async def unauthorized_handler(_request: Request, exc: UnauthorizedError) -> JSONResponse:
        return _error(status.HTTP_401_UNAUTHORIZED, str(exc))

    @app.exception_handler(StoreError)
    async def store_error_handler(_request: Request, exc: StoreError) -> JSONResponse:
        logger.error("Store failure: %s", exc)
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")

    @app.get("/health", tags=["health"])
    def health() -> dict[str, str]:
        return {"status": "ok"}

    app.include_router(users.router, prefix="/api/v1")
    app.include_router(courses.router, prefix="/api/v1")

    return app


# Default app instance
app = create_app()
