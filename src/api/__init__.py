"""
REST API Layer for Mythic Journey.

Provides:
- FastAPI application with CORS middleware for the local UI
- Journey endpoints under the /api/v1 prefix
- Global exception handlers that answer with the response envelope
- Root-level health check
"""

from __future__ import annotations

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from src.api.dependencies import get_lang
from src.api.routes import router
from src.api.schemas import error_response
from src.config.settings import Settings
from src.journey.facade import ProgressionFacade
from src.journey.storage import JsonFileStorage
from src.journey.store import JourneyStore
from src.lib.errors import INTERNAL_ERROR, INVALID_ENTRY, VALIDATION_ERROR
from src.lib.exceptions import InvalidEntry

logger = structlog.get_logger(__name__)

_ALLOWED_HEADERS: list[str] = [
    "Content-Type",
    "Accept",
    "Accept-Language",
    "X-Request-ID",
]


def create_app(
    settings: Settings | None = None,
    facade: ProgressionFacade | None = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    The journey facade is created here once and stored on app.state;
    routes receive it through the get_facade dependency.

    Args:
        settings: Application settings (default: Settings.from_env())
        facade: Pre-built facade (default: one backed by JsonFileStorage
            under settings.data_dir)

    Returns:
        Configured FastAPI application instance.
    """
    settings = settings or Settings.from_env()
    if facade is None:
        storage = JsonFileStorage(settings.data_dir, settings.storage_key)
        facade = ProgressionFacade(JourneyStore.open(storage))

    app = FastAPI(
        title="Mythic Journey",
        description="Journaling as a mythic journey",
        version="0.1.0",
    )
    app.state.settings = settings
    app.state.facade = facade

    # -------------------------------------------------------------------------
    # Exception handlers
    # -------------------------------------------------------------------------
    @app.exception_handler(InvalidEntry)
    async def invalid_entry_handler(request: Request, exc: InvalidEntry) -> JSONResponse:
        return JSONResponse(
            status_code=422,
            content=error_response(INVALID_ENTRY, lang=get_lang(request)),
        )

    @app.exception_handler(ValueError)
    async def value_error_handler(request: Request, exc: ValueError) -> JSONResponse:
        return JSONResponse(
            status_code=422,
            content=error_response(VALIDATION_ERROR, message=str(exc)),
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(
        request: Request, exc: RequestValidationError,
    ) -> JSONResponse:
        fields = [".".join(str(part) for part in err["loc"]) for err in exc.errors()]
        return JSONResponse(
            status_code=422,
            content=error_response(
                VALIDATION_ERROR, details={"fields": fields}, lang=get_lang(request),
            ),
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception(
            "unhandled_exception", method=request.method, path=request.url.path,
        )
        return JSONResponse(
            status_code=500,
            content=error_response(INTERNAL_ERROR, lang=get_lang(request)),
        )

    # -------------------------------------------------------------------------
    # CORS Middleware
    # -------------------------------------------------------------------------
    cors_origins = list(settings.cors_origins)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins,
        allow_credentials=False,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=_ALLOWED_HEADERS,
    )
    if cors_origins:
        logger.info("cors_enabled", origins=cors_origins)

    app.include_router(router)

    @app.get("/health")
    async def root_health_check() -> dict[str, str]:
        """Root health check for process supervisors."""
        return {"status": "ok"}

    return app


__all__ = ["create_app", "router"]
