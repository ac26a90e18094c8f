"""
Main entrypoint for the City CRUD API.

This module assembles the FastAPI application: it sets up logging,
builds the city store and service, registers the exception handlers
that give every error response the same ``{"error", "message"}`` shape
and includes the versioned routers.  The ``create_app`` function builds
and configures the app, which is then instantiated at module import
time as ``app``, e.g.::

    uvicorn city_crud_api.app.main:app --reload
"""

import logging
from http import HTTPStatus
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .api.v1.router import router as v1_router
from .core.config import Settings, settings as default_settings
from .core.errors import CityError, CityValidationError
from .core.logging_config import setup_logging
from .core.store import CityStore, build_store
from .services.city_service import CityService

logger = logging.getLogger(__name__)


def _validation_message(exc: RequestValidationError) -> str:
    """Summarise the first pydantic error as a single sentence."""
    errors = exc.errors()
    if not errors:
        return "Request body is invalid."
    first = errors[0]
    if first.get("type") == "json_invalid":
        return "Request body must be valid JSON."
    fields = [str(part) for part in first.get("loc", ()) if part != "body"]
    msg = first.get("msg", "is invalid")
    if fields:
        return f'Field "{".".join(fields)}": {msg}.'
    return f"Request body: {msg}."


def register_exception_handlers(app: FastAPI) -> None:
    """Attach handlers that render every failure as ``{error, message}``."""

    @app.exception_handler(CityError)
    async def city_error_handler(request: Request, exc: CityError) -> JSONResponse:
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        error = CityValidationError(_validation_message(exc))
        return JSONResponse(status_code=error.status_code, content=error.to_dict())

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        try:
            phrase = HTTPStatus(exc.status_code).phrase
        except ValueError:
            phrase = "Error"
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": phrase, "message": str(exc.detail)},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
        # Full traceback goes to the log only; the client gets a generic message.
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "error": "Internal Server Error",
                "message": "Something went wrong on the server.",
            },
        )


def create_app(settings: Optional[Settings] = None, store: Optional[CityStore] = None) -> FastAPI:
    """Create and configure a FastAPI application.

    Parameters
    ----------
    settings : Optional[Settings]
        Settings to use instead of the ones read from the environment.
    store : Optional[CityStore]
        Store to use instead of the one selected by
        ``settings.store_backend``.

    Returns
    -------
    FastAPI
        A configured FastAPI application instance.  The service is
        available as ``app.state.city_service``.
    """
    settings = settings or default_settings
    # Initialise logging before anything else so that the code below can
    # safely log messages.
    setup_logging(settings.log_level, settings.log_file)

    app = FastAPI(title=settings.project_name, version=settings.api_version)
    app.state.settings = settings
    app.state.city_service = CityService(store if store is not None else build_store(settings))

    register_exception_handlers(app)

    @app.get("/health", tags=["health"])
    async def health_check() -> dict:
        return {"status": "ok"}

    app.include_router(v1_router, prefix=settings.api_prefix.rstrip("/"))

    @app.on_event("startup")
    async def startup_event() -> None:
        if settings.seed_demo_data:
            app.state.city_service.seed_demo_data()
        logger.info(
            "%s %s ready, cities served at %s/cities",
            settings.project_name,
            settings.api_version,
            settings.api_prefix.rstrip("/"),
        )

    return app


# Create the application instance at import time so that tools such as
# uvicorn can discover it without calling create_app manually.
app = create_app()
