"""
Main entrypoint for the CampTogether API.

This module assembles the FastAPI application, sets up logging, error
handlers, rate limiting, security headers and CORS, and includes the
versioned routers.  The
``create_app`` function builds and configures the app, which is then
instantiated at module import time as ``app``.  Run it with uvicorn::

    uvicorn camptogether_api.app.main:app --reload

Every failure leaves the API as ``{"error": ..., "details"?: ...}``:
service errors keep their status code, body validation failures become
400 with a list of issues, unmatched routes 404, clients over their
request budget 429 and anything unexpected a logged, generic 500.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from .api.v1.endpoints import health
from .api.v1.router import router as v1_router
from .core.config import settings
from .core.errors import ApiError, ValidationFailed
from .core.logging_config import setup_logging
from .core.middleware import SecurityHeadersMiddleware, build_limiter, rate_limit_exceeded_handler

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(
        "%s %s starting (project=%s, emulator=%s, admins=%d)",
        settings.project_name,
        settings.api_version,
        settings.firebase_project_id,
        settings.firestore_emulator_host or "off",
        len(settings.admin_emails),
    )
    yield


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)

    @app.exception_handler(ApiError)
    async def api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
        return JSONResponse(status_code=exc.status_code, content=exc.to_body(), headers=exc.headers)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        error = ValidationFailed.from_errors(exc.errors())
        return JSONResponse(status_code=error.status_code, content=error.to_body())

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        # Unmatched routes end up here as a plain 404.
        message = "Not found" if exc.status_code == 404 else str(exc.detail)
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": message},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.error(
            "Unhandled error on %s %s: %s",
            request.method,
            request.url.path,
            exc,
            exc_info=exc,
            extra={
                "operation": "http_request",
                "method": request.method,
                "path": request.url.path,
                "error": str(exc),
            },
        )
        return JSONResponse(status_code=500, content={"error": "Internal server error"})


def create_app() -> FastAPI:
    """Create and configure a FastAPI application.

    Returns
    -------
    FastAPI
        A configured FastAPI application instance.
    """
    # Initialise logging before anything else so that imports below can
    # safely log messages.
    setup_logging(settings.log_level, fmt=settings.log_format)

    app = FastAPI(
        title=settings.project_name,
        version=settings.api_version,
        debug=settings.debug,
        lifespan=lifespan,
    )

    # The last middleware added runs first: CORS, then headers, then limits.
    app.state.limiter = build_limiter(settings)
    app.add_middleware(SlowAPIMiddleware)
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    app.include_router(health.router, tags=["health"])
    app.include_router(v1_router, prefix="/api")

    return app


# Create the application instance at import time so that tools such as
# uvicorn can discover it without calling create_app manually.
app = create_app()
