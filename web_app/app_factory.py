"""FastAPI application factory."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from .api import api_router, links_router
from .api.routes import error_response
from .web import web_router
from .middleware.logging import LoggingMiddleware

logger = logging.getLogger("shortlinks.web")

# Body fields whose validation failures map to a specific error kind
FIELD_ERROR_KINDS = {
    "url": "invalid_url",
    "validity": "invalid_validity",
    "shortcode": "invalid_shortcode",
}

HTTP_ERROR_KINDS = {
    404: "not_found",
    405: "method_not_allowed",
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Start the expiry reaper with the app and stop it on shutdown."""
    reaper = app.state.reaper

    logger.info("Starting short-link service...")
    if reaper is not None:
        reaper.start()

    yield

    logger.info("Shutting down short-link service...")
    if reaper is not None:
        await reaper.stop()
    logger.info("Service stopped")


async def request_validation_handler(request: Request, exc: RequestValidationError):
    """Report malformed request bodies as 400 with an error kind."""
    error_kind = "invalid_request"
    for error in exc.errors():
        loc = error.get("loc", ())
        field = loc[1] if len(loc) > 1 and loc[0] == "body" else None
        if field in FIELD_ERROR_KINDS:
            error_kind = FIELD_ERROR_KINDS[field]
            break

    messages = "; ".join(
        f"{'.'.join(str(p) for p in error.get('loc', ()))}: {error.get('msg')}"
        for error in exc.errors()
    )
    return error_response(status.HTTP_400_BAD_REQUEST, error_kind, messages)


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Report routing errors (unknown path, wrong method) in the JSON error shape."""
    if exc.status_code == status.HTTP_404_NOT_FOUND:
        logger.warning(f"Route not found: {request.method} {request.url.path}")
        detail = "Route not found"
    else:
        detail = str(exc.detail)
    response = error_response(exc.status_code, HTTP_ERROR_KINDS.get(exc.status_code, "http_error"), detail)
    if exc.headers:
        response.headers.update(exc.headers)
    return response


async def unhandled_exception_handler(request: Request, exc: Exception):
    """Last-resort handler; never exposes exception details to clients."""
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "internal_error")


def create_app(
    service_instance,
    config,
    reaper_instance=None,
) -> FastAPI:
    """Create and configure FastAPI application.

    Args:
        service_instance: LinkService instance
        config: Configuration instance
        reaper_instance: Optional ExpiryReaper run for the app's lifetime

    Returns:
        Configured FastAPI app
    """
    app = FastAPI(
        title="Short Links",
        description="Expiring URL shortening service with click statistics",
        version="1.0.0",
        docs_url="/api/docs",
        redoc_url="/api/redoc",
        lifespan=lifespan,
    )

    # Store instances in app state for access in routes
    app.state.service = service_instance
    app.state.reaper = reaper_instance
    app.state.config = config

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(LoggingMiddleware)

    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    app.include_router(api_router, prefix="/api", tags=["API"])
    app.include_router(links_router, tags=["Links"])
    # Catch-all /{short_code} must be registered last
    app.include_router(web_router, tags=["Redirect"])

    return app
