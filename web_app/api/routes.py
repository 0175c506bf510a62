"""API routes implementation."""

import logging

from fastapi import APIRouter, Request, status
from fastapi.responses import JSONResponse
from typing import List

from .schemas import (
    ShortenRequest,
    ShortenResponse,
    URLStatsResponse,
    ClickResponse,
    StatsEntry,
    HealthResponse,
    ErrorResponse,
)
from shortlinks.errors import AllocationExhausted, ShortLinkError
from shortlinks.common.url_builder import build_short_url
from shortlinks.common.headers import build_base_url, get_forwarded_path_prefix

logger = logging.getLogger("shortlinks.web")

# Mounted under /api
router = APIRouter()

# Mounted at the root, next to the redirect route
links_router = APIRouter()


def error_response(status_code: int, error: str, detail: str = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(error=error, detail=detail).model_dump(),
    )


def _short_url(request: Request, short_code: str) -> str:
    """Build the public short URL for a code as seen by this request's client."""
    config = request.app.state.config
    base_url = build_base_url(
        headers=dict(request.headers),
        fallback_base_url=config.base_url,
        request_scheme=request.url.scheme,
        request_host=request.headers.get("host"),
    )
    path_prefix = get_forwarded_path_prefix(dict(request.headers)) or config.path_prefix
    return build_short_url(
        short_code=short_code,
        base_url=base_url,
        path_prefix=path_prefix,
    )


@links_router.post(
    "/shorten",
    response_model=ShortenResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"model": ErrorResponse, "description": "Invalid request or short code taken"},
        500: {"model": ErrorResponse, "description": "Internal server error"},
    },
    summary="Create short URL",
    description="Create a shortened URL valid for `validity` minutes. Optionally provide a custom short code.",
)
async def shorten_url(request: Request, body: ShortenRequest):
    """Create a shortened URL."""
    service = request.app.state.service

    try:
        result = service.create(
            target=body.url,
            validity_minutes=body.validity,
            custom_token=body.shortcode,
        )
    except AllocationExhausted as e:
        logger.error(f"Short code allocation failed: {e}")
        return error_response(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            e.error_kind,
            "Unable to allocate a short code, try again or supply one",
        )
    except ShortLinkError as e:
        return error_response(status.HTTP_400_BAD_REQUEST, e.error_kind, str(e))
    except Exception:
        logger.exception("Unexpected error while shortening URL")
        return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "internal_error")

    return ShortenResponse(
        shortlink=_short_url(request, result["token"]),
        shortcode=result["token"],
        expiry=result["expires_at"],
    )


@links_router.get(
    "/shorturls/{short_code}",
    response_model=URLStatsResponse,
    responses={
        404: {"model": ErrorResponse, "description": "Short code not found"},
    },
    summary="Get URL statistics",
    description="Get a shortened URL's details and every recorded click in order.",
)
async def get_url_stats(request: Request, short_code: str):
    """Get statistics for one shortened URL."""
    service = request.app.state.service

    info = service.stats(short_code)

    if not info:
        return error_response(
            status.HTTP_404_NOT_FOUND,
            "not_found",
            f"Short code '{short_code}' not found",
        )

    return URLStatsResponse(
        shortcode=info["token"],
        short_url=_short_url(request, info["token"]),
        original_url=info["target"],
        created_at=info["created_at"],
        expiry_date=info["expires_at"],
        total_clicks=info["hit_count"],
        clicks=[
            ClickResponse(
                timestamp=click.timestamp,
                location=click.country_hint,
                referrer=click.referrer,
                ip=click.source_address,
                user_agent=click.user_agent,
            )
            for click in info["clicks"]
        ],
    )


@router.get(
    "/stats",
    response_model=List[StatsEntry],
    summary="Get statistics",
    description="Summaries of every stored short URL, including expired ones not yet reaped.",
)
async def get_statistics(request: Request):
    """Get statistics for all short URLs."""
    service = request.app.state.service

    return [
        StatsEntry(
            shortcode=entry["token"],
            short_url=_short_url(request, entry["token"]),
            original_url=entry["target"],
            created_at=entry["created_at"],
            expiry_time=entry["expires_at"],
            total_clicks=entry["hit_count"],
            clicks_count=entry["click_count"],
            is_expired=entry["is_expired"],
        )
        for entry in service.all_stats()
    ]


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health check",
    description="Check if the service is healthy.",
)
async def health_check(request: Request):
    """Health check endpoint for load balancers and monitoring."""
    service = request.app.state.service

    health = service.health()

    return HealthResponse(
        status=health["status"],
        timestamp=health["timestamp"],
        total_urls=health["total_urls"],
        uptime=health["uptime"],
    )
