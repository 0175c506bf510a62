"""Redirect route implementation."""

from fastapi import APIRouter, Request, status
from fastapi.responses import RedirectResponse

from shortlinks.service import ResolveOutcome
from shortlinks.common.headers import extract_click_metadata
from ..api.routes import error_response

router = APIRouter()


@router.get("/{short_code}", include_in_schema=False)
async def redirect_to_url(request: Request, short_code: str):
    """Redirect to the original URL and record the click."""
    service = request.app.state.service

    metadata = extract_click_metadata(
        dict(request.headers),
        peer_address=request.client.host if request.client else None,
    )
    resolution = service.resolve(short_code, metadata)

    if resolution.outcome is ResolveOutcome.NOT_FOUND:
        return error_response(
            status.HTTP_404_NOT_FOUND,
            "not_found",
            f"Short code '{short_code}' not found",
        )

    if resolution.outcome is ResolveOutcome.GONE:
        return error_response(
            status.HTTP_410_GONE,
            "gone",
            f"Short code '{short_code}' has expired",
        )

    return RedirectResponse(url=resolution.target, status_code=status.HTTP_302_FOUND)
