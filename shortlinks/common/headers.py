"""Header parsing utilities for short links."""

from typing import Dict, Optional

from ..store.models import ClickMetadata

COUNTRY_HEADERS = ("cf-ipcountry", "x-country-code")


def extract_forwarded_headers(headers: Dict[str, str]) -> Dict[str, Optional[str]]:
    """Extract X-Forwarded-* headers from request.

    Args:
        headers: Request headers dictionary

    Returns:
        Dictionary with forwarded_proto, forwarded_host, forwarded_for
    """
    # Convert headers to lowercase for case-insensitive lookup
    headers_lower = {k.lower(): v for k, v in headers.items()}

    return {
        "forwarded_proto": headers_lower.get("x-forwarded-proto"),
        "forwarded_host": headers_lower.get("x-forwarded-host"),
        "forwarded_for": headers_lower.get("x-forwarded-for"),
    }


def build_base_url(
    headers: Dict[str, str],
    fallback_base_url: str,
    request_scheme: Optional[str] = None,
    request_host: Optional[str] = None,
) -> str:
    """Build base URL from headers or fallback.

    Priority:
    1. X-Forwarded-Proto + X-Forwarded-Host
    2. Request scheme + host
    3. Fallback base URL from config

    Args:
        headers: Request headers
        fallback_base_url: Fallback base URL from configuration
        request_scheme: Request scheme (http/https)
        request_host: Request host

    Returns:
        Base URL (e.g., https://example.com)
    """
    forwarded = extract_forwarded_headers(headers)

    # Try X-Forwarded headers first (from proxy)
    if forwarded["forwarded_proto"] and forwarded["forwarded_host"]:
        proto = forwarded["forwarded_proto"]
        host = forwarded["forwarded_host"]
        return f"{proto}://{host}"

    # Try request scheme and host
    if request_scheme and request_host:
        return f"{request_scheme}://{request_host}"

    # Fall back to configured base URL
    return fallback_base_url.rstrip("/")


def get_forwarded_path_prefix(headers: Dict[str, str]) -> str:
    """Get path prefix from X-Forwarded-Prefix (set by a proxy that strips a prefix).

    Returns normalized prefix with leading slash, no trailing (e.g. '/s'), or '' if not set.
    """
    key = "x-forwarded-prefix"
    for k, v in headers.items():
        if k.lower() == key and v:
            p = v.strip().strip("/")
            return "/" + p if p else ""
    return ""


def extract_click_metadata(headers: Dict[str, str], peer_address: Optional[str] = None) -> ClickMetadata:
    """Build click metadata from request headers.

    The source address is the first X-Forwarded-For hop when present,
    otherwise the peer address of the connection.

    Args:
        headers: Request headers
        peer_address: Address of the connecting client

    Returns:
        ClickMetadata for the redirect
    """
    headers_lower = {k.lower(): v for k, v in headers.items()}

    source_address = peer_address
    forwarded_for = headers_lower.get("x-forwarded-for")
    if forwarded_for:
        first_hop = forwarded_for.split(",")[0].strip()
        if first_hop:
            source_address = first_hop

    country_hint = None
    for name in COUNTRY_HEADERS:
        value = (headers_lower.get(name) or "").strip()
        if value:
            country_hint = value.upper()
            break

    return ClickMetadata(
        source_address=source_address,
        user_agent=headers_lower.get("user-agent"),
        referrer=headers_lower.get("referer"),
        country_hint=country_hint,
    )
