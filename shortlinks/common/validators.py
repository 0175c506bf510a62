"""Validation utilities for short links."""

import re
from urllib.parse import urlparse
from typing import Tuple

MAX_URL_LENGTH = 2048
SHORT_CODE_RE = re.compile(r'[A-Za-z0-9]+')


def is_valid_url(url: str) -> Tuple[bool, str]:
    """Validate a target URL.

    Args:
        url: The URL to validate

    Returns:
        Tuple of (is_valid, error_message)
    """
    if not url or not isinstance(url, str):
        return False, "URL is required"

    if len(url) > MAX_URL_LENGTH:
        return False, f"URL is too long (max {MAX_URL_LENGTH} characters)"

    try:
        result = urlparse(url)

        # Check if scheme is http or https
        if result.scheme not in ["http", "https"]:
            return False, "URL must use http or https protocol"

        # Check if netloc (domain) exists
        if not result.netloc or not result.hostname:
            return False, "URL must have a valid domain"

        # Accessing .port raises on malformed ports like "example.com:abc"
        result.port

        return True, ""

    except ValueError as e:
        return False, f"Invalid URL format: {str(e)}"


def is_valid_short_code(short_code: str, min_length: int = 3, max_length: int = 10) -> Tuple[bool, str]:
    """Validate a custom short code.

    Args:
        short_code: The short code to validate
        min_length: Minimum length for short code
        max_length: Maximum length for short code

    Returns:
        Tuple of (is_valid, error_message)
    """
    if not short_code or not isinstance(short_code, str):
        return False, "Short code is required"

    if len(short_code) < min_length:
        return False, f"Short code must be at least {min_length} characters"

    if len(short_code) > max_length:
        return False, f"Short code must be at most {max_length} characters"

    if not SHORT_CODE_RE.fullmatch(short_code):
        return False, "Short code can only contain letters and numbers"

    return True, ""


def is_valid_validity(minutes, max_minutes: int = 525600) -> Tuple[bool, str]:
    """Validate a validity window in minutes.

    Args:
        minutes: Requested lifetime in minutes
        max_minutes: Upper bound (inclusive)

    Returns:
        Tuple of (is_valid, error_message)
    """
    # bool is an int subclass; reject it explicitly
    if isinstance(minutes, bool) or not isinstance(minutes, int):
        return False, "Validity must be an integer number of minutes"

    if minutes < 1 or minutes > max_minutes:
        return False, f"Validity must be between 1 and {max_minutes} minutes"

    return True, ""
