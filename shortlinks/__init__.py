"""Core business logic for expiring short links."""

from .shortcode import ShortCodeGenerator
from .service import LinkService, Resolution, ResolveOutcome
from .reaper import ExpiryReaper
from .errors import ShortLinkError, ValidationError, TokenTaken, AllocationExhausted

__all__ = [
    "ShortCodeGenerator",
    "LinkService",
    "Resolution",
    "ResolveOutcome",
    "ExpiryReaper",
    "ShortLinkError",
    "ValidationError",
    "TokenTaken",
    "AllocationExhausted",
]
