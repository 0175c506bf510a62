"""Error types raised by the short-link core."""


class ShortLinkError(ValueError):
    """Base class for errors reported to API callers.

    Each subclass carries an ``error_kind`` string that the HTTP layer
    returns verbatim so clients can branch on it.
    """

    error_kind = "error"

    def __init__(self, message: str, error_kind: str = None):
        super().__init__(message)
        if error_kind:
            self.error_kind = error_kind


class ValidationError(ShortLinkError):
    """Malformed URL, out-of-range validity or malformed custom token."""

    error_kind = "invalid_request"


class TokenTaken(ShortLinkError):
    """Requested custom token is already present in the store."""

    error_kind = "shortcode_taken"


class AllocationExhausted(ShortLinkError):
    """No free token was found within the configured number of attempts."""

    error_kind = "allocation_exhausted"
