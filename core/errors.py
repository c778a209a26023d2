# ============================================================================
# ERROR TAXONOMY
# ============================================================================
# STATUS: Core - Domain exceptions with HTTP status mapping
# PURPOSE: One exception per failure class; rendered by main.py handlers
# CREATED: 02 SEP 2026
# ============================================================================
"""
Error Taxonomy

Services raise these exceptions; the application-level exception handler
turns each into a JSON body ``{"ok": false, "error": message}`` with the
exception's status code. Anything else that escapes a handler becomes a
generic 500.
"""

from typing import Any, Dict


class EdgeError(Exception):
    """Base class for expected, client-visible failures."""

    status_code: int = 500
    default_message: str = "Server error"

    def __init__(self, message: str = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        return {"ok": False, "error": self.message}


class InvalidRequest(EdgeError):
    """Malformed or missing input."""
    status_code = 400
    default_message = "Invalid request"


class CaptchaFailed(EdgeError):
    status_code = 400
    default_message = "Captcha failed"


class Forbidden(EdgeError):
    """Download target outside the asset host allow-list."""
    status_code = 400
    default_message = "Disallowed asset host"


class NotFound(EdgeError):
    status_code = 404
    default_message = "Item not found"


class PayloadTooLarge(EdgeError):
    status_code = 413
    default_message = "File too large"


class UnsupportedMediaType(EdgeError):
    status_code = 415
    default_message = "Use multipart/form-data"


class RateLimited(EdgeError):
    """Repeat action inside the rate-limit window (flow control, not a fault)."""
    status_code = 429
    default_message = "Rate limited"


class AlreadyRated(RateLimited):
    default_message = "Already rated this item"


class UpstreamUnavailable(EdgeError):
    """The catalog snapshot could not be fetched."""
    status_code = 502
    default_message = "Upstream fetch failed"


class UpstreamError(EdgeError):
    """A release, upload, or issue call against the repository host failed."""
    status_code = 502
    default_message = "Upstream request failed"


__all__ = [
    "EdgeError",
    "InvalidRequest",
    "CaptchaFailed",
    "Forbidden",
    "NotFound",
    "PayloadTooLarge",
    "UnsupportedMediaType",
    "RateLimited",
    "AlreadyRated",
    "UpstreamUnavailable",
    "UpstreamError",
]
