"""
Error classes for the shortlink service.

Each error carries the HTTP status code the web layer answers with, so
routes can simply let them propagate.
"""

from typing import Optional, Dict, Any


class ShortLinkError(Exception):
    """
    Base error class.

    Attributes:
        status_code: HTTP status code (default: 500)
        message: Error message (default: "Internal server error")
        details: Optional additional error details
    """
    status_code: int = 500
    message: str = "Internal server error"

    def __init__(self, message: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        """
        Initialize error.

        Args:
            message: Error message (overrides default)
            details: Optional additional error details
        """
        self.message = message or self.message
        self.details = details or {}
        super().__init__(self.message)


class InvalidUrlError(ShortLinkError):
    """400 Malformed URL, rejected before storage."""
    status_code = 400
    message = "Invalid URL"


class InvalidRequestError(ShortLinkError):
    """400 Request rejected for a reason other than the URL itself."""
    status_code = 400
    message = "Invalid request"


class NotFoundError(ShortLinkError):
    """404 Unknown short code."""
    status_code = 404
    message = "Short code not found"


class DuplicateCodeError(ShortLinkError):
    """409 Short code already issued (or retired too recently)."""
    status_code = 409
    message = "Short code already exists"


class CapacityExhaustedError(ShortLinkError):
    """503 No free short code found within the retry budget."""
    status_code = 503
    message = "Unable to allocate a unique short code"
