"""Validation utilities for shortlink."""

import re
from urllib.parse import urlparse
from typing import Tuple

MAX_URL_LENGTH = 2048

# Paths served by the app itself; a short code with one of these names
# would be shadowed by the route.
RESERVED_WORDS = frozenset({
    "api", "health", "admin", "static", "assets", "favicon",
    "robots", "sitemap", "create", "delete", "list", "stats", "shorten",
    "docs", "redoc", "openapi",
})

_SHORT_CODE_RE = re.compile(r'^[a-zA-Z0-9_-]+$')


def is_reserved(short_code: str) -> bool:
    """Check if a short code collides with a reserved route name."""
    return short_code.lower() in RESERVED_WORDS


def is_valid_url(url: str) -> Tuple[bool, str]:
    """Validate a URL.

    Args:
        url: The URL to validate

    Returns:
        Tuple of (is_valid, error_message)
    """
    if not url or not isinstance(url, str):
        return False, "URL is required"

    if len(url) > MAX_URL_LENGTH:
        return False, f"URL is too long (max {MAX_URL_LENGTH} characters)"

    if any(ch.isspace() or ord(ch) < 32 for ch in url):
        return False, "URL must not contain whitespace or control characters"

    try:
        result = urlparse(url)

        # Check if scheme is http or https
        if result.scheme not in ["http", "https"]:
            return False, "URL must use http or https protocol"

        # Check if netloc (domain) exists
        if not result.netloc or not result.hostname:
            return False, "URL must have a valid domain"

        # Raises ValueError on an out-of-range or non-numeric port
        result.port

        return True, ""

    except ValueError as e:
        return False, f"Invalid URL format: {str(e)}"


def is_valid_short_code(short_code: str, min_length: int = 4, max_length: int = 20) -> Tuple[bool, str]:
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

    if not _SHORT_CODE_RE.match(short_code):
        return False, "Short code can only contain letters, numbers, hyphens, and underscores"

    if is_reserved(short_code):
        return False, f"'{short_code}' is a reserved word and cannot be used"

    return True, ""
