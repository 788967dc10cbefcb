"""Core business logic for shortlink."""

from .shortcode import ShortCodeGenerator
from .clicks import ClickRecorder
from .resolver import RedirectionResolver, Resolution, ResolveState
from .service import URLShortenerService

__all__ = [
    "ShortCodeGenerator",
    "ClickRecorder",
    "RedirectionResolver",
    "Resolution",
    "ResolveState",
    "URLShortenerService",
]
