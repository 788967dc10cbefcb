"""Common utilities for shortlink."""

from .validators import is_valid_url, is_valid_short_code, is_reserved
from .headers import extract_forwarded_headers, build_base_url, get_forwarded_path_prefix, get_client_ip
from .labels import source_label, location_label
from .url_builder import build_short_url
from .logging_config import setup_logging, get_logger

__all__ = [
    "is_valid_url",
    "is_valid_short_code",
    "is_reserved",
    "extract_forwarded_headers",
    "build_base_url",
    "get_forwarded_path_prefix",
    "get_client_ip",
    "source_label",
    "location_label",
    "build_short_url",
    "setup_logging",
    "get_logger",
]
