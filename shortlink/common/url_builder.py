"""Absolute short URL construction."""

from urllib.parse import quote


def build_short_url(short_code: str, base_url: str, path_prefix: str = "") -> str:
    """Join base URL, optional path prefix and code.

    ``build_short_url("abc123", "https://sho.rt/", "/s/")`` gives
    ``https://sho.rt/s/abc123``. The code is percent-quoted.
    """
    parts = [base_url.rstrip("/"), path_prefix.strip("/"), quote(short_code, safe="")]
    return "/".join(part for part in parts if part)
