"""Per-request helpers shared by the route modules."""

from typing import Tuple

from fastapi import Request

from shortlink.common.headers import build_base_url, get_forwarded_path_prefix
from shortlink.common.labels import source_label, location_label
from shortlink.common.url_builder import build_short_url


def path_prefix_for(request: Request) -> str:
    """Path prefix from X-Forwarded-Prefix (proxy) or config. Normalized: leading slash, no trailing."""
    prefix = get_forwarded_path_prefix(request.headers)
    if prefix:
        return prefix
    p = (getattr(request.app.state.config, "path_prefix", "") or "").strip().strip("/")
    return "/" + p if p else ""


def short_url_for(request: Request, code: str) -> str:
    """Absolute short URL for a code as seen by the requesting client."""
    base_url = build_base_url(
        headers=request.headers,
        fallback_base_url=request.app.state.config.base_url,
        request_scheme=request.url.scheme,
        request_host=request.headers.get("host"),
    )
    return build_short_url(code, base_url, path_prefix_for(request))


def click_labels(request: Request) -> Tuple[str, str]:
    """(source, location) labels for a redirect request."""
    client_ip = getattr(request.state, "client_ip", None)
    if client_ip is None and request.client:
        client_ip = request.client.host
    return (
        source_label(request.headers.get("referer"), request.url.query),
        location_label(request.headers, client_ip),
    )
