"""Forwarded headers middleware."""

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from typing import Callable

from shortlink.common.headers import extract_forwarded_headers, get_client_ip


class ForwardedHeadersMiddleware(BaseHTTPMiddleware):
    """Expose X-Forwarded-* values and the resolved client IP on request.state."""

    async def dispatch(self, request: Request, call_next: Callable):
        forwarded = extract_forwarded_headers(request.headers)
        request.state.forwarded_proto = forwarded["forwarded_proto"]
        request.state.forwarded_host = forwarded["forwarded_host"]
        request.state.forwarded_for = forwarded["forwarded_for"]

        peer_host = request.client.host if request.client else None
        request.state.client_ip = get_client_ip(request.headers, peer_host)

        return await call_next(request)
