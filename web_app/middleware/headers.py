"""Forwarded headers middleware."""

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from typing import Callable

from linkstore.common.headers import get_client_ip


class ForwardedHeadersMiddleware(BaseHTTPMiddleware):
    """Middleware resolving the client IP once per request."""

    async def dispatch(self, request: Request, call_next: Callable):
        """Store the client IP on request.state for routes and logging."""
        request.state.client_ip = client_ip_for(request)

        response = await call_next(request)
        return response


def client_ip_for(request: Request) -> str:
    """Client IP of the request, which decides link ownership."""
    cached = getattr(request.state, "client_ip", None)
    if cached:
        return cached
    peer_host = request.client.host if request.client else None
    return get_client_ip(dict(request.headers), peer_host)
