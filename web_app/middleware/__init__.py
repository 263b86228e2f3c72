"""Middleware for the link shortener web app."""

from .headers import ForwardedHeadersMiddleware, client_ip_for
from .logging import LoggingMiddleware

__all__ = ["ForwardedHeadersMiddleware", "LoggingMiddleware", "client_ip_for"]
