"""Header parsing utilities for the link shortener."""

from typing import Dict, Optional

DEFAULT_PORTS = {"http": ":80", "https": ":443"}


def header_value(headers: Dict[str, str], name: str) -> Optional[str]:
    """Case-insensitive lookup of one header; blank values count as absent."""
    name = name.lower()
    for key, value in headers.items():
        if key.lower() == name and value and value.strip():
            return value.strip()
    return None


def get_client_ip(headers: Dict[str, str], peer_host: Optional[str] = None) -> str:
    """Resolve the requester's IP, which also identifies link ownership.

    The first X-Forwarded-For entry wins, then the transport peer.

    Returns:
        Client IP, or "unknown" when neither source is available
    """
    forwarded_for = header_value(headers, "x-forwarded-for")
    if forwarded_for:
        first = forwarded_for.split(",")[0].strip()
        if first:
            return first

    return peer_host or "unknown"


def build_base_url(
    headers: Dict[str, str],
    fallback_base_url: str,
    request_scheme: Optional[str] = None,
    request_host: Optional[str] = None,
) -> str:
    """Scheme and host under which clients reach the service.

    A proxy's X-Forwarded-Proto/X-Forwarded-Host pair is used when both are
    present, then the request's own scheme and Host, then the configured
    fallback. Default ports are dropped from the host.

    Returns:
        Base URL without trailing slash (e.g., https://example.com)
    """
    proto = header_value(headers, "x-forwarded-proto")
    host = header_value(headers, "x-forwarded-host")
    if not (proto and host):
        proto, host = request_scheme, request_host

    if proto and host:
        suffix = DEFAULT_PORTS.get(proto)
        if suffix and host.endswith(suffix):
            host = host[:-len(suffix)]
        return f"{proto}://{host}"

    return fallback_base_url.rstrip("/")


def get_forwarded_path_prefix(headers: Dict[str, str]) -> str:
    """Path prefix announced by a proxy that strips it, e.g. '/s', or ''."""
    prefix = (header_value(headers, "x-forwarded-prefix") or "").strip("/")
    return "/" + prefix if prefix else ""
