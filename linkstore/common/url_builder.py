"""URL building utilities for the link shortener."""


def build_site_root(base_url: str, path_prefix: str = "") -> str:
    """Externally visible root of the service, without trailing slash.

    Args:
        base_url: Base URL (e.g., https://example.com)
        path_prefix: Optional path prefix (e.g., /s)
    """
    root = base_url.rstrip("/")
    prefix = path_prefix.strip("/")
    return f"{root}/{prefix}" if prefix else root


def build_short_url(short_code: str, base_url: str, path_prefix: str = "") -> str:
    """Short URL under which short_code redirects."""
    return f"{build_site_root(base_url, path_prefix)}/{short_code}"
