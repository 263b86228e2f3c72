"""Short URL construction from the incoming request. No route imports to avoid circular deps."""

from starlette.requests import Request

from linkstore.common.headers import build_base_url, get_forwarded_path_prefix
from linkstore.common.url_builder import build_short_url, build_site_root


def path_prefix_for(request: Request) -> str:
    """Path prefix from X-Forwarded-Prefix (proxy) or config. Normalized: leading slash, no trailing."""
    prefix = get_forwarded_path_prefix(dict(request.headers))
    if prefix:
        return prefix
    config = request.app.state.config
    p = (getattr(config, "path_prefix", "") or "").strip().strip("/")
    return "/" + p if p else ""


def _base_url_for(request: Request) -> str:
    config = request.app.state.config
    return build_base_url(
        headers=dict(request.headers),
        fallback_base_url=config.base_url,
        request_scheme=request.url.scheme,
        request_host=request.headers.get("host"),
    )


def site_root_for(request: Request) -> str:
    """Externally visible root of the service, as shown on the homepage."""
    return build_site_root(_base_url_for(request), path_prefix_for(request))


def short_url_for(request: Request, short_code: str) -> str:
    """Externally visible short URL for short_code."""
    return build_short_url(
        short_code=short_code,
        base_url=_base_url_for(request),
        path_prefix=path_prefix_for(request),
    )
