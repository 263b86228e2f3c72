"""Web interface routes implementation."""

import os
from datetime import datetime
from typing import Optional
from urllib.parse import quote

from fastapi import APIRouter, Request, Form, HTTPException, status
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.templating import Jinja2Templates

from linkstore.common.validators import is_valid_short_code
from linkstore.store import ShortCodeCollisionError
from ..middleware.headers import client_ip_for
from ..request_urls import path_prefix_for, short_url_for, site_root_for

router = APIRouter()

# Setup Jinja2 templates
template_dir = os.path.join(os.path.dirname(__file__), "..", "templates")
templates = Jinja2Templates(directory=template_dir)

TOP_LIMIT_CHOICES = (10, 25, 50, 100, 0)


def format_created(value: datetime) -> str:
    """Creation time as shown on the pages (local time, day first)."""
    return value.astimezone().strftime("%d.%m.%Y %H:%M")


def activity_icon(visits: int) -> str:
    """Icon for the top page by visit count."""
    if visits >= 100:
        return "🔥"
    if visits >= 50:
        return "🚀"
    if visits >= 10:
        return "⚡"
    return "📈"


templates.env.filters["created"] = format_created
templates.env.filters["activity"] = activity_icon


def _render(request: Request, name: str, context: dict, status_code: int = 200) -> HTMLResponse:
    context = {"prefix": path_prefix_for(request), **context}
    return templates.TemplateResponse(request, name, context, status_code=status_code)


def _rows(request: Request, links) -> list:
    return [{"link": link, "short_url": short_url_for(request, link.short_code)} for link in links]


def _parse_limit(raw: Optional[str], default: int) -> int:
    """Limit from the query string; anything unparsable falls back to default."""
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        return default


@router.get("/", response_class=HTMLResponse, include_in_schema=False)
async def homepage(request: Request, result: Optional[str] = None):
    """Serve the form, with the short URL of the previous submission if any."""
    config = request.app.state.config
    return _render(request, "index.html", {
        "result": result,
        "current_domain": site_root_for(request),
        "data_file": config.data_file,
    })


@router.post("/shorten", include_in_schema=False)
async def create_short_url_web(request: Request, url: str = Form("")):
    """Handle form submission to create a short URL."""
    service = request.app.state.service
    prefix = path_prefix_for(request)

    if not url.strip():
        return RedirectResponse(url=f"{prefix}/", status_code=status.HTTP_303_SEE_OTHER)

    try:
        link = await service.create_short_link(
            original_url=url,
            owner_ip=client_ip_for(request),
        )
    except ShortCodeCollisionError as e:
        return _render(request, "error.html", {"error_message": str(e)}, status_code=503)
    except ValueError as e:
        return _render(request, "error.html", {"error_message": str(e)}, status_code=400)

    short_url = short_url_for(request, link.short_code)
    return RedirectResponse(
        url=f"{prefix}/?result={quote(short_url, safe='')}",
        status_code=status.HTTP_303_SEE_OTHER,
    )


@router.get("/shorten", include_in_schema=False)
async def shorten_get(request: Request):
    """The form posts here; a plain GET goes back to the form."""
    return RedirectResponse(url=f"{path_prefix_for(request)}/", status_code=status.HTTP_302_FOUND)


@router.get("/my", response_class=HTMLResponse, include_in_schema=False)
async def my_links(request: Request):
    """Links created from the caller's IP, most visited first."""
    service = request.app.state.service
    client_ip = client_ip_for(request)

    links = await service.list_my_links(client_ip)

    return _render(request, "my.html", {
        "client_ip": client_ip,
        "rows": _rows(request, links),
    })


@router.api_route("/delete/{short_code}", methods=["GET", "POST"], include_in_schema=False)
async def delete_link_web(request: Request, short_code: str):
    """Delete a link of the caller and go back to the list, whatever the outcome."""
    service = request.app.state.service

    await service.delete_link(short_code, client_ip_for(request))

    return RedirectResponse(
        url=f"{path_prefix_for(request)}/my",
        status_code=status.HTTP_303_SEE_OTHER,
    )


@router.get("/stats", response_class=HTMLResponse, include_in_schema=False)
async def stats_page(request: Request):
    """Totals and the most visited links."""
    service = request.app.state.service
    config = request.app.state.config

    stats = await service.get_statistics()
    top = await service.top_links(config.stats_top_count)

    return _render(request, "stats.html", {
        "stats": stats,
        "rows": _rows(request, top),
        "top_count": config.stats_top_count,
    })


@router.get("/top", response_class=HTMLResponse, include_in_schema=False)
async def top_page(request: Request, limit: Optional[str] = None):
    """Ranking of all links with a selectable size."""
    service = request.app.state.service
    config = request.app.state.config

    selected = _parse_limit(limit, config.top_default_limit)
    top = await service.top_links(selected)
    stats = await service.get_statistics()

    return _render(request, "top.html", {
        "rows": _rows(request, top),
        "selected": selected,
        "choices": TOP_LIMIT_CHOICES,
        "stats": stats,
    })


@router.get("/health", include_in_schema=False)
async def health_check_web(request: Request):
    """Health check endpoint (simple version for load balancers)."""
    service = request.app.state.service

    health = await service.health_check()

    if health["overall"]:
        return {"status": "healthy"}
    else:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Service unhealthy",
        )


@router.get("/{short_code}", include_in_schema=False)
async def redirect_to_url(request: Request, short_code: str):
    """Redirect to the original URL."""
    service = request.app.state.service

    original_url = None
    valid, _ = is_valid_short_code(short_code)
    if valid:
        # Counts the visit; the snapshot is saved in the background
        original_url = await service.resolve(short_code)

    if not original_url:
        return _render(
            request,
            "error.html",
            {"error_message": f"Short code '{short_code}' not found"},
            status_code=404,
        )

    # Perform 302 redirect (temporary redirect for tracking)
    return RedirectResponse(url=original_url, status_code=status.HTTP_302_FOUND)
