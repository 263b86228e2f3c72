"""API routes implementation."""

from fastapi import APIRouter, Request, HTTPException, Response, status
from datetime import datetime, timezone
from typing import Optional

from .schemas import (
    ShortenRequest,
    ShortenResponse,
    LinkResponse,
    LinkListResponse,
    HealthResponse,
    ErrorResponse,
    StatisticsResponse,
)
from linkstore.store import ShortCodeCollisionError
from ..middleware.headers import client_ip_for
from ..request_urls import short_url_for

router = APIRouter()


def _link_response(request: Request, link) -> LinkResponse:
    return LinkResponse(
        short_code=link.short_code,
        short_url=short_url_for(request, link.short_code),
        original_url=link.original_url,
        created_at=link.created_at,
        visits=link.visits,
    )


@router.post(
    "/shorten",
    response_model=ShortenResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Invalid request"},
        503: {"model": ErrorResponse, "description": "No free short code"},
    },
    summary="Create short URL",
    description="Create a shortened URL owned by the caller's IP.",
)
async def shorten_url(request: Request, body: ShortenRequest):
    """Create a shortened URL."""
    service = request.app.state.service

    try:
        link = await service.create_short_link(
            original_url=body.url,
            owner_ip=client_ip_for(request),
        )
    except ShortCodeCollisionError as e:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=str(e),
        )
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        )

    return ShortenResponse(
        short_code=link.short_code,
        short_url=short_url_for(request, link.short_code),
        original_url=link.original_url,
        created_at=link.created_at,
    )


@router.get(
    "/links/{short_code}",
    response_model=LinkResponse,
    responses={
        404: {"model": ErrorResponse, "description": "Short code not found"},
    },
    summary="Get link information",
    description="Get a link and its visit count without counting a visit.",
)
async def get_link_info(request: Request, short_code: str):
    """Get information about a short link."""
    service = request.app.state.service

    link = await service.get_link(short_code)

    if not link:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Short code '{short_code}' not found",
        )

    return _link_response(request, link)


@router.delete(
    "/links/{short_code}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete link",
    description="Delete a link created from the caller's IP. Always answers 204.",
)
async def delete_link(request: Request, short_code: str):
    """Delete a link owned by the caller."""
    service = request.app.state.service

    await service.delete_link(short_code, client_ip_for(request))

    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get(
    "/my",
    response_model=LinkListResponse,
    summary="List my links",
    description="Links created from the caller's IP, most visited first.",
)
async def list_my_links(request: Request):
    """List the caller's links."""
    service = request.app.state.service

    links = await service.list_my_links(client_ip_for(request))

    return LinkListResponse(
        count=len(links),
        links=[_link_response(request, link) for link in links],
    )


@router.get(
    "/top",
    response_model=LinkListResponse,
    summary="Top links",
    description="Most visited links, newest first on ties. limit=0 returns all.",
)
async def top_links(request: Request, limit: Optional[int] = None):
    """Get the most visited links."""
    service = request.app.state.service
    config = request.app.state.config

    if limit is None:
        limit = config.top_default_limit

    links = await service.top_links(limit)

    return LinkListResponse(
        count=len(links),
        links=[_link_response(request, link) for link in links],
    )


@router.get(
    "/stats",
    response_model=StatisticsResponse,
    summary="Get statistics",
    description="Get service-wide statistics.",
)
async def get_statistics(request: Request):
    """Get service statistics."""
    service = request.app.state.service

    stats = await service.get_statistics()

    return StatisticsResponse(**stats)


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health check",
    description="Check if the service is healthy.",
)
async def health_check(request: Request):
    """Health check endpoint for load balancers and monitoring."""
    service = request.app.state.service

    health = await service.health_check()

    return HealthResponse(
        status="healthy" if health["overall"] else "unhealthy",
        store="healthy" if health["store"] else "unhealthy",
        autosave="healthy" if health["autosave"] else "stopped",
        timestamp=datetime.now(timezone.utc),
    )
