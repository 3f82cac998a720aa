"""API routes implementation."""

import asyncio
from datetime import date, datetime, timezone

from fastapi import APIRouter, Depends, Query, Request, status

from shortlink.common.urls import build_base_url, build_short_url
from shortlink.database.models import UrlMapping
from shortlink.errors import ShortLinkError

from ..errors import http_error
from ..identity import get_owner_id
from .schemas import (
    ShortenRequest,
    LinkResponse,
    LinkListResponse,
    DailyCountResponse,
    PerUrlAnalyticsResponse,
    OwnerTotalsResponse,
    HealthResponse,
    ErrorResponse,
    StatisticsResponse,
)

router = APIRouter()

CORE_ERRORS = (ShortLinkError, asyncio.TimeoutError)


def _link_response(request: Request, mapping: UrlMapping) -> LinkResponse:
    config = request.app.state.config
    base_url = build_base_url(
        headers=request.headers,
        fallback_base_url=config.base_url,
        request_scheme=request.url.scheme,
        request_host=request.headers.get("host"),
    )
    short_url = build_short_url(mapping.short_code, base_url, config.path_prefix)
    return LinkResponse.from_mapping(mapping, short_url)


@router.post(
    "/shorten",
    response_model=LinkResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"model": ErrorResponse, "description": "Invalid URL"},
        401: {"model": ErrorResponse, "description": "Missing owner identity"},
        503: {"model": ErrorResponse, "description": "Allocation exhausted or storage unavailable"},
    },
    summary="Create short URL",
    description="Allocate a new short code for a URL, owned by the caller.",
)
async def shorten_url(
    request: Request,
    body: ShortenRequest,
    owner_id: str = Depends(get_owner_id),
):
    """Create a shortened URL."""
    service = request.app.state.service

    try:
        mapping = await service.create_short_link(body.url, owner_id)
    except CORE_ERRORS as e:
        raise http_error(e)

    return _link_response(request, mapping)


@router.get(
    "/links",
    response_model=LinkListResponse,
    summary="List my links",
    description="List the caller's short links, newest first.",
)
async def list_links(request: Request, owner_id: str = Depends(get_owner_id)):
    """List links owned by the caller."""
    service = request.app.state.service

    try:
        mappings = await service.list_owner_links(owner_id)
    except CORE_ERRORS as e:
        raise http_error(e)

    return LinkListResponse(
        owner_id=owner_id,
        links=[_link_response(request, m) for m in mappings],
    )


@router.get(
    "/urls/{short_code}",
    response_model=LinkResponse,
    responses={
        403: {"model": ErrorResponse, "description": "Not the owner"},
        404: {"model": ErrorResponse, "description": "Short code not found"},
    },
    summary="Get URL information",
    description="Get a link owned by the caller, including its click count.",
)
async def get_url_info(request: Request, short_code: str, owner_id: str = Depends(get_owner_id)):
    """Get information about a shortened URL."""
    service = request.app.state.service

    try:
        mapping = await service.get_link_info(short_code, owner_id)
    except CORE_ERRORS as e:
        raise http_error(e)

    return _link_response(request, mapping)


@router.get(
    "/urls/{short_code}/analytics",
    response_model=PerUrlAnalyticsResponse,
    responses={
        400: {"model": ErrorResponse, "description": "start_date after end_date"},
        403: {"model": ErrorResponse, "description": "Not the owner"},
        404: {"model": ErrorResponse, "description": "Short code not found"},
        504: {"model": ErrorResponse, "description": "Timed out"},
    },
    summary="Daily clicks for a link",
)
async def get_url_analytics(
    request: Request,
    short_code: str,
    start_date: date = Query(..., description="First day, inclusive (UTC)"),
    end_date: date = Query(..., description="Last day, inclusive (UTC)"),
    zero_fill: bool = Query(False, description="Emit zero buckets for days without clicks"),
    owner_id: str = Depends(get_owner_id),
):
    """Per-day click counts for one link."""
    service = request.app.state.service
    config = request.app.state.config

    try:
        buckets = await service.get_per_url_analytics(
            short_code,
            owner_id,
            start_date,
            end_date,
            zero_fill=zero_fill,
            timeout=config.request_timeout_seconds,
        )
    except CORE_ERRORS as e:
        raise http_error(e)

    return PerUrlAnalyticsResponse(
        short_code=short_code,
        start_date=start_date,
        end_date=end_date,
        zero_filled=zero_fill,
        buckets=[DailyCountResponse(date=b.date, count=b.count) for b in buckets],
    )


@router.get(
    "/owners/{owner_id}/analytics",
    response_model=OwnerTotalsResponse,
    responses={
        400: {"model": ErrorResponse, "description": "start_date after end_date"},
        403: {"model": ErrorResponse, "description": "Not the owner"},
        504: {"model": ErrorResponse, "description": "Timed out"},
    },
    summary="Daily clicks across an owner's links",
)
async def get_owner_analytics(
    request: Request,
    owner_id: str,
    start_date: date = Query(..., description="First day, inclusive (UTC)"),
    end_date: date = Query(..., description="Last day, inclusive (UTC)"),
    requester: str = Depends(get_owner_id),
):
    """Per-day click totals summed over every link of ``owner_id``."""
    service = request.app.state.service
    config = request.app.state.config

    try:
        totals = await service.get_owner_totals(
            owner_id,
            start_date,
            end_date,
            requester=requester,
            timeout=config.request_timeout_seconds,
        )
    except CORE_ERRORS as e:
        raise http_error(e)

    return OwnerTotalsResponse(
        owner_id=owner_id,
        start_date=start_date,
        end_date=end_date,
        totals=totals,
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

    try:
        stats = await service.get_statistics()
    except CORE_ERRORS as e:
        raise http_error(e)

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
        database="healthy" if health["database"] else "unhealthy",
        cache="healthy" if health["cache"] else "unhealthy",
        timestamp=datetime.now(timezone.utc),
    )
