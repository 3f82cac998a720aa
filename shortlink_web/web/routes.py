"""Public redirect routes."""

import asyncio

from fastapi import APIRouter, HTTPException, Request, status
from fastapi.responses import RedirectResponse

from shortlink.errors import ShortLinkError

from ..errors import http_error

router = APIRouter()


@router.get("/health", include_in_schema=False)
async def health_check_web(request: Request):
    """Health check endpoint (simple version for load balancers)."""
    service = request.app.state.service

    health = await service.health_check()

    if health["overall"]:
        return {"status": "healthy"}
    raise HTTPException(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        detail="Service unhealthy",
    )


@router.get("/{short_code}", include_in_schema=False)
async def redirect_to_url(request: Request, short_code: str):
    """Redirect to the original URL, recording the click."""
    service = request.app.state.service
    config = request.app.state.config

    try:
        original_url = await service.redirect(short_code, timeout=config.request_timeout_seconds)
    except (ShortLinkError, asyncio.TimeoutError) as e:
        raise http_error(e)

    # 302 so every visit reaches the service and is counted
    return RedirectResponse(url=original_url, status_code=status.HTTP_302_FOUND)
