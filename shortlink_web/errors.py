"""Translation of core errors into HTTP responses."""

import asyncio

from fastapi import HTTPException, status

from shortlink.errors import (
    AllocationExhausted,
    InvalidRange,
    InvalidUrl,
    NotFound,
    StorageUnavailable,
    Unauthorized,
)

STATUS_BY_ERROR = (
    (InvalidUrl, status.HTTP_400_BAD_REQUEST),
    (InvalidRange, status.HTTP_400_BAD_REQUEST),
    (Unauthorized, status.HTTP_403_FORBIDDEN),
    (NotFound, status.HTTP_404_NOT_FOUND),
    (AllocationExhausted, status.HTTP_503_SERVICE_UNAVAILABLE),
    (StorageUnavailable, status.HTTP_503_SERVICE_UNAVAILABLE),
)


def http_error(exc: Exception) -> HTTPException:
    """HTTPException for a core error or a timed-out call."""
    if isinstance(exc, asyncio.TimeoutError):
        return HTTPException(
            status_code=status.HTTP_504_GATEWAY_TIMEOUT,
            detail="Request timed out",
        )
    for error_type, code in STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            headers = {"Retry-After": "1"} if code == status.HTTP_503_SERVICE_UNAVAILABLE else None
            return HTTPException(status_code=code, detail=str(exc), headers=headers)
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc))
