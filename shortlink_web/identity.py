"""Caller identity supplied by the upstream authenticating proxy."""

from fastapi import HTTPException, Request, status


def get_owner_id(request: Request) -> str:
    """Owner id from the configured identity header; 401 when absent.

    The proxy in front of the service authenticates the caller, so the value
    is trusted as-is.
    """
    header = request.app.state.config.identity_header
    owner_id = (request.headers.get(header) or "").strip()
    if not owner_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=f"Missing {header} header",
        )
    return owner_id
