"""Core business logic for the short link service."""

from .shortcode import ShortCodeGenerator
from .service import ShortLinkService, create_backend
from .errors import (
    ShortLinkError,
    InvalidUrl,
    InvalidRange,
    AllocationExhausted,
    NotFound,
    Unauthorized,
    StorageUnavailable,
)

__all__ = [
    "ShortCodeGenerator",
    "ShortLinkService",
    "create_backend",
    "ShortLinkError",
    "InvalidUrl",
    "InvalidRange",
    "AllocationExhausted",
    "NotFound",
    "Unauthorized",
    "StorageUnavailable",
]
