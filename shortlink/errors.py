"""Exceptions raised by the short link core."""


class ShortLinkError(Exception):
    """Base class for all short link errors."""


class InvalidUrl(ShortLinkError, ValueError):
    """The original URL is not an absolute http/https URI."""


class InvalidRange(ShortLinkError, ValueError):
    """An analytics query asked for a start date after its end date."""


class AllocationExhausted(ShortLinkError):
    """No free short code was found within the allowed attempts."""

    def __init__(self, attempts: int):
        super().__init__(f"Unable to allocate a unique short code after {attempts} attempts")
        self.attempts = attempts


class NotFound(ShortLinkError, LookupError):
    """No mapping exists for the requested short code."""

    def __init__(self, short_code: str):
        super().__init__(f"Short code '{short_code}' not found")
        self.short_code = short_code


class Unauthorized(ShortLinkError):
    """The caller does not own the requested mapping or analytics."""


class StorageUnavailable(ShortLinkError):
    """The storage backend failed to complete an operation."""
