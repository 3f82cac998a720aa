"""Helpers for building the public short URL of a mapping."""

from typing import Mapping, Optional


def forwarded_origin(headers: Mapping[str, str]) -> Optional[str]:
    """Return ``proto://host`` from X-Forwarded-Proto/Host, if both are present."""
    lowered = {k.lower(): v for k, v in headers.items()}
    proto = lowered.get("x-forwarded-proto")
    host = lowered.get("x-forwarded-host")
    if proto and host:
        return f"{proto}://{host}"
    return None


def build_base_url(
    headers: Mapping[str, str],
    fallback_base_url: str,
    request_scheme: Optional[str] = None,
    request_host: Optional[str] = None,
) -> str:
    """Pick the origin short URLs should be served from.

    Priority: forwarded headers from a proxy, then the request's own scheme
    and host, then the configured base URL.
    """
    origin = forwarded_origin(headers)
    if origin:
        return origin
    if request_scheme and request_host:
        return f"{request_scheme}://{request_host}"
    return fallback_base_url.rstrip("/")


def build_short_url(short_code: str, base_url: str, path_prefix: str = "") -> str:
    """Join base URL, optional path prefix and short code.

    >>> build_short_url("aB3dE5gH", "https://sho.rt/", "/s")
    'https://sho.rt/s/aB3dE5gH'
    """
    parts = [base_url.rstrip("/")]
    prefix = path_prefix.strip("/")
    if prefix:
        parts.append(prefix)
    parts.append(short_code)
    return "/".join(parts)
