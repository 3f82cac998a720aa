"""Common utilities for the short link service."""

from .validators import is_valid_url, is_valid_date_range
from .urls import build_base_url, build_short_url, forwarded_origin
from .logging_config import setup_logging

__all__ = [
    "is_valid_url",
    "is_valid_date_range",
    "build_base_url",
    "build_short_url",
    "forwarded_origin",
    "setup_logging",
]
