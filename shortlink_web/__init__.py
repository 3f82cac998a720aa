"""FastAPI layer exposing the short link service over HTTP."""

from .app_factory import create_app

__all__ = ["create_app"]
