"""Request logging middleware."""

import time
import logging
from typing import Callable, Optional

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request


class LoggingMiddleware(BaseHTTPMiddleware):
    """Log one line per request with status and duration."""

    def __init__(self, app, logger: Optional[logging.Logger] = None):
        super().__init__(app)
        self.logger = logger or logging.getLogger("shortlink.web")

    async def dispatch(self, request: Request, call_next: Callable):
        start_time = time.perf_counter()
        client_ip = request.client.host if request.client else "unknown"

        try:
            response = await call_next(request)
        except Exception:
            duration_ms = (time.perf_counter() - start_time) * 1000
            self.logger.exception(
                f"{request.method} {request.url.path} from {client_ip} failed after {duration_ms:.2f}ms"
            )
            raise

        duration_ms = (time.perf_counter() - start_time) * 1000
        self.logger.info(
            f"{request.method} {request.url.path} from {client_ip} - "
            f"Status: {response.status_code} - Duration: {duration_ms:.2f}ms"
        )
        return response
