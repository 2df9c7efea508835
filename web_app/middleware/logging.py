"""Access logging for the short-link web app."""

import time
import logging
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from typing import Callable, Optional

RESPONSE_TIME_HEADER = "X-Response-Time-Ms"


def level_for_status(status_code: int) -> int:
    """Server errors log as errors, client errors (404/410 on dead links) as warnings."""
    if status_code >= 500:
        return logging.ERROR
    if status_code >= 400:
        return logging.WARNING
    return logging.INFO


class LoggingMiddleware(BaseHTTPMiddleware):
    """Writes one access line per request and stamps the handling time on the response."""

    def __init__(self, app, logger: Optional[logging.Logger] = None):
        super().__init__(app)
        self.logger = logger or logging.getLogger("shortlinks.web")

    async def dispatch(self, request: Request, call_next: Callable):
        started = time.perf_counter()

        try:
            response = await call_next(request)
        except Exception:
            elapsed_ms = (time.perf_counter() - started) * 1000
            self.logger.exception(
                f"{request.method} {request.url.path} failed after {elapsed_ms:.1f}ms"
            )
            raise

        elapsed_ms = (time.perf_counter() - started) * 1000
        response.headers[RESPONSE_TIME_HEADER] = f"{elapsed_ms:.1f}"

        client = request.client.host if request.client else "-"
        self.logger.log(
            level_for_status(response.status_code),
            f"{client} {request.method} {request.url.path} {response.status_code} {elapsed_ms:.1f}ms",
        )

        return response
