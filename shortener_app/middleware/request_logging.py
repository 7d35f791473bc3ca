# Logs one line per request: method, path, status, size and duration

import logging
import time

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger("shortener_app.access")


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        start = time.perf_counter()
        response = await call_next(request)
        duration_ms = (time.perf_counter() - start) * 1000

        logger.info(
            "%s %s status=%d size=%s duration=%.1fms",
            request.method,
            request.url.path,
            response.status_code,
            response.headers.get("content-length", "-"),
            duration_ms,
        )
        return response
