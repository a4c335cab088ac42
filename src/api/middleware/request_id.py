"""
Request ID middleware.

Accepts or generates X-Request-ID, exposes it on request.state and the
response, and binds it to the logging context for the request's lifetime.
"""

import time
import uuid
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from src.logging_config import get_logger, request_id_var

logger = get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"
SLOW_REQUEST_MS = 500


class RequestIdMiddleware(BaseHTTPMiddleware):
    """Correlate every log line of a request with one id."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())
        request.state.request_id = request_id
        token = request_id_var.set(request_id)

        try:
            start = time.perf_counter()
            response = await call_next(request)
            duration_ms = (time.perf_counter() - start) * 1000
            response.headers[REQUEST_ID_HEADER] = request_id

            logger.info(
                "%s %s -> %d",
                request.method, request.url.path, response.status_code,
                extra={"duration_ms": round(duration_ms, 1)},
            )
            # Engine calls are in-memory; anything slow points at an oversized snapshot.
            if duration_ms > SLOW_REQUEST_MS:
                logger.warning(
                    "Slow request",
                    extra={"path": request.url.path, "duration_ms": round(duration_ms, 1)},
                )
            return response
        finally:
            request_id_var.reset(token)
