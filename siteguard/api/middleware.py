"""
Request logging middleware.

Every request gets a short request ID (reused from an incoming
X-Request-ID header when present), one log line on the way in and one on
the way out with the status code and elapsed time.
"""

import logging
import time
import uuid

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

logger = logging.getLogger("siteguard.middleware")

REQUEST_ID_HEADER = "X-Request-ID"


def _elapsed_ms(start: float) -> int:
    return int((time.perf_counter() - start) * 1000)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex[:8]
        request.state.request_id = request_id
        start = time.perf_counter()
        route = f"{request.method} {request.url.path}"

        logger.info("[%s] → %s", request_id, route)
        try:
            response = await call_next(request)
        except Exception:
            logger.error("[%s] ✗ %s - unhandled exception (%dms)", request_id, route, _elapsed_ms(start))
            raise

        elapsed = _elapsed_ms(start)
        logger.info("[%s] ← %s - %d (%dms)", request_id, route, response.status_code, elapsed)

        response.headers[REQUEST_ID_HEADER] = request_id
        response.headers["X-Response-Time"] = f"{elapsed}ms"
        return response
