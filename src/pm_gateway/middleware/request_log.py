"""Per-request access log.

One line per request: method, path, caller header, status, latency and the
request id. The id is put on request.state (handlers echo it in ApiResponse)
and on the X-Request-ID response header. 5xx responses log at WARNING.

    INFO [POST] /api/v1/markets/0xab.../buy → 200 (3ms) caller=alice req_a1b2c3d4
"""

import logging
import time
import uuid

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from src.pm_gateway.auth.dependencies import CALLER_HEADER

logger = logging.getLogger("pm.request")

REQUEST_ID_HEADER = "X-Request-ID"


class RequestLogMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request_id = f"req_{uuid.uuid4().hex[:12]}"
        request.state.request_id = request_id
        caller = request.headers.get(CALLER_HEADER, "-")

        started = time.perf_counter()
        response = await call_next(request)
        took_ms = (time.perf_counter() - started) * 1000

        response.headers[REQUEST_ID_HEADER] = request_id
        level = logging.WARNING if response.status_code >= 500 else logging.INFO
        logger.log(
            level,
            "[%s] %s → %d (%.0fms) caller=%s %s",
            request.method,
            request.url.path,
            response.status_code,
            took_ms,
            caller,
            request_id,
        )
        return response
