"""Request logging middleware.

Every request gets a request_id: the caller's ``X-Request-ID`` header when it
sends a usable one, otherwise a fresh ``req_<12 hex>``. The id goes into
request.state (handlers copy it into ApiResponse) and back out in the
``X-Request-ID`` response header.

Log format:
    INFO [POST] /api/v1/transactions → 200 (23ms) req_a1b2c3d4e5f6
5xx responses are logged at ERROR so ledger faults stand out.
"""

import logging
import re
import time
import uuid

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

logger = logging.getLogger("sp.request")

REQUEST_ID_HEADER = "X-Request-ID"
_CALLER_ID_RE = re.compile(r"^[A-Za-z0-9_.-]{1,64}$")


def _request_id(request: Request) -> str:
    supplied = request.headers.get(REQUEST_ID_HEADER)
    if supplied and _CALLER_ID_RE.fullmatch(supplied):
        return supplied
    return f"req_{uuid.uuid4().hex[:12]}"


class RequestLogMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request_id = _request_id(request)
        request.state.request_id = request_id

        start = time.perf_counter()
        response: Response = await call_next(request)
        elapsed_ms = (time.perf_counter() - start) * 1000

        response.headers[REQUEST_ID_HEADER] = request_id
        level = logging.ERROR if response.status_code >= 500 else logging.INFO
        logger.log(
            level,
            "[%s] %s → %d (%.0fms) %s",
            request.method,
            request.url.path,
            response.status_code,
            elapsed_ms,
            request_id,
        )
        return response
