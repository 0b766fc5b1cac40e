"""Rate limiting middleware.

Fixed one-second windows counted in Redis:
  key = "ratelimit:{client_ip}:{epoch_second}"
  INCR, set EXPIRE on the first hit, reject above RATE_LIMIT_PER_SECOND.

X-Forwarded-For is only read when the direct peer is a configured trusted
proxy; the client is then the nearest hop that is not itself trusted. Any
other peer is keyed by its socket address.

Reads the client from ``app.state.redis``; when that is None (rate limiting
disabled, or tests without a lifespan) every request passes.
"""

import logging
import time
from collections.abc import Iterable

from fastapi.responses import JSONResponse
from redis.exceptions import RedisError
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

from src.sp_common.errors import RateLimitError
from src.sp_common.response import error_response

logger = logging.getLogger(__name__)

_WINDOW_SECONDS = 1


def _client_key(request: Request, trusted_proxies: frozenset[str]) -> str:
    peer = request.client.host if request.client else "unknown"
    if peer not in trusted_proxies:
        return peer
    forwarded = request.headers.get("x-forwarded-for")
    if not forwarded:
        return peer
    hops = [hop.strip() for hop in forwarded.split(",") if hop.strip()]
    # Walk back from the proxy; the first untrusted hop is the real client
    for hop in reversed(hops):
        if hop not in trusted_proxies:
            return hop
    return hops[0] if hops else peer


class RateLimitMiddleware(BaseHTTPMiddleware):
    def __init__(
        self,
        app: ASGIApp,
        limit_per_second: int,
        trusted_proxies: Iterable[str] = (),
    ) -> None:
        super().__init__(app)
        self._limit = limit_per_second
        self._trusted = frozenset(trusted_proxies)

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        redis = getattr(request.app.state, "redis", None)
        if redis is None:
            return await call_next(request)

        window = int(time.time()) // _WINDOW_SECONDS
        key = f"ratelimit:{_client_key(request, self._trusted)}:{window}"
        try:
            count = await redis.incr(key)
            if count == 1:
                await redis.expire(key, _WINDOW_SECONDS * 2)
        except RedisError:
            # Fail open: the ledger must stay usable when the limiter's Redis is down
            logger.warning("Rate limiter unavailable, request not counted", exc_info=True)
            return await call_next(request)

        if count > self._limit:
            logger.warning("Rate limit exceeded: %s (%d req)", key, count)
            exc = RateLimitError()
            return JSONResponse(
                status_code=exc.http_status,
                content=error_response(
                    exc.code, exc.message, getattr(request.state, "request_id", None)
                ).model_dump(),
                headers={"Retry-After": str(_WINDOW_SECONDS)},
            )
        return await call_next(request)
