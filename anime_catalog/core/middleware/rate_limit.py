from __future__ import annotations

import asyncio
import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from anime_catalog.core.config import get_settings
from anime_catalog.core.error_attributes import get_error_attributes
from anime_catalog.core.errors import RateLimitedError
from anime_catalog.core.exception_handlers import error_response

logger = logging.getLogger(__name__)

_LUA_INCR_EXPIRE = """
local current = redis.call('INCR', KEYS[1])
if current == 1 then
  redis.call('EXPIRE', KEYS[1], ARGV[1])
end
return current
"""


class RateLimitMiddleware(BaseHTTPMiddleware):
    """Fixed-window request counter per client IP, kept in redis.

    Runs outside the exception handlers, so an exceeded limit is rendered here
    instead of being raised.
    """

    async def dispatch(self, request: Request, call_next) -> Response:  # type: ignore[override]
        settings = get_settings()
        if not settings.rate_limit_enabled or request.method.upper() == "OPTIONS":
            return await call_next(request)

        redis = getattr(request.app.state, "redis", None)
        if redis is None:
            return await call_next(request)

        ip = getattr(request.state, "client_ip", "-")
        window = int(settings.rate_limit_window_seconds)
        now = int(time.time())
        key = f"{settings.rate_limit_key_prefix}{ip}:{now // window}"

        try:
            current = await asyncio.wait_for(
                redis.eval(_LUA_INCR_EXPIRE, 1, key, window + 1),
                timeout=settings.redis_operation_timeout_seconds,
            )
            current_int = int(current)
        except Exception as exc:  # noqa: BLE001
            logger.warning("rate_limit_check_failed", extra={"reason": str(exc)})
            return await call_next(request)

        if current_int > int(settings.rate_limit_requests):
            exc = RateLimitedError(retry_after_seconds=window - (now % window))
            logger.info("rate_limited", extra={"limit_key": key})
            return error_response(
                get_error_attributes(request, exc),
                headers={"Retry-After": str(exc.extra["retry_after_seconds"])},
            )

        return await call_next(request)
