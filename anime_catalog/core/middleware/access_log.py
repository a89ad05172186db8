from __future__ import annotations

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

logger = logging.getLogger(__name__)


def _route_template(request: Request) -> str:
    # set by the router once a path matches; unmatched requests keep the raw path
    route = request.scope.get("route")
    return getattr(route, "path", None) or request.url.path


class AccessLogMiddleware(BaseHTTPMiddleware):
    """One ``http_request`` line per request, after the response is known.

    Requests that end in an unhandled exception are logged as 500 at
    warning level; the traceback itself is logged by the exception handler.
    """

    async def dispatch(self, request: Request, call_next) -> Response:  # type: ignore[override]
        started = time.perf_counter()
        status_code = 500
        try:
            response = await call_next(request)
            status_code = response.status_code
            return response
        finally:
            elapsed_ms = round((time.perf_counter() - started) * 1000, 1)
            logger.log(
                logging.WARNING if status_code >= 500 else logging.INFO,
                "http_request",
                extra={
                    "http_method": request.method,
                    "http_route": _route_template(request),
                    "http_status": status_code,
                    "duration_ms": elapsed_ms,
                },
            )
