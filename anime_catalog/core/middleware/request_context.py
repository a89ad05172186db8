"""Per-request identity: the correlation id and the caller's address.

Both values land on ``request.state`` (read by the error body builder, the
exception handlers and the rate limiter) and in context variables that the
logging filter stamps onto every record emitted while the request runs.
"""

from __future__ import annotations

import re
import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from anime_catalog.core.config import get_settings

REQUEST_ID_HEADER = "X-Request-ID"

# caller-supplied ids are echoed into logs and headers, so keep them boring
_REQUEST_ID_RE = re.compile(r"[A-Za-z0-9][A-Za-z0-9\-_.]{7,63}")

request_id_var: ContextVar[str] = ContextVar("request_id", default="-")
client_ip_var: ContextVar[str] = ContextVar("client_ip", default="-")


def resolve_request_id(raw: str | None) -> str:
    candidate = (raw or "").strip()
    if _REQUEST_ID_RE.fullmatch(candidate):
        return candidate
    return uuid.uuid4().hex


def resolve_client_ip(request: Request, *, trust_forwarded: bool) -> str:
    """Address the request is attributed to.

    ``X-Forwarded-For`` (left-most hop) and then ``X-Real-IP`` are honoured
    only behind a trusted proxy; otherwise a client could pick its own
    rate-limit bucket.
    """
    if trust_forwarded:
        first_hop = request.headers.get("x-forwarded-for", "").split(",")[0].strip()
        if first_hop:
            return first_hop
        real_ip = request.headers.get("x-real-ip", "").strip()
        if real_ip:
            return real_ip

    if request.client and request.client.host:
        return request.client.host
    return "-"


class RequestContextMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next) -> Response:  # type: ignore[override]
        rid = resolve_request_id(request.headers.get(REQUEST_ID_HEADER))
        ip = resolve_client_ip(request, trust_forwarded=get_settings().trusted_proxy_headers)
        request.state.request_id = rid
        request.state.client_ip = ip

        rid_token = request_id_var.set(rid)
        ip_token = client_ip_var.set(ip)
        try:
            response = await call_next(request)
        finally:
            request_id_var.reset(rid_token)
            client_ip_var.reset(ip_token)

        response.headers[REQUEST_ID_HEADER] = rid
        return response
