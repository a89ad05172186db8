"""Error response bodies.

Every error leaving the service has the same shape::

    {"timestamp": ..., "path": ..., "status": ..., "error": ..., "message": ..., "requestId": ...}

``get_error_attributes`` starts from the generic 500 attributes and lets the
domain failures override ``status`` and ``error``. ``message`` always carries
the failure's own text.
"""

from __future__ import annotations

from datetime import datetime, timezone
from http import HTTPStatus
from typing import Any

from fastapi.exceptions import RequestValidationError
from starlette.requests import Request

from anime_catalog.core.errors import AppError, NotFoundError, ValidationError


def _reason_phrase(status_code: int) -> str:
    try:
        return HTTPStatus(status_code).phrase
    except ValueError:
        return "Unknown"


def response_status_message(status_code: int, reason: str | None = None) -> str:
    """Render an HTTP status failure as ``404 NOT_FOUND "Anime not found"``."""
    try:
        name = HTTPStatus(status_code).name
    except ValueError:
        name = "UNKNOWN"
    text = f"{status_code} {name}"
    if reason:
        text += f' "{reason}"'
    return text


def default_error_attributes(request: Request, status_code: int = 500) -> dict[str, Any]:
    return {
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "path": request.url.path,
        "status": status_code,
        "error": _reason_phrase(status_code),
        "message": "",
        "requestId": getattr(request.state, "request_id", "-") or "-",
    }


def get_error_attributes(request: Request, exc: BaseException) -> dict[str, Any]:
    attrs = default_error_attributes(request)
    attrs["message"] = str(exc)
    if isinstance(exc, ValidationError):
        attrs["error"] = "Service Validation Exception"
        attrs["status"] = HTTPStatus.BAD_REQUEST.value
    elif isinstance(exc, NotFoundError):
        attrs["error"] = "Resource Not Found"
        attrs["status"] = HTTPStatus.NOT_FOUND.value
    elif isinstance(exc, AppError):
        attrs["error"] = exc.error
        attrs["status"] = exc.http_status
    return attrs


def get_http_error_attributes(request: Request, status_code: int, detail: Any = None) -> dict[str, Any]:
    attrs = default_error_attributes(request, status_code)
    reason = detail if isinstance(detail, str) and detail else None
    attrs["message"] = response_status_message(status_code, reason)
    return attrs


def get_request_validation_attributes(request: Request, exc: RequestValidationError) -> dict[str, Any]:
    attrs = default_error_attributes(request, HTTPStatus.BAD_REQUEST.value)
    errors = exc.errors()
    if errors:
        first = errors[0]
        loc = ".".join(str(part) for part in first.get("loc", ()))
        attrs["message"] = f"{loc}: {first.get('msg', 'invalid value')}" if loc else str(first.get("msg", ""))
    else:
        attrs["message"] = "invalid request"
    return attrs
