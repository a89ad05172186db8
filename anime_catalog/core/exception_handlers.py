from __future__ import annotations

import logging
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from anime_catalog.core.error_attributes import (
    get_error_attributes,
    get_http_error_attributes,
    get_request_validation_attributes,
)
from anime_catalog.core.errors import AppError
from anime_catalog.core.middleware.request_context import REQUEST_ID_HEADER

logger = logging.getLogger(__name__)


def error_response(attrs: dict[str, Any], headers: dict[str, str] | None = None) -> JSONResponse:
    """Render an error body; the request id it carries is echoed as a header.

    The unhandled-exception handler runs outside the request-context
    middleware, so the header cannot be left to that middleware alone.
    """
    out = dict(headers or {})
    out[REQUEST_ID_HEADER] = str(attrs["requestId"])
    return JSONResponse(status_code=int(attrs["status"]), content=attrs, headers=out)


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
        attrs = get_error_attributes(request, exc)

        headers: dict[str, str] = {}
        if exc.extra and "retry_after_seconds" in exc.extra:
            headers["Retry-After"] = str(int(exc.extra["retry_after_seconds"]))

        log_extra = {"request_id": attrs["requestId"], "error": attrs["error"], "status": attrs["status"]}
        if attrs["status"] >= 500:
            logger.warning("app_error", extra=log_extra, exc_info=exc)
        else:
            logger.info("app_error", extra={**log_extra, "reason": exc.message})

        return error_response(attrs, headers)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        attrs = get_http_error_attributes(request, exc.status_code, exc.detail)
        logger.info("http_exception", extra={"request_id": attrs["requestId"], "status": exc.status_code})
        return error_response(attrs, getattr(exc, "headers", None))

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        attrs = get_request_validation_attributes(request, exc)
        logger.info("request_validation_error", extra={"request_id": attrs["requestId"], "reason": attrs["message"]})
        return error_response(attrs)

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        attrs = get_error_attributes(request, exc)
        logger.exception("unhandled_exception", extra={"request_id": attrs["requestId"]})
        return error_response(attrs)
