"""Tests for the error body mapping."""

from fastapi.exceptions import RequestValidationError
from starlette.requests import Request

from anime_catalog.core.error_attributes import (
    get_error_attributes,
    get_http_error_attributes,
    get_request_validation_attributes,
    response_status_message,
)
from anime_catalog.core.errors import NotFoundError, RateLimitedError, ValidationError


def _request(path: str = "/animes", request_id: str | None = "rid-00000001") -> Request:
    scope = {"type": "http", "method": "GET", "path": path, "headers": [], "query_string": b"", "state": {}}
    request = Request(scope)
    if request_id is not None:
        request.state.request_id = request_id
    return request


def test_validation_error():
    attrs = get_error_attributes(_request(), ValidationError("name cannot be empty"))

    assert attrs["status"] == 400
    assert attrs["error"] == "Service Validation Exception"
    assert attrs["message"] == "name cannot be empty"
    assert attrs["path"] == "/animes"
    assert attrs["requestId"] == "rid-00000001"
    assert attrs["timestamp"]


def test_not_found_error():
    attrs = get_error_attributes(_request("/animes/x"), NotFoundError("could not find anime with id x"))

    assert attrs["status"] == 404
    assert attrs["error"] == "Resource Not Found"
    assert attrs["message"] == "could not find anime with id x"


def test_other_app_error_uses_its_own_status():
    attrs = get_error_attributes(_request(), RateLimitedError(retry_after_seconds=5))

    assert attrs["status"] == 429
    assert attrs["error"] == "Too Many Requests"
    assert attrs["message"] == "rate limit exceeded"


def test_unknown_failure_keeps_defaults_but_overrides_message():
    attrs = get_error_attributes(_request(request_id=None), KeyError("boom"))

    assert attrs["status"] == 500
    assert attrs["error"] == "Internal Server Error"
    assert attrs["message"] == "'boom'"
    assert attrs["requestId"] == "-"


def test_response_status_message():
    assert response_status_message(404, "Anime not found") == '404 NOT_FOUND "Anime not found"'
    assert response_status_message(400) == "400 BAD_REQUEST"


def test_http_error_attributes():
    attrs = get_http_error_attributes(_request("/nope"), 404, "Anime not found")

    assert attrs["status"] == 404
    assert attrs["error"] == "Not Found"
    assert attrs["message"] == '404 NOT_FOUND "Anime not found"'


def test_request_validation_attributes():
    exc = RequestValidationError(
        [{"type": "uuid_parsing", "loc": ("path", "id"), "msg": "Input should be a valid UUID", "input": "x"}]
    )

    attrs = get_request_validation_attributes(_request(), exc)

    assert attrs["status"] == 400
    assert attrs["error"] == "Bad Request"
    assert attrs["message"] == "path.id: Input should be a valid UUID"
