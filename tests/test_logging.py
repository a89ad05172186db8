import json
import logging
import sys

from anime_catalog.core.logging import JsonFormatter, RequestContextFilter, redact_secrets
from anime_catalog.core.middleware.request_context import request_id_var


def _record(msg: str, **extra) -> logging.LogRecord:
    record = logging.LogRecord("anime_catalog.test", logging.INFO, __file__, 1, msg, None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_redact_secrets():
    assert redact_secrets("postgresql+asyncpg://anime:hunter2@db/anime") == "postgresql+asyncpg://anime:***@db/anime"
    assert redact_secrets("redis://:hunter2@cache:6379/0") == "redis://:***@cache:6379/0"
    assert redact_secrets("password=hunter2 user=x") == "password=*** user=x"


def test_json_formatter_merges_extra_and_context():
    token = request_id_var.set("req-12345678")
    try:
        record = _record("anime_saved", anime_id="abc", dsn="postgresql://u:p@h/db")
        RequestContextFilter().filter(record)
        payload = json.loads(JsonFormatter().format(record))
    finally:
        request_id_var.reset(token)

    assert payload["msg"] == "anime_saved"
    assert payload["level"] == "INFO"
    assert payload["request_id"] == "req-12345678"
    assert payload["client_ip"] == "-"
    assert payload["anime_id"] == "abc"
    assert payload["dsn"] == "postgresql://u:***@h/db"


def test_json_formatter_includes_exception():
    try:
        raise RuntimeError("boom")
    except RuntimeError:
        record = logging.LogRecord("x", logging.ERROR, __file__, 1, "failed", None, sys.exc_info())

    payload = json.loads(JsonFormatter().format(record))

    assert payload["exc_type"] == "RuntimeError"
    assert "boom" in payload["exc"]


def test_context_filter_keeps_explicit_request_id():
    token = request_id_var.set("req-from-context")
    try:
        explicit = _record("unhandled_exception", request_id="req-from-handler")
        implicit = _record("anime_saved")
        RequestContextFilter().filter(explicit)
        RequestContextFilter().filter(implicit)
    finally:
        request_id_var.reset(token)

    assert explicit.request_id == "req-from-handler"
    assert implicit.request_id == "req-from-context"
