"""Tests for request id and client address resolution."""

import pytest
from starlette.requests import Request

from anime_catalog.core.middleware.request_context import resolve_client_ip, resolve_request_id


def _request(headers: dict[str, str] | None = None, client: tuple[str, int] | None = ("10.0.0.5", 40000)) -> Request:
    scope = {
        "type": "http",
        "method": "GET",
        "path": "/animes",
        "headers": [(k.lower().encode(), v.encode()) for k, v in (headers or {}).items()],
        "client": client,
    }
    return Request(scope)


# ---------------------------------------------------------------------------
# resolve_request_id
# ---------------------------------------------------------------------------


class TestResolveRequestId:
    def test_well_formed_id_is_kept(self):
        assert resolve_request_id(" req-12345678 ") == "req-12345678"

    @pytest.mark.parametrize("raw", [None, "", "short", "bad id!", "-leading-dash", "x" * 65])
    def test_malformed_id_is_replaced(self, raw):
        rid = resolve_request_id(raw)

        assert rid != raw
        assert len(rid) == 32


# ---------------------------------------------------------------------------
# resolve_client_ip
# ---------------------------------------------------------------------------


class TestResolveClientIp:
    def test_forwarded_for_honoured_behind_trusted_proxy(self):
        request = _request({"X-Forwarded-For": "203.0.113.7, 10.0.0.1", "X-Real-IP": "198.51.100.9"})

        assert resolve_client_ip(request, trust_forwarded=True) == "203.0.113.7"

    def test_real_ip_used_when_forwarded_for_is_absent(self):
        request = _request({"X-Real-IP": "198.51.100.9"})

        assert resolve_client_ip(request, trust_forwarded=True) == "198.51.100.9"

    def test_blank_forwarded_for_falls_through(self):
        request = _request({"X-Forwarded-For": " , 10.0.0.1"})

        assert resolve_client_ip(request, trust_forwarded=True) == "10.0.0.5"

    def test_proxy_headers_ignored_when_untrusted(self):
        request = _request({"X-Forwarded-For": "203.0.113.7", "X-Real-IP": "198.51.100.9"})

        assert resolve_client_ip(request, trust_forwarded=False) == "10.0.0.5"

    def test_no_client_address(self):
        assert resolve_client_ip(_request(client=None), trust_forwarded=False) == "-"
