import pytest
from pydantic import ValidationError

from anime_catalog.core.config import BaseAppSettings, ProdSettings, _parse_csv_list

DSN = "postgresql+asyncpg://anime:secret@db:5432/anime"


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        (None, []),
        ("", []),
        ("GET, POST,,PUT ", ["GET", "POST", "PUT"]),
        ('["a", " b "]', ["a", "b"]),
        (["x", " ", "y"], ["x", "y"]),
    ],
)
def test_parse_csv_list(raw, expected):
    assert _parse_csv_list(raw) == expected


def test_csv_lists_from_env(monkeypatch):
    monkeypatch.setenv("POSTGRES_DSN", DSN)
    monkeypatch.setenv("CORS_ALLOW_ORIGINS", "http://a.test,http://b.test")

    settings = BaseAppSettings()

    assert settings.cors_allow_origins == ["http://a.test", "http://b.test"]
    assert settings.postgres_dsn_plain() == DSN
    assert settings.redis_dsn_plain() is None


def test_defaults(monkeypatch):
    monkeypatch.setenv("POSTGRES_DSN", DSN)
    monkeypatch.delenv("API_PREFIX", raising=False)
    monkeypatch.delenv("RATE_LIMIT_ENABLED", raising=False)

    settings = BaseAppSettings()

    assert settings.api_prefix == ""
    assert settings.rate_limit_enabled is False
    assert "PUT" in settings.cors_allow_methods


def test_prod_disables_docs(monkeypatch):
    monkeypatch.setenv("POSTGRES_DSN", DSN)
    monkeypatch.delenv("DOCS_ENABLED", raising=False)

    assert ProdSettings().docs_enabled is False


def test_rejects_non_positive_timeout(monkeypatch):
    monkeypatch.setenv("POSTGRES_DSN", DSN)
    monkeypatch.setenv("REPOSITORY_TIMEOUT_SECONDS", "0")

    with pytest.raises(ValidationError, match="REPOSITORY_TIMEOUT_SECONDS"):
        BaseAppSettings()


def test_dsn_is_required(monkeypatch):
    monkeypatch.delenv("POSTGRES_DSN", raising=False)

    with pytest.raises(ValidationError):
        BaseAppSettings(_env_file=None)
