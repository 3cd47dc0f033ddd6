import uuid

import pytest
from pydantic import ValidationError

from app.settings import Settings


@pytest.mark.parametrize(
    "env_value, expected",
    [
        (None, []),
        ("https://example.com", ["https://example.com"]),
        ("https://a.com, https://b.com", ["https://a.com", "https://b.com"]),
        ('["https://a.com","https://b.com"]', ["https://a.com", "https://b.com"]),
    ],
)
def test_cors_origins_env_parsing(monkeypatch, env_value, expected):
    if env_value is None:
        monkeypatch.delenv("CORS_ORIGINS", raising=False)
    else:
        monkeypatch.setenv("CORS_ORIGINS", env_value)

    settings = Settings(app_env="dev", _env_file=None)

    assert settings.cors_origins == expected


def test_defaults_to_prod_when_env_missing(monkeypatch):
    monkeypatch.delenv("APP_ENV", raising=False)

    settings = Settings(metrics_enabled=False, _env_file=None)

    assert settings.app_env == "prod"
    assert settings.allow_default_org is False


def test_dev_allows_default_org_fallback():
    settings = Settings(app_env="dev", _env_file=None)

    assert settings.allow_default_org is True
    assert settings.default_org_id == uuid.UUID("00000000-0000-0000-0000-000000000001")


def test_dev_can_disable_default_org_fallback():
    settings = Settings(app_env="dev", allow_default_org=False, _env_file=None)

    assert settings.allow_default_org is False


def test_prod_requires_metrics_token_when_metrics_enabled():
    with pytest.raises(ValidationError, match="METRICS_TOKEN"):
        Settings(app_env="prod", metrics_enabled=True, _env_file=None)


def test_prod_accepts_metrics_token():
    settings = Settings(app_env="prod", metrics_enabled=True, metrics_token="scrape-token", _env_file=None)

    assert settings.metrics_token == "scrape-token"


def test_prod_refuses_default_org_fallback():
    with pytest.raises(ValidationError, match="X-Org-Id"):
        Settings(app_env="prod", metrics_enabled=False, allow_default_org=True, _env_file=None)


def test_prod_ignores_stray_testing_variable(monkeypatch):
    monkeypatch.setenv("TESTING", "true")

    settings = Settings(app_env="prod", metrics_enabled=False, _env_file=None)

    assert settings.allow_default_org is False
    assert not hasattr(settings, "testing")


def test_strict_cors_rejects_wildcard_in_prod(monkeypatch):
    monkeypatch.setenv("CORS_ORIGINS", "*")

    with pytest.raises(ValidationError, match="wildcard"):
        Settings(app_env="prod", metrics_enabled=False, strict_cors=True, _env_file=None)
