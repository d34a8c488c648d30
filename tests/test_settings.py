"""Tests for configuration loading."""

import pytest
from pydantic import ValidationError

from anyhire.config.settings import Settings

REQUIRED = {
    "SUPABASE_URL": "http://localhost:54321",
    "SUPABASE_SERVICE_ROLE_KEY": "key",
    "REDIS_URL": "rediss://cache.example.com:6380",
    "ACCESS_TOKEN_SECRET": "access",
    "REFRESH_TOKEN_SECRET": "refresh",
}


def test_defaults(monkeypatch):
    monkeypatch.delenv("ENVIRONMENT", raising=False)
    settings = Settings(_env_file=None, **REQUIRED)
    assert settings.ACCESS_TOKEN_EXPIRE_MINUTES == 15
    assert settings.refresh_token_ttl_seconds == 604800
    assert settings.secure_cookies is True


def test_development_disables_secure_cookies():
    settings = Settings(_env_file=None, ENVIRONMENT="development", **REQUIRED)
    assert settings.secure_cookies is False


@pytest.mark.parametrize("missing", sorted(REQUIRED))
def test_missing_required_setting_fails(monkeypatch, missing):
    monkeypatch.delenv(missing, raising=False)
    values = {k: v for k, v in REQUIRED.items() if k != missing}
    with pytest.raises(ValidationError):
        Settings(_env_file=None, **values)


def test_blank_secret_fails():
    with pytest.raises(ValidationError):
        Settings(_env_file=None, **{**REQUIRED, "ACCESS_TOKEN_SECRET": "  "})


def test_identical_secrets_fail():
    with pytest.raises(ValidationError):
        Settings(_env_file=None, **{**REQUIRED, "REFRESH_TOKEN_SECRET": "access"})


def test_allowed_origins_list():
    settings = Settings(_env_file=None, ALLOWED_ORIGINS="http://a.com, http://b.com,", **REQUIRED)
    assert settings.allowed_origins_list == ["http://a.com", "http://b.com"]
