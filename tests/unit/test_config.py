"""Unit tests for AppSettings and sub-configs."""

import pytest
from pydantic import ValidationError as PydanticValidationError

from config import (
    AccountSettings,
    AppSettings,
    DatabaseSettings,
    EmailSettings,
    JWTSettings,
)


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def with_mongo(monkeypatch):
    """Set the required MONGODB_URI so AppSettings can be instantiated."""
    monkeypatch.setenv("MONGODB_URI", "mongodb://localhost:27017/")
    return monkeypatch


# ---------------------------------------------------------------------------
# DatabaseSettings
# ---------------------------------------------------------------------------


class TestDatabaseSettings:
    def test_loads_mongodb_uri(self, monkeypatch):
        monkeypatch.setenv("MONGODB_URI", "mongodb://localhost:27017/")
        assert DatabaseSettings().mongodb_uri == "mongodb://localhost:27017/"

    def test_default_db_name(self, monkeypatch):
        monkeypatch.setenv("MONGODB_URI", "mongodb://localhost:27017/")
        monkeypatch.delenv("DB_NAME", raising=False)
        assert DatabaseSettings().db_name == "storefront"

    def test_missing_mongodb_uri_raises(self, monkeypatch):
        monkeypatch.delenv("MONGODB_URI", raising=False)
        with pytest.raises(PydanticValidationError):
            DatabaseSettings()


# ---------------------------------------------------------------------------
# JWTSettings
# ---------------------------------------------------------------------------


class TestJWTSettings:
    def test_defaults(self, monkeypatch):
        for var in (
            "JWT_ISSUER",
            "JWT_AUDIENCE",
            "SESSION_TOKEN_TTL_SECONDS",
            "COOKIE_SECURE",
            "JWT_PRIVATE_KEY",
            "JWT_PUBLIC_KEY",
            "JWT_SECRET",
        ):
            monkeypatch.delenv(var, raising=False)
        s = JWTSettings()
        assert s.jwt_issuer == "storefront"
        assert s.jwt_audience == "storefront.api"
        assert s.session_token_ttl_seconds == 3600
        assert s.cookie_secure is True

    def test_ttl_from_env(self, monkeypatch):
        monkeypatch.setenv("SESSION_TOKEN_TTL_SECONDS", "120")
        assert JWTSettings().session_token_ttl_seconds == 120


@pytest.mark.parametrize(
    "private_key, public_key, expected",
    [
        ("private", "public", True),
        ("private", None, False),
        (None, None, False),
    ],
    ids=["keys_present", "public_missing", "keys_absent"],
)
def test_jwt_use_rs256(monkeypatch, private_key, public_key, expected):
    for var, value in (("JWT_PRIVATE_KEY", private_key), ("JWT_PUBLIC_KEY", public_key)):
        if value:
            monkeypatch.setenv(var, value)
        else:
            monkeypatch.delenv(var, raising=False)
    assert JWTSettings().use_rs256 is expected


# ---------------------------------------------------------------------------
# AccountSettings
# ---------------------------------------------------------------------------


class TestAccountSettings:
    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("ACCOUNT_ENFORCE_SESSION_REVOCATION", raising=False)
        s = AccountSettings()
        assert s.email_confirmation_ttl_seconds == 24 * 60 * 60
        assert s.password_reset_ttl_seconds == 10 * 60
        assert (s.password_min_length, s.password_max_length) == (6, 128)
        assert s.enforce_session_revocation is False

    def test_prefixed_env(self, monkeypatch):
        monkeypatch.setenv("ACCOUNT_ENFORCE_SESSION_REVOCATION", "true")
        monkeypatch.setenv("ACCOUNT_PASSWORD_MIN_LENGTH", "10")
        s = AccountSettings()
        assert s.enforce_session_revocation is True
        assert s.password_min_length == 10

    def test_unprefixed_env_ignored(self, monkeypatch):
        monkeypatch.delenv("ACCOUNT_PASSWORD_MIN_LENGTH", raising=False)
        monkeypatch.setenv("PASSWORD_MIN_LENGTH", "99")
        assert AccountSettings().password_min_length == 6


def test_email_settings_from_env(monkeypatch):
    monkeypatch.setenv("SENDGRID_API_KEY", "SG.abc")
    monkeypatch.setenv("EMAIL_FROM", "shop@example.com")
    s = EmailSettings()
    assert s.sendgrid_api_key == "SG.abc"
    assert s.email_from == "shop@example.com"


# ---------------------------------------------------------------------------
# AppSettings
# ---------------------------------------------------------------------------


@pytest.mark.parametrize(
    "env, expected",
    [("production", True), ("development", False)],
    ids=["production", "development"],
)
def test_is_production(with_mongo, env, expected):
    with_mongo.setenv("ENV", env)
    assert AppSettings().is_production is expected


class TestAppSettings:
    def test_sub_configs_populated(self, with_mongo):
        s = AppSettings()
        for attr in ("db", "jwt", "account", "email", "logging", "sentry"):
            assert getattr(s, attr) is not None, f"sub-config '{attr}' is None"

    def test_cors_origins_default(self, with_mongo):
        with_mongo.delenv("CORS_ORIGINS", raising=False)
        assert AppSettings().cors_origins == ["*"]

    def test_app_url_from_env(self, with_mongo):
        with_mongo.setenv("APP_URL", "https://shop.example.com")
        assert AppSettings().app_url == "https://shop.example.com"

    def test_explicit_sub_config_kept(self, with_mongo):
        account = AccountSettings(enforce_session_revocation=True)
        assert AppSettings(account=account).account is account
