"""Unit tests for AppSettings and sub-configs."""

import pytest
from pydantic import ValidationError as PydanticValidationError

from config import (
    AppSettings,
    DatabaseSettings,
    JWTSettings,
    SmtpSettings,
)

_SMTP_VARS = (
    "SMTP_HOST",
    "SMTP_PORT",
    "SMTP_USER",
    "SMTP_PASS",
    "SMTP_SECURE",
    "SMTP_FROM",
)


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def with_mongo(monkeypatch):
    """Set the required MONGODB_URI so AppSettings can be instantiated."""
    monkeypatch.setenv("MONGODB_URI", "mongodb://localhost:27017/")
    return monkeypatch


@pytest.fixture
def no_smtp_env(monkeypatch):
    for var in _SMTP_VARS:
        monkeypatch.delenv(var, raising=False)
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
        assert DatabaseSettings().db_name == "event-horizon"

    def test_missing_mongodb_uri_raises(self, monkeypatch):
        monkeypatch.delenv("MONGODB_URI", raising=False)
        with pytest.raises(PydanticValidationError):
            DatabaseSettings()


# ---------------------------------------------------------------------------
# JWTSettings
# ---------------------------------------------------------------------------


class TestJWTSettings:
    def test_defaults(self, monkeypatch):
        for var in ("JWT_ISSUER", "JWT_AUDIENCE", "JWT_PRIVATE_KEY", "JWT_PUBLIC_KEY", "JWT_SECRET"):
            monkeypatch.delenv(var, raising=False)
        s = JWTSettings()
        assert s.jwt_issuer == "event-horizon"
        assert s.jwt_audience == "event-horizon.api"
        assert s.jwt_secret == ""


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
# SmtpSettings
# ---------------------------------------------------------------------------


class TestSmtpSettings:
    def test_all_missing_by_default(self, no_smtp_env):
        assert SmtpSettings().missing_fields() == [
            "SMTP_HOST",
            "SMTP_PORT",
            "SMTP_USER",
            "SMTP_PASS",
            "SMTP_FROM",
        ]

    def test_fully_configured(self, no_smtp_env):
        no_smtp_env.setenv("SMTP_HOST", "smtp.example.com")
        no_smtp_env.setenv("SMTP_PORT", "465")
        no_smtp_env.setenv("SMTP_USER", "mailer")
        no_smtp_env.setenv("SMTP_PASS", "hunter2")
        no_smtp_env.setenv("SMTP_FROM", "Event Horizon <no-reply@example.com>")
        no_smtp_env.setenv("SMTP_SECURE", "true")
        s = SmtpSettings()
        assert s.missing_fields() == []
        assert s.smtp_port == 465
        assert s.smtp_secure is True

    def test_timeouts(self, no_smtp_env):
        s = SmtpSettings()
        assert s.smtp_timeout_seconds == 60.0
        assert s.smtp_send_deadline_seconds == 65.0


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
        for attr in ("db", "jwt", "smtp", "logging", "sentry"):
            assert getattr(s, attr) is not None, f"sub-config '{attr}' is None"

    def test_cors_origins_default(self, with_mongo):
        assert AppSettings().cors_origins == ["*"]

    def test_app_url_default(self, with_mongo):
        with_mongo.delenv("APP_URL", raising=False)
        assert AppSettings().app_url == "http://localhost:3000"
