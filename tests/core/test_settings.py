"""Tests for academy/core/settings.py."""

from datetime import timedelta

import pytest
from pydantic import ValidationError

from academy.core.settings import Settings


def make_settings(**overrides) -> Settings:
    values = {
        "DATABASE_URL": "sqlite://",
        "SESSION_SECRET_KEY": "test-secret-key",
        "ADMIN_USERNAME": "admin",
        "ADMIN_PASSWORD": "admin-password",
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


def test_cors_origins_list_strips_blanks():
    settings = make_settings(CORS_ORIGINS=" http://a.example , ,http://b.example ")

    assert settings.cors_origins_list == ["http://a.example", "http://b.example"]


@pytest.mark.parametrize(
    ("env_name", "secure"),
    [("development", False), ("test", False), ("LOCAL", False), ("production", True)],
)
def test_is_secure_cookie(env_name, secure):
    assert make_settings(ENV_NAME=env_name).is_secure_cookie is secure


def test_session_expires_in():
    assert make_settings(SESSION_EXPIRES_DAYS=7).session_expires_in == timedelta(
        days=7
    )


def test_session_expires_days_bounded_by_firebase_limits():
    with pytest.raises(ValidationError):
        make_settings(SESSION_EXPIRES_DAYS=15)
