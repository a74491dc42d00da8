"""Tests for checkout client settings."""

import pytest
from pydantic import ValidationError

from hostedpay.envs.client_env import Settings, get_settings


def test_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in (
        "HOSTEDPAY_BACKEND_URL",
        "HOSTEDPAY_RETURN_PORT",
        "HOSTEDPAY_POLL_MAX_ATTEMPTS",
        "HOSTEDPAY_LOG_IDENTITY_FIELDS",
    ):
        monkeypatch.delenv(name, raising=False)

    settings = get_settings()

    assert settings.backend_base_url == "http://localhost:3050"
    assert settings.return_scheme == "saplayer://payment"
    assert settings.placeholder_email == "user@example.com"
    assert settings.poll_max_attempts == 5
    assert settings.poll_interval_seconds == 2.0
    assert settings.poll_initial_delay_seconds == 1.0
    assert settings.return_port is None
    assert settings.log_identity_fields is False


def test_environment_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("HOSTEDPAY_BACKEND_URL", "https://api.cards.co.za/")
    monkeypatch.setenv("HOSTEDPAY_POLL_MAX_ATTEMPTS", "8")
    monkeypatch.setenv("HOSTEDPAY_RETURN_PORT", "8765")
    monkeypatch.setenv("HOSTEDPAY_LOG_LEVEL", "debug")
    monkeypatch.setenv("HOSTEDPAY_LOG_IDENTITY_FIELDS", "TRUE")

    settings = get_settings()

    assert settings.backend_base_url == "https://api.cards.co.za"
    assert settings.poll_max_attempts == 8
    assert settings.return_port == 8765
    assert settings.log_level == "DEBUG"
    assert settings.log_identity_fields is True


@pytest.mark.parametrize(
    "url", ["", "ftp://backend.test", "http://", "backend.test:3050"]
)
def test_invalid_backend_url(url: str) -> None:
    with pytest.raises(ValidationError):
        Settings(backend_base_url=url)


def test_invalid_return_scheme() -> None:
    with pytest.raises(ValidationError):
        Settings(return_scheme="saplayer")


def test_invalid_poll_policy() -> None:
    with pytest.raises(ValidationError):
        Settings(poll_max_attempts=0)


def test_invalid_log_level() -> None:
    with pytest.raises(ValidationError):
        Settings(log_level="LOUD")
