from __future__ import annotations

import logging
import os
from typing import Optional
from urllib.parse import urlparse

from pydantic import BaseModel, Field, field_validator


class Settings(BaseModel):
    """Typed checkout client settings built from environment variables."""

    backend_base_url: str = "http://localhost:3050"
    # The hosted page redirects here; the browser session intercepts it
    return_scheme: str = "saplayer://payment"
    placeholder_email: str = "user@example.com"

    # Status polling
    poll_max_attempts: int = Field(5, ge=1)
    poll_interval_seconds: float = Field(2.0, ge=0)
    poll_initial_delay_seconds: float = Field(1.0, ge=0)

    http_timeout_seconds: float = Field(10.0, gt=0)
    browser_timeout_seconds: float = Field(900.0, gt=0)

    # Local return listener, disabled unless a port is set
    return_host: str = "127.0.0.1"
    return_port: Optional[int] = None

    log_level: str = "INFO"
    log_identity_fields: bool = False

    @field_validator("backend_base_url")
    @classmethod
    def validate_backend_base_url(cls, v: str) -> str:
        if not v:
            raise ValueError("Backend base URL cannot be empty")
        parsed = urlparse(v)
        if parsed.scheme not in {"http", "https"}:
            raise ValueError("Backend base URL must start with http:// or https://")
        if not parsed.netloc:
            raise ValueError("Backend base URL must include a host")
        return v.rstrip("/")

    @field_validator("return_scheme")
    @classmethod
    def validate_return_scheme(cls, v: str) -> str:
        if "://" not in v:
            raise ValueError("Return scheme must look like 'myapp://path'")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level: {v}")
        return level


def get_settings() -> Settings:
    """Return typed settings instance sourced from env vars."""
    return_port = os.environ.get("HOSTEDPAY_RETURN_PORT")
    return Settings(
        backend_base_url=os.environ.get(
            "HOSTEDPAY_BACKEND_URL", "http://localhost:3050"
        ),
        return_scheme=os.environ.get("HOSTEDPAY_RETURN_SCHEME", "saplayer://payment"),
        placeholder_email=os.environ.get(
            "HOSTEDPAY_PLACEHOLDER_EMAIL", "user@example.com"
        ),
        poll_max_attempts=int(os.environ.get("HOSTEDPAY_POLL_MAX_ATTEMPTS", "5")),
        poll_interval_seconds=float(
            os.environ.get("HOSTEDPAY_POLL_INTERVAL_SECONDS", "2.0")
        ),
        poll_initial_delay_seconds=float(
            os.environ.get("HOSTEDPAY_POLL_INITIAL_DELAY_SECONDS", "1.0")
        ),
        http_timeout_seconds=float(
            os.environ.get("HOSTEDPAY_HTTP_TIMEOUT_SECONDS", "10.0")
        ),
        browser_timeout_seconds=float(
            os.environ.get("HOSTEDPAY_BROWSER_TIMEOUT_SECONDS", "900")
        ),
        return_host=os.environ.get("HOSTEDPAY_RETURN_HOST", "127.0.0.1"),
        return_port=int(return_port) if return_port else None,
        log_level=os.environ.get("HOSTEDPAY_LOG_LEVEL", "INFO"),
        log_identity_fields=os.environ.get(
            "HOSTEDPAY_LOG_IDENTITY_FIELDS", "false"
        ).lower()
        == "true",
    )
