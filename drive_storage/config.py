"""Centralized configuration loading for the Drive storage adapter."""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache


@dataclass(frozen=True)
class Settings:
    """Immutable container for environment-driven settings."""

    drive_key_file: str | None
    drive_client_email: str | None
    drive_private_key: str | None

    # None = leave timeouts to the HTTP client
    drive_request_timeout: int | None = None
    drive_reuse_token: bool = False


def _get_bool(value: str | None, default: bool = False) -> bool:
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _get_positive_int(key: str, value: str, min_value: int = 1) -> int:
    """Parse and validate a positive integer from environment variable.

    Args:
        key: Environment variable name (for error messages)
        value: Raw string value from os.environ
        min_value: Minimum allowed value (default: 1)

    Returns:
        Validated positive integer

    Raises:
        ValueError: If value is not a positive integer or below min_value
    """
    try:
        parsed = int(value)
    except ValueError as e:
        raise ValueError(f"{key} must be an integer, got: {value}") from e

    if parsed < min_value:
        raise ValueError(f"{key} must be >= {min_value}, got: {parsed}")

    return parsed


def _get_private_key(value: str | None) -> str | None:
    # Keys pasted into .env files usually carry escaped newlines
    if value is None:
        return None
    return value.replace("\\n", "\n")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Load settings once per process."""

    key_file = os.environ.get("DRIVE_KEY_FILE") or None
    if not key_file:
        missing = [
            key for key in ("DRIVE_CLIENT_EMAIL", "DRIVE_PRIVATE_KEY") if not os.getenv(key)
        ]
        if missing:
            raise RuntimeError(
                "Missing required environment variables: "
                f"{', '.join(missing)} (or set DRIVE_KEY_FILE)"
            )

    raw_timeout = os.environ.get("DRIVE_REQUEST_TIMEOUT")

    return Settings(
        drive_key_file=key_file,
        drive_client_email=os.environ.get("DRIVE_CLIENT_EMAIL"),
        drive_private_key=_get_private_key(os.environ.get("DRIVE_PRIVATE_KEY")),
        drive_request_timeout=(
            _get_positive_int("DRIVE_REQUEST_TIMEOUT", raw_timeout, min_value=1)
            if raw_timeout
            else None
        ),
        drive_reuse_token=_get_bool(os.environ.get("DRIVE_REUSE_TOKEN"), default=False),
    )
