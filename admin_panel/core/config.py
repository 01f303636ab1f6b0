"""
Application configuration utilities for the admin panel service.

Centralizes environment-derived settings and sensible defaults. Settings are
re-read on every call so tests can tweak the environment between app
instances without reloading modules.
"""

from dataclasses import dataclass
import os


@dataclass(frozen=True)
class ApplicationSettings:
    """Immutable application settings derived from environment variables."""

    environment: str
    version: str
    debug: bool
    seed_data: bool
    reject_inactive_delete: bool
    allow_origin: str | None
    rate_limit_per_minute: int
    redis_url: str | None


def _str_to_bool(value: str | None, *, default: bool = False) -> bool:
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "y", "on"}


def _str_to_int(value: str | None, *, default: int) -> int:
    if value is None or not value.strip():
        return default
    try:
        return int(value)
    except ValueError:
        return default


def get_application_settings() -> ApplicationSettings:
    """Load application settings from environment with defaults.

    Returns
    -------
    ApplicationSettings
        Frozen settings object safe to share across the application.
    """
    environment = os.getenv("APP_ENV", "development")
    version = os.getenv("APP_VERSION", "0.1.0")
    debug = _str_to_bool(os.getenv("APP_DEBUG"), default=(environment != "production"))

    return ApplicationSettings(
        environment=environment,
        version=version,
        debug=debug,
        seed_data=_str_to_bool(os.getenv("APP_SEED_DATA"), default=True),
        reject_inactive_delete=_str_to_bool(os.getenv("APP_REJECT_INACTIVE_DELETE"), default=True),
        allow_origin=os.getenv("APP_ALLOW_ORIGIN") or None,
        rate_limit_per_minute=_str_to_int(os.getenv("APP_RATE_LIMIT_PER_MINUTE"), default=60),
        redis_url=os.getenv("REDIS_URL") or None,
    )
