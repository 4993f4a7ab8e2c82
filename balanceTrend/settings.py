"""Django settings for balanceTrend.

Configuration is driven by environment variables so deployments can tune the
balance window, time zone and log level without code changes, and secrets are
not checked into the repository.
"""

from __future__ import annotations

import os
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parent.parent

def _env_bool(name: str, *, default: bool) -> bool:
    """Parse a boolean environment variable.

    Args:
        name: Environment variable name.
        default: Value when the variable is not set.

    Returns:
        Parsed boolean value.
    """

    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "t", "yes", "y", "on"}


def _env_int(name: str, *, default: int) -> int:
    """Parse an integer environment variable.

    Args:
        name: Environment variable name.
        default: Value when the variable is not set.

    Returns:
        Parsed integer value.
    """

    raw = os.getenv(name)
    if raw is None:
        return default
    return int(raw.strip())


def _env_str(name: str, *, default: str) -> str:
    """Read a string environment variable, ignoring blank values."""

    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip()

DEBUG = _env_bool("DJANGO_DEBUG", default=True)

_DEV_SECRET_KEY = "dev-only-insecure-secret-key"
SECRET_KEY = os.getenv("DJANGO_SECRET_KEY") or (_DEV_SECRET_KEY if DEBUG else "")
if not SECRET_KEY:
    raise RuntimeError("DJANGO_SECRET_KEY is required when DJANGO_DEBUG is False.")

INSTALLED_APPS = [
    "core.apps.CoreConfig",
]

LANGUAGE_CODE = "en-us"
# Calendar days for balance bucketing are cut in this zone.
TIME_ZONE = _env_str("DJANGO_TIME_ZONE", default="UTC")
USE_I18N = True
USE_TZ = True

BALANCE_SERIES_WINDOW_DAYS = _env_int("BALANCE_SERIES_WINDOW_DAYS", default=14)
if BALANCE_SERIES_WINDOW_DAYS < 1:
    raise RuntimeError("BALANCE_SERIES_WINDOW_DAYS must be at least 1.")

LOG_LEVEL = _env_str("DJANGO_LOG_LEVEL", default="INFO").upper()

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "standard": {
            "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "standard",
        },
    },
    "root": {
        "handlers": ["console"],
        "level": LOG_LEVEL,
    },
    "loggers": {
        "django": {
            "handlers": ["console"],
            "level": "WARNING",
            "propagate": False,
        },
    },
}

DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"
