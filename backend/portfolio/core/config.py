"""Environment-driven configuration classes for the portfolio backend."""

from __future__ import annotations

import os
from collections.abc import Mapping
from typing import Final

from dotenv import load_dotenv

# Selects the config class: 'development' | 'testing' | 'production'
ENV_VAR: Final[str] = "APP_ENV"

TRUTHY: Final[frozenset[str]] = frozenset({"1", "true", "yes", "y", "on"})

# Missing .env is fine
load_dotenv()


def env_bool(name: str, default: bool = False) -> bool:
    """Read a yes/no flag from the environment.

    Parameters
    ----------
    name: str
        Variable to read.
    default: bool, optional
        Returned when the variable is not set.

    Returns
    -------
    bool
        ``True`` for any of ``1/true/yes/y/on`` (case-insensitive).
    """
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in TRUTHY


def env_int(name: str, default: int) -> int:
    """Read an integer from the environment; blank or unset gives ``default``."""
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return int(raw)


class BaseConfig:
    """Settings shared by every environment.

    Attributes
    ----------
    APP_VERSION, APP_COMMIT: str
        Build identifiers reported by ``GET /api/v1/health``.
    SECRET_KEY: str
        Flask's own secret.
    JWT_SECRET_KEY: str
        HMAC key for access tokens. Empty by default; token issuance then
        fails with ``ConfigurationError`` while the rest of the API works.
    JWT_ISSUER, JWT_AUDIENCE: str
        ``iss``/``aud`` written into access tokens and required on decode.
    JWT_ACCESS_TOKEN_MINUTES: int
        Access token lifetime.
    JWT_REFRESH_TOKEN_DAYS: int
        Refresh token lifetime.
    DEFAULT_USER_ROLE: str
        Role granted to every newly registered account.
    SQLALCHEMY_DATABASE_URI: str
        Database URL (``DATABASE_URL``).
    LOG_LEVEL: str
        Root logger level.
    LOG_FORMAT: str
        ``json`` (default) or ``text``.
    LOG_REQUESTS: bool
        Emit one ``portfolio.access`` line per request.
    CORS_ORIGINS: str
        Comma-separated allowed origins; ``*`` or blank allows any.
    USE_PROXYFIX: bool
        Trust one hop of ``X-Forwarded-*`` headers.
    """

    API_BASE_PREFIX = "/api"
    APP_VERSION = os.getenv("APP_VERSION", "dev")
    APP_COMMIT = os.getenv("APP_COMMIT", "unknown")

    SECRET_KEY = os.getenv("SECRET_KEY", "CHANGE_ME")

    # Access and refresh tokens
    JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY", "")
    JWT_ISSUER = os.getenv("JWT_ISSUER", "portfolio-api")
    JWT_AUDIENCE = os.getenv("JWT_AUDIENCE", "portfolio-clients")
    JWT_ALGORITHM = "HS256"
    JWT_ACCESS_TOKEN_MINUTES = env_int("JWT_ACCESS_TOKEN_MINUTES", 15)
    JWT_REFRESH_TOKEN_DAYS = env_int("JWT_REFRESH_TOKEN_DAYS", 7)

    DEFAULT_USER_ROLE = "User"

    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URL", "sqlite:///./portfolio.db")
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ECHO = env_bool("SQLALCHEMY_ECHO", False)

    PROPAGATE_EXCEPTIONS = False
    USE_PROXYFIX = env_bool("USE_PROXYFIX", False)

    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    LOG_FORMAT = os.getenv("LOG_FORMAT", "json")
    LOG_REQUESTS = env_bool("LOG_REQUESTS", True)

    CORS_ORIGINS = os.getenv("CORS_ORIGINS", "http://localhost:5173")
    CORS_MAX_AGE = 600

    DEBUG = False
    TESTING = False


class DevelopmentConfig(BaseConfig):
    """Local development: debug on, readable log lines."""

    DEBUG = env_bool("FLASK_DEBUG", True)
    LOG_FORMAT = os.getenv("LOG_FORMAT", "text")


class TestingConfig(BaseConfig):
    """Configuration for automated test runs.

    Notes
    -----
    - In-memory SQLite unless ``TEST_DATABASE_URL`` is set.
    - A fixed signing key keeps token tests deterministic.
    - Access lines are off to keep pytest output short.
    """

    TESTING = True
    DEBUG = False
    SQLALCHEMY_DATABASE_URI = os.getenv("TEST_DATABASE_URL", "sqlite:///:memory:")
    JWT_SECRET_KEY = "testing-signing-key-with-at-least-32-bytes"
    PROPAGATE_EXCEPTIONS = True
    LOG_REQUESTS = False


class ProductionConfig(BaseConfig):
    """Production: no debug, no SQL echo, pooled connections are pinged before use."""

    DEBUG = False
    SQLALCHEMY_ECHO = False
    SQLALCHEMY_ENGINE_OPTIONS = {"pool_pre_ping": True}


CONFIG_MAP: Mapping[str, type[BaseConfig]] = {
    "development": DevelopmentConfig,
    "testing": TestingConfig,
    "production": ProductionConfig,
}


def get_config() -> type[BaseConfig]:
    """Pick the config class named by ``APP_ENV`` (development when unset or unknown)."""
    name = os.getenv(ENV_VAR, "development").strip().lower()
    return CONFIG_MAP.get(name, DevelopmentConfig)
