"""Application settings with environment-based simple classes."""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from datetime import timedelta
from typing import Any, Final

from dotenv import load_dotenv

# Public selector env var (keep neutral name to avoid collisions)
ENV_VAR: Final[str] = "APP_ENV"  # 'development' | 'testing' | 'production'

PLACEHOLDER_SECRETS: Final[frozenset[str]] = frozenset({"CHANGE_ME", "CHANGE_ME_JWT"})

# Access tokens living longer than this are almost certainly a misconfiguration.
MAX_SANE_ACCESS_LIFETIME: Final[timedelta] = timedelta(days=1)

log = logging.getLogger(__name__)

load_dotenv()


def env_bool(name: str, default: bool = False) -> bool:
    """Parse a boolean flag from an environment variable.

    Parameters
    ----------
    name: str
        Environment variable to inspect.
    default: bool, optional
        Value returned when the variable is unset. Defaults to ``False``.

    Returns
    -------
    bool
        ``True`` if the value resembles ``{"1", "true", "yes", "y", "on"}``
        ignoring case; otherwise ``False`` or ``default`` when missing.
    """
    val = os.getenv(name)
    if val is None:
        return default
    return str(val).strip().lower() in {"1", "true", "yes", "y", "on"}


def env_seconds(name: str, default: timedelta) -> timedelta:
    """Read a lifetime expressed in whole seconds.

    Parameters
    ----------
    name: str
        Environment variable to inspect.
    default: datetime.timedelta
        Lifetime used when the variable is unset or blank.

    Returns
    -------
    datetime.timedelta
        Parsed lifetime.

    Raises
    ------
    ValueError
        If the value is not a positive integer.
    """
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    seconds = int(raw.strip())
    if seconds <= 0:
        raise ValueError(f"{name} must be a positive number of seconds.")
    return timedelta(seconds=seconds)


class BaseConfig:
    """Base configuration shared across environments.

    Attributes
    ----------
    API_BASE_PREFIX: str
        Root path for registering API blueprints.
    SECRET_KEY: str
        Flask secret used to sign the session cookie.
    JWT_SECRET_KEY: str
        Key used by ``flask-jwt-extended`` for signing access tokens. Startup
        fails when it is empty.
    JWT_ACCESS_TOKEN_EXPIRES: datetime.timedelta
        Access token lifetime. Short by default (15 minutes).
    JWT_REFRESH_TOKEN_EXPIRES: datetime.timedelta
        Lifetime of the opaque refresh tokens stored server-side (7 days).
    BCRYPT_ROUNDS: int
        bcrypt cost factor used by the credential hasher.
    SQLALCHEMY_DATABASE_URI: str
        Database connection string consumed by SQLAlchemy.
    REDIS_URL: str | None
        When set, revoked access tokens are tracked in Redis instead of SQL.
    LOG_LEVEL: str
        Root logging verbosity (``INFO`` by default).
    CORS_ORIGINS: str
        Comma-separated list of allowed origins for CORS.
    """

    API_BASE_PREFIX = "/api"
    APP_VERSION = os.getenv("APP_VERSION", "dev")

    # Secrets / security
    SECRET_KEY = os.getenv("SECRET_KEY", "CHANGE_ME")
    JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY", "CHANGE_ME_JWT")
    JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
    JWT_ACCESS_TOKEN_EXPIRES = env_seconds("JWT_ACCESS_TOKEN_EXPIRES", timedelta(minutes=15))
    JWT_REFRESH_TOKEN_EXPIRES = env_seconds("JWT_REFRESH_TOKEN_EXPIRES", timedelta(days=7))
    JWT_TOKEN_LOCATION = ["headers"]
    BCRYPT_ROUNDS = int(os.getenv("BCRYPT_ROUNDS", "10"))

    # Session cookie carrying the token pair for browser clients
    SESSION_COOKIE_NAME = "ficom_session"
    SESSION_COOKIE_HTTPONLY = True
    SESSION_COOKIE_SAMESITE = "Lax"
    SESSION_COOKIE_SECURE = env_bool("SESSION_COOKIE_SECURE", False)
    PERMANENT_SESSION_LIFETIME = timedelta(days=7)

    # DB
    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URL", "sqlite:///./dev.db")
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ECHO = env_bool("SQLALCHEMY_ECHO", False)
    REDIS_URL = os.getenv("REDIS_URL") or None

    # Flask & JSON
    JSON_SORT_KEYS = False
    PROPAGATE_EXCEPTIONS = False

    # Logging & CORS
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    CORS_ORIGINS = os.getenv("CORS_ORIGINS", "http://localhost:3000")

    DEBUG = False
    TESTING = False


class DevelopmentConfig(BaseConfig):
    """Configuration tailored for local development."""

    APP_ENV = "development"
    DEBUG = env_bool("FLASK_DEBUG", True)
    CORS_MAX_AGE = 600  # 10 minutes


class TestingConfig(BaseConfig):
    """Configuration for automated test runs.

    Notes
    -----
    - Uses an in-memory SQLite database unless ``TEST_DATABASE_URL`` is set.
    - Lowers the bcrypt cost so the suite stays fast.
    - Never talks to Redis.
    """

    APP_ENV = "testing"
    TESTING = True
    DEBUG = False
    JWT_SECRET_KEY = "testing-jwt-secret-with-enough-entropy"
    SQLALCHEMY_DATABASE_URI = os.getenv("TEST_DATABASE_URL", "sqlite:///:memory:")
    REDIS_URL = None
    BCRYPT_ROUNDS = 4
    PROPAGATE_EXCEPTIONS = True


class ProductionConfig(BaseConfig):
    """Configuration defaults for production deployments."""

    APP_ENV = "production"
    DEBUG = False
    SQLALCHEMY_ECHO = False
    PROPAGATE_EXCEPTIONS = False
    SESSION_COOKIE_SECURE = True


CONFIG_MAP: Mapping[str, type[BaseConfig]] = {
    "development": DevelopmentConfig,
    "testing": TestingConfig,
    "production": ProductionConfig,
}


def get_config(name: str | None = None) -> type[BaseConfig]:
    """Return the configuration class for ``name`` or ``APP_ENV``.

    Falls back to :class:`DevelopmentConfig` when the name is unknown.
    """
    selected = (name or os.getenv(ENV_VAR, "development")).strip().lower()
    return CONFIG_MAP.get(selected, DevelopmentConfig)


def validate_auth_settings(config: Mapping[str, Any]) -> None:
    """Fail fast on signing misconfiguration.

    :param config: Loaded Flask configuration.
    :raises RuntimeError: If the JWT secret is missing, or left at a
        placeholder outside development/testing.
    """
    secret = config.get("JWT_SECRET_KEY")
    if not secret or not str(secret).strip():
        raise RuntimeError("JWT_SECRET_KEY is not configured; refusing to start.")

    is_relaxed = bool(config.get("DEBUG")) or bool(config.get("TESTING"))
    if not is_relaxed and str(secret) in PLACEHOLDER_SECRETS:
        raise RuntimeError("JWT_SECRET_KEY still holds a placeholder value.")

    access = config.get("JWT_ACCESS_TOKEN_EXPIRES")
    if isinstance(access, timedelta) and access > MAX_SANE_ACCESS_LIFETIME:
        log.warning(
            "config.access_lifetime_too_long seconds=%s",
            int(access.total_seconds()),
        )
