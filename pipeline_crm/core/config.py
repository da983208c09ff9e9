"""Configuration module for the pipeline CRM application."""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from urllib.parse import urlparse

from dotenv import load_dotenv

from pipeline_crm import __version__
from pipeline_crm.core.exceptions import ConfigurationError

load_dotenv()

OBJECT_STORE_BACKENDS = {"gcs", "local"}


def _as_bool(value: str | None, default: bool = False) -> bool:
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class Config:
    """Runtime configuration with validation."""

    APP_NAME: str
    APP_VERSION: str
    ENV: str
    DEBUG: bool
    DATABASE_URL: str
    JWT_SECRET: str
    JWT_TTL_DAYS: int
    ADMIN_EMAIL: str
    OBJECT_STORE_BACKEND: str
    GCS_BUCKET_NAME: str
    LOCAL_STORAGE_PATH: str
    MAX_UPLOAD_BYTES: int
    SEED_DATA_PATH: str
    API_HOST: str
    API_PORT: int
    API_PREFIX: str
    LOG_LEVEL: str
    LOG_FILE: str

    @property
    def is_production(self) -> bool:
        return self.ENV == "production"


def _build_config(env: str | None = None) -> Config:
    resolved_env = (env or os.getenv("ENV", "development")).strip().lower()
    debug = _as_bool(os.getenv("DEBUG"), default=False)

    config = Config(
        APP_NAME="pipeline-crm",
        APP_VERSION=os.getenv("APP_VERSION", __version__),
        ENV=resolved_env,
        DEBUG=debug if resolved_env != "production" else False,
        DATABASE_URL=os.getenv("DATABASE_URL", "sqlite:///./pipeline.db"),
        JWT_SECRET=os.getenv("JWT_SECRET", "change_me_jwt_secret"),
        JWT_TTL_DAYS=int(os.getenv("JWT_TTL_DAYS", "30")),
        ADMIN_EMAIL=os.getenv("ADMIN_EMAIL", "").strip().lower(),
        OBJECT_STORE_BACKEND=os.getenv("OBJECT_STORE_BACKEND", "local").strip().lower(),
        GCS_BUCKET_NAME=os.getenv("GCS_BUCKET_NAME", ""),
        LOCAL_STORAGE_PATH=os.getenv("LOCAL_STORAGE_PATH", "./uploads"),
        MAX_UPLOAD_BYTES=int(os.getenv("MAX_UPLOAD_BYTES", str(10 * 1024 * 1024))),
        SEED_DATA_PATH=os.getenv("SEED_DATA_PATH", ""),
        API_HOST=os.getenv("API_HOST", "0.0.0.0"),
        API_PORT=int(os.getenv("API_PORT", "8080")),
        API_PREFIX=os.getenv("API_PREFIX", "/api"),
        LOG_LEVEL=os.getenv("LOG_LEVEL", "INFO").upper(),
        LOG_FILE=os.getenv("LOG_FILE", ""),
    )
    _validate_config(config)
    return config


def _validate_database_url(database_url: str) -> None:
    parsed = urlparse(database_url)
    if parsed.scheme not in {"sqlite", "postgresql", "postgresql+psycopg2"}:
        raise ConfigurationError(
            "DATABASE_URL must use sqlite:// or postgresql:// style URL."
        )
    if parsed.scheme.startswith("postgresql") and not parsed.hostname:
        raise ConfigurationError("PostgreSQL DATABASE_URL is missing hostname.")


def _validate_config(config: Config) -> None:
    _validate_database_url(config.DATABASE_URL)

    if config.JWT_TTL_DAYS < 1:
        raise ConfigurationError("JWT_TTL_DAYS must be >= 1.")
    if config.MAX_UPLOAD_BYTES < 1:
        raise ConfigurationError("MAX_UPLOAD_BYTES must be >= 1.")
    if config.OBJECT_STORE_BACKEND not in OBJECT_STORE_BACKENDS:
        raise ConfigurationError("OBJECT_STORE_BACKEND must be one of gcs/local.")
    if config.OBJECT_STORE_BACKEND == "gcs" and not config.GCS_BUCKET_NAME:
        raise ConfigurationError("GCS_BUCKET_NAME is required when OBJECT_STORE_BACKEND=gcs.")
    if config.LOG_LEVEL not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
        raise ConfigurationError("LOG_LEVEL must be one of DEBUG/INFO/WARNING/ERROR/CRITICAL.")
    if config.is_production and "change_me" in config.JWT_SECRET:
        raise ConfigurationError("Production JWT_SECRET uses the placeholder value.")


@lru_cache(maxsize=8)
def get_config(env: str | None = None) -> Config:
    """Get validated configuration for the requested environment."""
    return _build_config(env)
