"""Centralized configuration management for the Site Manager API."""

from __future__ import annotations

import logging
import os
from functools import lru_cache

from dotenv import load_dotenv
from pydantic import Field, PrivateAttr
from pydantic_settings import BaseSettings, SettingsConfigDict

# Load a local .env file before the settings singleton is built so every
# consumer importing :mod:`sitemanager.settings` sees the same environment.
load_dotenv()

# -- Application-wide constants -------------------------------------------------

DEFAULT_AWS_REGION = "eu-north-1"
DEFAULT_USERS_TABLE = "Users"
DEFAULT_SITES_TABLE = "Sites"
DEFAULT_IOTBRIDGES_TABLE = "IoTBridges"
DEFAULT_SUPER_USER_GROUP = "SuperAdmin"
DEFAULT_LOG_LEVEL = "INFO"
# DynamoDB refuses BatchGetItem requests with more than 100 keys.
MAX_BATCH_GET_KEYS = 100


def _normalize_origin(origin: str) -> str:
    """Return the origin stripped of whitespace and trailing slashes."""

    return origin.strip().rstrip("/")


class AppSettings(BaseSettings):
    """Typed configuration surface built on top of ``pydantic-settings``.

    Table names, the AWS endpoint and the tuning knobs of the favorites engine
    (batch size, retry delay, enrichment fan-out) all live here so the store
    adapter and services never read ``os.environ`` directly.
    """

    _explicit_endpoint_url: bool = PrivateAttr(default=False)
    _explicit_cors_allow_origins: bool = PrivateAttr(default=False)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    def __init__(
        self, **values: object
    ) -> None:  # noqa: D401 - short override explanation
        """Capture explicit overrides prior to delegating to ``BaseSettings``."""

        normalized_keys = {str(key).lower() for key in values}
        super().__init__(**values)
        self._explicit_endpoint_url = bool(self.dynamodb_endpoint_url)
        self._explicit_cors_allow_origins = (
            "cors_allow_origins_raw" in normalized_keys
            or "cors_allow_origins" in normalized_keys
        )
        cors_env = os.getenv("CORS_ALLOW_ORIGINS")
        if cors_env is not None and cors_env.strip():
            self._explicit_cors_allow_origins = True

    aws_region: str = Field(
        default=DEFAULT_AWS_REGION,
        alias="AWS_REGION",
        description="Region of the DynamoDB tables backing the API.",
    )
    dynamodb_endpoint_url: str | None = Field(
        default=None,
        alias="DYNAMODB_ENDPOINT_URL",
        description=(
            "Optional endpoint override, e.g. http://localhost:4566 when the"
            " tables live in LocalStack during development."
        ),
    )
    users_table: str = Field(
        default=DEFAULT_USERS_TABLE,
        alias="USERS_TABLE",
        description="Table holding user records and their favoriteSites attribute.",
    )
    sites_table: str = Field(
        default=DEFAULT_SITES_TABLE,
        alias="SITES_TABLE",
        description="Table holding site records keyed by siteId.",
    )
    iotbridges_table: str = Field(
        default=DEFAULT_IOTBRIDGES_TABLE,
        alias="IOTBRIDGES_TABLE",
        description="Bridge table whose partition key is the owning siteId.",
    )
    batch_get_chunk_size: int = Field(
        default=MAX_BATCH_GET_KEYS,
        alias="BATCH_GET_CHUNK_SIZE",
        ge=1,
        le=MAX_BATCH_GET_KEYS,
        description="Number of site keys requested per BatchGetItem call.",
    )
    unprocessed_retry_delay_seconds: float = Field(
        default=0.06,
        alias="UNPROCESSED_RETRY_DELAY_SECONDS",
        ge=0.0,
        description="Pause applied before re-requesting unprocessed batch keys.",
    )
    enrichment_concurrency: int = Field(
        default=10,
        alias="ENRICHMENT_CONCURRENCY",
        ge=1,
        description="Maximum number of bridge count queries in flight per request.",
    )
    super_user_group: str = Field(
        default=DEFAULT_SUPER_USER_GROUP,
        alias="SUPER_USER_GROUP",
        description="Caller group that bypasses per-site membership checks.",
    )
    cors_allow_origins_raw: str | None = Field(
        default=None,
        alias="CORS_ALLOW_ORIGINS",
        description=(
            "Comma-separated list of additional CORS origins supplied via environment variable."
        ),
    )
    log_level: str = Field(
        default=DEFAULT_LOG_LEVEL,
        alias="LOG_LEVEL",
        description="Root logging level (e.g. INFO, DEBUG, WARNING).",
    )
    slow_call_threshold: float = Field(
        default=0.5,
        alias="SLOW_CALL_THRESHOLD",
        description=(
            "Threshold in seconds after which DynamoDB calls are logged as slow."
        ),
    )

    @property
    def cors_allow_origins(self) -> list[str]:
        """Return normalised CORS origins supplied via environment variables."""

        if not self.cors_allow_origins_raw:
            return []

        origins = [
            _normalize_origin(origin)
            for origin in self.cors_allow_origins_raw.split(",")
            if origin.strip()
        ]
        return [origin for origin in origins if origin]

    @property
    def log_level_numeric(self) -> int:
        """Translate ``log_level`` into the numeric constant expected by logging."""

        candidate = logging.getLevelName(self.log_level.upper())
        if isinstance(candidate, int):
            return candidate
        return logging.INFO

    def optional_config_warnings(self) -> list[str]:
        """Return human-readable warnings for unset optional configuration."""

        warnings: list[str] = []

        if not self._explicit_cors_allow_origins and not self.cors_allow_origins:
            warnings.append(
                "CORS_ALLOW_ORIGINS is not set - using default localhost origins only "
                "(may cause CORS issues in production)"
            )

        if self._explicit_endpoint_url:
            warnings.append(
                f"DYNAMODB_ENDPOINT_URL is set to {self.dynamodb_endpoint_url} - "
                "requests bypass the regional AWS endpoint"
            )

        return warnings


@lru_cache(maxsize=1)
def get_settings() -> AppSettings:
    """Return a cached instance of :class:`AppSettings`."""

    return AppSettings()


__all__ = [
    "AppSettings",
    "DEFAULT_AWS_REGION",
    "DEFAULT_IOTBRIDGES_TABLE",
    "DEFAULT_LOG_LEVEL",
    "DEFAULT_SITES_TABLE",
    "DEFAULT_SUPER_USER_GROUP",
    "DEFAULT_USERS_TABLE",
    "MAX_BATCH_GET_KEYS",
    "get_settings",
]
