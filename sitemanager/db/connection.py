"""Process-wide DynamoDB client shared by every request.

Lambda containers handle many invocations per process, so the client (and its
HTTP connection pool) is created once and reused. boto3 low-level clients are
thread-safe, which matters because store calls run in worker threads.
"""

from __future__ import annotations

import logging
from typing import Any

import boto3
from botocore.config import Config

from sitemanager.settings import AppSettings, get_settings

logger = logging.getLogger(__name__)

# Throttling retries inside botocore stay modest; the favorites fetcher does its
# own unprocessed-key retries on top of these.
_CLIENT_CONFIG = Config(
    retries={"max_attempts": 3, "mode": "standard"},
    max_pool_connections=25,
)

_client: Any | None = None


def create_client(settings: AppSettings | None = None) -> Any:
    """Create a low-level DynamoDB client from ``settings``."""

    settings = settings or get_settings()
    kwargs: dict[str, Any] = {
        "region_name": settings.aws_region,
        "config": _CLIENT_CONFIG,
    }
    if settings.dynamodb_endpoint_url:
        kwargs["endpoint_url"] = settings.dynamodb_endpoint_url

    client = boto3.client("dynamodb", **kwargs)

    try:
        from sitemanager.monitoring import setup_call_monitoring

        setup_call_monitoring(
            client, slow_call_threshold=settings.slow_call_threshold
        )
    except Exception as exc:  # pragma: no cover - monitoring is optional at runtime
        logger.warning("Failed to enable call monitoring: %s", exc)

    return client


def get_client() -> Any:
    """Get or create the global client instance."""
    global _client
    if _client is None:
        _client = create_client()
    return _client


def reset_client() -> None:
    """Drop the cached client so the next call rebuilds it from settings."""
    global _client
    _client = None
