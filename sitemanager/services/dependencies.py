"""FastAPI dependency wiring for backend services.

Factories live here rather than in the service modules so the services stay
free of web-layer concerns and tests can override each seam individually via
``app.dependency_overrides``.
"""

from __future__ import annotations

from fastapi import Depends, HTTPException, Request, status

from sitemanager.db.connection import get_client
from sitemanager.db.store import DynamoSiteStore, SiteStore
from sitemanager.services.caller import Caller, resolve_caller
from sitemanager.services.favorites import BridgeCountEnricher, BulkSiteFetcher
from sitemanager.services.favorites_service import FavoritesService
from sitemanager.settings import AppSettings, get_settings


def get_site_store(settings: AppSettings = Depends(get_settings)) -> SiteStore:
    """Provide a store bound to the process-wide DynamoDB client."""

    return DynamoSiteStore(
        get_client(),
        users_table=settings.users_table,
        sites_table=settings.sites_table,
        iotbridges_table=settings.iotbridges_table,
    )


def get_caller(
    request: Request, settings: AppSettings = Depends(get_settings)
) -> Caller:
    """Resolve the caller from the Lambda authorizer context or local headers."""

    caller = resolve_caller(
        event=request.scope.get("aws.event"),
        headers=request.headers,
        super_user_group=settings.super_user_group,
    )
    if caller is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing caller identity",
        )
    return caller


def get_favorites_service(
    store: SiteStore = Depends(get_site_store),
    settings: AppSettings = Depends(get_settings),
) -> FavoritesService:
    """Wire the favorites orchestrator together."""

    fetcher = BulkSiteFetcher(
        store,
        chunk_size=settings.batch_get_chunk_size,
        retry_delay=settings.unprocessed_retry_delay_seconds,
    )
    enricher = BridgeCountEnricher(store, concurrency=settings.enrichment_concurrency)
    return FavoritesService(store=store, fetcher=fetcher, enricher=enricher)


__all__ = ["get_caller", "get_favorites_service", "get_site_store"]
