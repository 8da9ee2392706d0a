"""Business logic powering the favorites API endpoints.

Store access goes through :class:`~sitemanager.db.store.SiteStore`; the
listing pipeline is split across the collaborators in
:mod:`sitemanager.services.favorites`:

* ``decode_favorite_ids`` – tolerant decoding of the stored favorites attribute.
* :class:`BulkSiteFetcher` – batch reads with unprocessed-key retries.
* ``authorize_and_project`` – soft-delete and membership filtering, projection.
* ``filter_by_search``/``sort_by_name``/``paginate`` – in-memory page assembly.
* :class:`BridgeCountEnricher` – per-site bridge counts for the final page.

:class:`FavoritesService` only coordinates the workflow, which keeps each stage
individually testable.
"""

from __future__ import annotations

import logging

from sitemanager.db.store import SiteStore
from sitemanager.schemas.favorites import FavoriteMutationResponse, FavoritesPage
from sitemanager.services.caller import Caller
from sitemanager.services.favorites import (
    BridgeCountEnricher,
    BulkSiteFetcher,
    PageRequest,
    authorize_and_project,
    decode_favorite_ids,
    is_soft_deleted,
    resolve_membership,
)
from sitemanager.services.favorites.paging import (
    empty_meta,
    filter_by_search,
    paginate,
    sort_by_name,
)

logger = logging.getLogger(__name__)


class FavoritesService:
    """Orchestrates the store, fetcher and enricher dependencies."""

    def __init__(
        self,
        *,
        store: SiteStore,
        fetcher: BulkSiteFetcher,
        enricher: BridgeCountEnricher,
    ) -> None:
        self._store = store
        self._fetcher = fetcher
        self._enricher = enricher

    async def list_favorites(
        self,
        *,
        caller: Caller,
        page_request: PageRequest,
        search: str | None = None,
        include_devices: bool = False,
    ) -> FavoritesPage:
        attribute = await self._store.get_favorites_attribute(caller.user_id)
        favorite_ids = decode_favorite_ids(attribute)
        if not favorite_ids:
            return FavoritesPage(items=[], meta=empty_meta(page_request.page_size))

        # Sorted so batch composition does not depend on set iteration order.
        records = await self._fetcher.fetch(sorted(favorite_ids))
        views = authorize_and_project(
            records,
            user_id=caller.user_id,
            is_super=caller.is_super,
            include_devices=include_devices,
        )
        matched = sort_by_name(filter_by_search(views, search))
        page_items, meta = paginate(matched, page_request)
        enriched = await self._enricher.enrich(page_items)

        logger.debug(
            "Listed favorites for %s: %d ids, %d visible, page %d/%d",
            caller.user_id,
            len(favorite_ids),
            meta.total,
            meta.page,
            meta.total_pages,
        )
        return FavoritesPage(items=enriched, meta=meta)

    async def add_favorite(
        self, *, caller: Caller, site_id: str
    ) -> FavoriteMutationResponse:
        site = await self._store.get_site(site_id)
        if site is None or is_soft_deleted(site):
            raise LookupError("Site not found")

        membership = resolve_membership(
            site, user_id=caller.user_id, is_super=caller.is_super
        )
        if membership is None:
            raise PermissionError("Forbidden: you are not a member of this site.")

        await self._store.add_favorite(caller.user_id, site_id)
        logger.info("User %s marked site %s as favorite", caller.user_id, site_id)
        return FavoriteMutationResponse(message="Marked as favorite", site_id=site_id)

    async def remove_favorite(
        self, *, caller: Caller, site_id: str
    ) -> FavoriteMutationResponse:
        # Removing an id that is not in the set is a no-op on the store side.
        await self._store.remove_favorite(caller.user_id, site_id)
        logger.info("User %s unmarked favorite site %s", caller.user_id, site_id)
        return FavoriteMutationResponse(message="Unmarked favorite", site_id=site_id)


__all__ = ["FavoritesService"]
