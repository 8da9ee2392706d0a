"""Attach IoT bridge counts to the sites of a favorites page."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence
from typing import Any

from sitemanager.db.store import SiteStore
from sitemanager.schemas.favorites import SiteView

logger = logging.getLogger(__name__)


class BridgeCountEnricher:
    """Counts bridge rows per site, following continuation keys to the end.

    Sites are counted concurrently (at most ``concurrency`` queries in flight)
    and each result is written into the slot matching the site's position, so
    the enriched list keeps the order it was given. A failing count fails the
    whole enrichment and cancels the counts still in flight; no site is ever
    returned with a guessed count.
    """

    def __init__(self, store: SiteStore, *, concurrency: int = 10) -> None:
        if concurrency < 1:
            raise ValueError("concurrency must be at least 1")
        self._store = store
        self._concurrency = concurrency

    async def count_for_site(self, site_id: str) -> int:
        """Return the total number of bridges registered under ``site_id``."""

        total = 0
        pages = 0
        start_key: dict[str, Any] | None = None
        while True:
            page = await self._store.count_bridges(site_id, start_key=start_key)
            total += page.count
            pages += 1
            start_key = page.last_evaluated_key
            if not start_key:
                break

        if pages > 1:
            logger.debug(
                "Counted %d bridges for site %s across %d pages", total, site_id, pages
            )
        return total

    async def enrich(self, views: Sequence[SiteView]) -> list[SiteView]:
        """Return copies of ``views`` with ``iot_bridge_count`` attached."""

        if not views:
            return []

        semaphore = asyncio.Semaphore(self._concurrency)
        counts: list[int | None] = [None] * len(views)

        async def _fill(index: int, site_id: str) -> None:
            async with semaphore:
                counts[index] = await self.count_for_site(site_id)

        tasks = [
            asyncio.create_task(_fill(index, view.site_id))
            for index, view in enumerate(views)
        ]
        try:
            await asyncio.gather(*tasks)
        except BaseException:
            # Stop sibling counts so no store calls outlive the failed request.
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise

        return [
            view.model_copy(update={"iot_bridge_count": count})
            for view, count in zip(views, counts, strict=True)
        ]


__all__ = ["BridgeCountEnricher"]
