"""Bulk retrieval of site records with retry of unprocessed keys."""

from __future__ import annotations

import asyncio
import logging
from collections import deque
from collections.abc import Awaitable, Callable, Iterable
from typing import Any

from sitemanager.db.store import SiteStore
from sitemanager.settings import MAX_BATCH_GET_KEYS

logger = logging.getLogger(__name__)


class BulkSiteFetcher:
    """Drain a queue of outstanding site ids through repeated batch reads.

    Each attempt takes up to ``chunk_size`` ids off the queue. Ids the store
    reports as unprocessed go back on the queue and the next attempt waits
    ``retry_delay`` seconds first. There is no attempt limit: favorites lists
    are small, so completeness wins over latency under throttling. Any other
    store failure propagates unchanged.
    """

    def __init__(
        self,
        store: SiteStore,
        *,
        chunk_size: int = MAX_BATCH_GET_KEYS,
        retry_delay: float = 0.06,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ) -> None:
        if not 1 <= chunk_size <= MAX_BATCH_GET_KEYS:
            raise ValueError(
                f"chunk_size must be between 1 and {MAX_BATCH_GET_KEYS}, got {chunk_size}"
            )
        self._store = store
        self._chunk_size = chunk_size
        self._retry_delay = retry_delay
        self._sleep = sleep

    async def fetch(self, site_ids: Iterable[str]) -> list[dict[str, Any]]:
        """Return every record the store holds for ``site_ids``.

        Ids with no matching record simply produce no output.
        """

        outstanding: deque[str] = deque(dict.fromkeys(site_ids))
        records: list[dict[str, Any]] = []
        attempts = 0
        retried = 0

        while outstanding:
            if retried:
                await self._sleep(self._retry_delay)

            batch = [
                outstanding.popleft()
                for _ in range(min(self._chunk_size, len(outstanding)))
            ]
            result = await self._store.batch_get_sites(batch)
            attempts += 1
            records.extend(result.items)

            retried = len(result.unprocessed_ids)
            if retried:
                logger.info(
                    "Re-queueing %d unprocessed site keys (attempt %d)",
                    retried,
                    attempts,
                )
                outstanding.extend(result.unprocessed_ids)

        logger.debug(
            "Fetched %d site records in %d batch attempts", len(records), attempts
        )
        return records


__all__ = ["BulkSiteFetcher"]
