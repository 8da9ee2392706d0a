"""Async adapter over the DynamoDB tables consumed by the favorites engine.

The adapter exposes exactly the collaborator operations the services need and
keeps the DynamoDB wire format out of them: site records come back as plain
Python values (via boto3's ``TypeDeserializer``), while the user's favorites
attribute is handed over untouched because its encoding varies between
writers and is decoded by :mod:`sitemanager.services.favorites.codec`.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any, Protocol, runtime_checkable

from boto3.dynamodb.types import TypeDeserializer
from botocore.exceptions import BotoCoreError, ClientError

logger = logging.getLogger(__name__)

FAVORITES_ATTRIBUTE = "favoriteSites"

_deserializer = TypeDeserializer()


class StoreError(RuntimeError):
    """Raised when a DynamoDB operation fails for a reason other than throttled keys."""

    def __init__(self, operation: str, message: str) -> None:
        super().__init__(f"{operation} failed: {message}")
        self.operation = operation


@dataclass(frozen=True)
class BatchReadResult:
    """Records returned by one batch read plus the keys left unprocessed."""

    items: list[dict[str, Any]] = field(default_factory=list)
    unprocessed_ids: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class CountPage:
    """One page of a count-only query."""

    count: int
    last_evaluated_key: dict[str, Any] | None = None


@runtime_checkable
class SiteStore(Protocol):
    """Minimal store surface required by the favorites services."""

    async def get_favorites_attribute(self, user_id: str) -> Mapping[str, Any] | None:
        """Return the raw ``favoriteSites`` attribute value of ``user_id``."""

    async def batch_get_sites(self, site_ids: Sequence[str]) -> BatchReadResult:
        """Read up to one batch worth of site records."""

    async def count_bridges(
        self, site_id: str, *, start_key: Mapping[str, Any] | None = None
    ) -> CountPage:
        """Count bridge rows of ``site_id`` starting after ``start_key``."""

    async def get_site(self, site_id: str) -> dict[str, Any] | None:
        """Return a single site record or ``None`` when it does not exist."""

    async def add_favorite(self, user_id: str, site_id: str) -> None:
        """Add ``site_id`` to the user's favorites set."""

    async def remove_favorite(self, user_id: str, site_id: str) -> None:
        """Remove ``site_id`` from the user's favorites set."""


def deserialize_item(item: Mapping[str, Any]) -> dict[str, Any]:
    """Convert a wire-format DynamoDB item into plain Python values."""

    return {name: _deserializer.deserialize(value) for name, value in item.items()}


class DynamoSiteStore:
    """:class:`SiteStore` implementation backed by a boto3 DynamoDB client.

    boto3 is synchronous, so every call is pushed onto a worker thread with
    :func:`asyncio.to_thread`; from the caller's perspective each store call is
    a suspension point and several of them can be in flight at once.
    """

    def __init__(
        self,
        client: Any,
        *,
        users_table: str,
        sites_table: str,
        iotbridges_table: str,
    ) -> None:
        self._client = client
        self._users_table = users_table
        self._sites_table = sites_table
        self._iotbridges_table = iotbridges_table

    async def _call(self, operation: str, **params: Any) -> dict[str, Any]:
        method = getattr(self._client, operation)
        try:
            return await asyncio.to_thread(method, **params)
        except (ClientError, BotoCoreError) as exc:
            logger.error("DynamoDB %s failed: %s", operation, exc)
            raise StoreError(operation, str(exc)) from exc

    async def get_favorites_attribute(self, user_id: str) -> Mapping[str, Any] | None:
        response = await self._call(
            "get_item",
            TableName=self._users_table,
            Key={"userId": {"S": user_id}},
            ProjectionExpression=FAVORITES_ATTRIBUTE,
        )
        item = response.get("Item") or {}
        return item.get(FAVORITES_ATTRIBUTE)

    async def batch_get_sites(self, site_ids: Sequence[str]) -> BatchReadResult:
        if not site_ids:
            return BatchReadResult()

        response = await self._call(
            "batch_get_item",
            RequestItems={
                self._sites_table: {
                    "Keys": [{"siteId": {"S": site_id}} for site_id in site_ids]
                }
            },
        )
        raw_items = response.get("Responses", {}).get(self._sites_table, [])
        unprocessed = (
            response.get("UnprocessedKeys", {})
            .get(self._sites_table, {})
            .get("Keys", [])
        )
        return BatchReadResult(
            items=[deserialize_item(item) for item in raw_items],
            unprocessed_ids=[key["siteId"]["S"] for key in unprocessed],
        )

    async def count_bridges(
        self, site_id: str, *, start_key: Mapping[str, Any] | None = None
    ) -> CountPage:
        params: dict[str, Any] = {
            "TableName": self._iotbridges_table,
            "KeyConditionExpression": "siteId = :sid",
            "ExpressionAttributeValues": {":sid": {"S": site_id}},
            "Select": "COUNT",
        }
        if start_key:
            params["ExclusiveStartKey"] = dict(start_key)

        response = await self._call("query", **params)
        return CountPage(
            count=int(response.get("Count", 0)),
            last_evaluated_key=response.get("LastEvaluatedKey") or None,
        )

    async def get_site(self, site_id: str) -> dict[str, Any] | None:
        response = await self._call(
            "get_item",
            TableName=self._sites_table,
            Key={"siteId": {"S": site_id}},
        )
        item = response.get("Item")
        if not item:
            return None
        return deserialize_item(item)

    async def add_favorite(self, user_id: str, site_id: str) -> None:
        # ADD on a string set creates the attribute when missing and ignores
        # identifiers that are already present.
        await self._call(
            "update_item",
            TableName=self._users_table,
            Key={"userId": {"S": user_id}},
            UpdateExpression=f"ADD {FAVORITES_ATTRIBUTE} :sidset",
            ExpressionAttributeValues={":sidset": {"SS": [site_id]}},
        )

    async def remove_favorite(self, user_id: str, site_id: str) -> None:
        await self._call(
            "update_item",
            TableName=self._users_table,
            Key={"userId": {"S": user_id}},
            UpdateExpression=f"DELETE {FAVORITES_ATTRIBUTE} :sidset",
            ExpressionAttributeValues={":sidset": {"SS": [site_id]}},
        )


__all__ = [
    "BatchReadResult",
    "CountPage",
    "DynamoSiteStore",
    "FAVORITES_ATTRIBUTE",
    "SiteStore",
    "StoreError",
    "deserialize_item",
]
