"""Pydantic schemas that power the favorites API surface.

The frontend consumes camelCase keys, so every model serializes by alias while
still accepting snake_case names from Python callers.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class CustomField(_CamelModel):
    """Single key/value pair from a site's free-form custom fields."""

    key: str
    value: str | None = None


class SiteView(_CamelModel):
    """A site as seen by one requester.

    Device metrics are only *set* when the caller asked for them, and the list
    route serializes with ``exclude_unset`` so they are omitted otherwise.
    ``iot_bridge_count`` is attached by the count enricher once the page is
    final.
    """

    site_id: str
    site_name: str | None = None
    client_name: str | None = None
    address: str | None = None
    country: str | None = None
    city: str | None = None
    state: str | None = None
    postal_code: str | None = None
    created_by: str | None = None
    created_at: str | None = None
    role: str | None = Field(
        None, description="Requester's role on the site, or the synthetic super role."
    )
    assigned_at: str | None = Field(
        None, description="When the requester was added; null for super users."
    )
    custom_fields: list[CustomField] = Field(default_factory=list)

    c4_count: int | float | None = None
    smart_receiver_count: int | float | None = None
    lights_count: int | float | None = None
    health_score: float | None = None
    power_consumption: float | None = None
    alerts_count: int | float | None = None
    warnings_count: int | float | None = None
    device_data_last_updated_at: str | None = None

    iot_bridge_count: int | None = Field(
        None, description="Number of IoT bridges registered under the site."
    )


class FavoritesMeta(_CamelModel):
    """Pagination metadata returned alongside a favorites page."""

    total: int = Field(..., ge=0, description="Matches before page slicing.")
    page: int = Field(..., ge=1)
    page_size: int = Field(..., ge=1)
    total_pages: int = Field(..., ge=1)
    has_next_page: bool
    has_prev_page: bool


class FavoritesPage(_CamelModel):
    """Container returned by the favorites listing endpoint."""

    items: list[SiteView] = Field(default_factory=list)
    meta: FavoritesMeta


class FavoriteMutationResponse(_CamelModel):
    """Acknowledgement returned when a favorite is added or removed."""

    message: str
    site_id: str
