"""Search, ordering and page slicing for favorites listings."""

from __future__ import annotations

import math
import unicodedata
from collections.abc import Sequence
from dataclasses import dataclass

from sitemanager.schemas.favorites import FavoritesMeta, SiteView

DEFAULT_PAGE = 1
DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 200


@dataclass(frozen=True)
class PageRequest:
    """Clamped page coordinates requested by the caller."""

    page: int = DEFAULT_PAGE
    page_size: int = DEFAULT_PAGE_SIZE


def _parse_int(raw: str | int | None, default: int) -> int:
    if raw is None:
        return default
    if isinstance(raw, int):
        return raw
    try:
        return int(raw.strip())
    except ValueError:
        return default


def parse_page_request(
    page: str | int | None = None, page_size: str | int | None = None
) -> PageRequest:
    """Clamp raw query values into a valid :class:`PageRequest`.

    Values that are not integers fall back to the defaults rather than being
    rejected; the page floor is 1 and the page size is kept within 1..200.
    """

    resolved_page = max(DEFAULT_PAGE, _parse_int(page, DEFAULT_PAGE))
    resolved_size = min(
        MAX_PAGE_SIZE, max(1, _parse_int(page_size, DEFAULT_PAGE_SIZE))
    )
    return PageRequest(page=resolved_page, page_size=resolved_size)


def normalize_search_term(term: str | None) -> str:
    """Trim and case-fold a search term; ``None`` becomes the empty string."""

    return (term or "").strip().casefold()


def collation_key(value: str | None) -> str:
    """Return a case- and accent-insensitive sort key for ``value``.

    Decomposing to NFKD and dropping combining marks makes ``"Élan"`` and
    ``"elan"`` compare equal, the way an end user's alphabetical ordering
    treats them.
    """

    decomposed = unicodedata.normalize("NFKD", value or "")
    stripped = "".join(char for char in decomposed if not unicodedata.combining(char))
    return stripped.casefold()


def filter_by_search(views: Sequence[SiteView], term: str | None) -> list[SiteView]:
    """Keep views whose site name contains ``term`` (case-insensitive)."""

    needle = normalize_search_term(term)
    if not needle:
        return list(views)
    return [view for view in views if needle in (view.site_name or "").casefold()]


def sort_by_name(views: Sequence[SiteView]) -> list[SiteView]:
    """Order views alphabetically by site name; ties keep their input order."""

    return sorted(views, key=lambda view: collation_key(view.site_name))


def paginate(
    views: Sequence[SiteView], request: PageRequest
) -> tuple[list[SiteView], FavoritesMeta]:
    """Slice ``views`` to the requested page and describe the pagination.

    A page past the end is clamped to the last page.
    """

    total = len(views)
    total_pages = max(1, math.ceil(total / request.page_size))
    page = min(request.page, total_pages)
    start = (page - 1) * request.page_size
    items = list(views[start : start + request.page_size])
    meta = FavoritesMeta(
        total=total,
        page=page,
        page_size=request.page_size,
        total_pages=total_pages,
        has_next_page=page < total_pages,
        has_prev_page=page > 1,
    )
    return items, meta


def empty_meta(page_size: int) -> FavoritesMeta:
    """Metadata of the page returned when the caller has no favorites."""

    return FavoritesMeta(
        total=0,
        page=1,
        page_size=page_size,
        total_pages=1,
        has_next_page=False,
        has_prev_page=False,
    )


__all__ = [
    "DEFAULT_PAGE",
    "DEFAULT_PAGE_SIZE",
    "MAX_PAGE_SIZE",
    "PageRequest",
    "collation_key",
    "empty_meta",
    "filter_by_search",
    "normalize_search_term",
    "paginate",
    "parse_page_request",
    "sort_by_name",
]
