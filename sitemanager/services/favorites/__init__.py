"""Favorites pipeline components split by responsibility.

The listing flow runs decode -> fetch -> authorize/project -> search/sort/page
-> enrich. Each stage lives in its own module so it can be tested in isolation
and swapped without touching the orchestrating service.
"""

from .codec import decode_favorite_ids
from .enrichment import BridgeCountEnricher
from .fetcher import BulkSiteFetcher
from .paging import PageRequest, parse_page_request
from .projection import authorize_and_project, is_soft_deleted, resolve_membership

__all__ = [
    "BridgeCountEnricher",
    "BulkSiteFetcher",
    "PageRequest",
    "authorize_and_project",
    "decode_favorite_ids",
    "is_soft_deleted",
    "parse_page_request",
    "resolve_membership",
]
