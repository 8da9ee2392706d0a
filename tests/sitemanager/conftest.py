"""Shared fixtures for favorites service, pipeline and API tests."""

from __future__ import annotations

from typing import Any

import pytest

from sitemanager.services.caller import Caller
from tests.sitemanager.support.fake_store import FakeSiteStore, make_site

MEMBER_ID = "user-1"
OUTSIDER_ID = "user-2"


@pytest.fixture
def member() -> Caller:
    return Caller(user_id=MEMBER_ID)


@pytest.fixture
def super_user() -> Caller:
    return Caller(user_id="root-1", is_super=True)


@pytest.fixture
def sites() -> list[dict[str, Any]]:
    """Four sites: two visible to ``user-1``, one soft-deleted, one foreign."""

    return [
        make_site(
            "site-lake",
            "Lakeside Plant",
            members=[(MEMBER_ID, "Admin", "2024-02-01T10:00:00Z")],
            customFields={"region": "north"},
        ),
        make_site(
            "site-alpha",
            "alpha",
            members=[(MEMBER_ID, "Viewer", "2024-03-01T10:00:00Z")],
        ),
        make_site(
            "site-gone",
            "Gone Depot",
            members=[(MEMBER_ID, "Admin", "2024-01-05T10:00:00Z")],
            deleted=True,
        ),
        make_site(
            "site-foreign",
            "Foreign Works",
            members=[(OUTSIDER_ID, "Admin", "2024-01-05T10:00:00Z")],
        ),
    ]


@pytest.fixture
def store(sites: list[dict[str, Any]]) -> FakeSiteStore:
    return FakeSiteStore(
        sites=sites,
        favorites={
            MEMBER_ID: {"SS": [site["siteId"] for site in sites]},
            "root-1": {"SS": [site["siteId"] for site in sites]},
        },
        bridge_pages={"site-lake": [7, 3, 0], "site-alpha": [2]},
    )
