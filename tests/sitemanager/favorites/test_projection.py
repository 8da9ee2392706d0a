"""Tests for soft-delete, membership filtering and view projection."""

from __future__ import annotations

from decimal import Decimal

import pytest

from sitemanager.services.favorites.projection import (
    SUPER_ROLE,
    authorize_and_project,
    is_soft_deleted,
    resolve_membership,
)
from tests.sitemanager.support.fake_store import make_site

DEVICE_KEYS = {
    "c4Count",
    "smartReceiverCount",
    "lightsCount",
    "healthScore",
    "powerConsumption",
    "alertsCount",
    "warningsCount",
    "deviceDataLastUpdatedAt",
}


@pytest.mark.parametrize(
    ("flag", "expected"),
    [
        (True, True),
        ("true", True),
        ("TRUE", False),
        (" true", False),
        (False, False),
        ("false", False),
        (None, False),
        (1, False),
    ],
)
def test_soft_delete_flag(flag, expected: bool) -> None:
    record = make_site("s1", "Site")
    if flag is not None:
        record["isDeleted"] = flag

    assert is_soft_deleted(record) is expected


def test_member_receives_their_role_and_assignment() -> None:
    record = make_site("s1", "Site", members=[("u1", "Operator", "2024-05-01T00:00:00Z")])

    membership = resolve_membership(record, user_id="u1", is_super=False)

    assert membership is not None
    assert membership.role == "Operator"
    assert membership.assigned_at == "2024-05-01T00:00:00Z"


def test_super_user_gets_synthetic_role_even_when_listed() -> None:
    record = make_site("s1", "Site", members=[("root", "Viewer", "2024-05-01T00:00:00Z")])

    membership = resolve_membership(record, user_id="root", is_super=True)

    assert membership is not None
    assert membership.role == SUPER_ROLE == "SuperAdmin"
    assert membership.assigned_at is None


def test_non_member_is_rejected_and_malformed_members_are_skipped() -> None:
    record = make_site("s1", "Site")
    record["members"] = ["u1", {"role": "Admin"}, None]

    assert resolve_membership(record, user_id="u1", is_super=False) is None


def test_authorize_and_project_drops_deleted_and_foreign_records() -> None:
    records = [
        make_site("keep", "Keep", members=[("u1", "Admin", "t1")]),
        make_site("gone", "Gone", members=[("u1", "Admin", "t1")], deleted="true"),
        make_site("other", "Other", members=[("u2", "Admin", "t1")]),
    ]

    views = authorize_and_project(records, user_id="u1", is_super=False)

    assert [view.site_id for view in views] == ["keep"]


def test_super_user_sees_every_live_record() -> None:
    records = [
        make_site("a", "A", members=[("u2", "Admin", "t1")]),
        make_site("b", "B"),
        make_site("c", "C", deleted=True),
    ]

    views = authorize_and_project(records, user_id="root", is_super=True)

    assert [view.site_id for view in views] == ["a", "b"]
    assert {view.role for view in views} == {"SuperAdmin"}


def test_projection_copies_site_fields_and_custom_fields() -> None:
    record = make_site(
        "s1",
        "Plant",
        members=[("u1", "Admin", "t1")],
        customFields={"region": "north", "floors": 3},
    )

    [view] = authorize_and_project([record], user_id="u1", is_super=False)
    payload = view.model_dump(by_alias=True, exclude_unset=True)

    assert payload["siteName"] == "Plant"
    assert payload["clientName"] == "Plant Client"
    assert payload["postalCode"] == "11122"
    assert payload["customFields"] == [
        {"key": "region", "value": "north"},
        {"key": "floors", "value": None},
    ]
    assert DEVICE_KEYS.isdisjoint(payload)


def test_device_fields_default_when_requested() -> None:
    record = make_site("s1", "Plant", members=[("u1", "Admin", "t1")])

    [view] = authorize_and_project(
        [record], user_id="u1", is_super=False, include_devices=True
    )
    payload = view.model_dump(by_alias=True, exclude_unset=True)

    assert DEVICE_KEYS <= set(payload)
    assert payload["c4Count"] == 0
    assert payload["healthScore"] == 0.0
    assert payload["deviceDataLastUpdatedAt"] is None


def test_device_fields_are_coerced_from_stored_numbers() -> None:
    record = make_site(
        "s1",
        "Plant",
        members=[("u1", "Admin", "t1")],
        c4Count=Decimal("4"),
        lightsCount="12",
        healthScore=Decimal("87.5"),
        powerConsumption="not-a-number",
        alertsCount=Decimal("NaN"),
        deviceDataLastUpdatedAt="2024-06-01T12:00:00Z",
    )

    [view] = authorize_and_project(
        [record], user_id="u1", is_super=False, include_devices=True
    )

    assert view.c4_count == 4
    assert view.lights_count == 12
    assert view.health_score == 87.5
    assert view.power_consumption == 0.0
    assert view.alerts_count == 0
    assert view.device_data_last_updated_at == "2024-06-01T12:00:00Z"


def test_fractional_counters_are_not_truncated() -> None:
    record = make_site(
        "s1",
        "Plant",
        members=[("u1", "Admin", "t1")],
        c4Count=Decimal("2.5"),
        warningsCount=Decimal("3.0"),
    )

    [view] = authorize_and_project(
        [record], user_id="u1", is_super=False, include_devices=True
    )
    payload = view.model_dump(mode="json", by_alias=True)

    assert payload["c4Count"] == 2.5
    assert payload["warningsCount"] == 3
    assert isinstance(payload["warningsCount"], int)
