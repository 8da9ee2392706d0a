"""Tests for resolving the caller from authorizer claims and headers."""

from __future__ import annotations

import pytest

from sitemanager.services.caller import Caller, resolve_caller


def _jwt_event(claims: dict[str, object]) -> dict[str, object]:
    return {"requestContext": {"authorizer": {"jwt": {"claims": claims}}}}


def test_http_api_jwt_claims_identify_the_caller() -> None:
    event = _jwt_event({"sub": "abc", "cognito:groups": "[Operators SuperAdmin]"})

    caller = resolve_caller(event=event, headers={}, super_user_group="SuperAdmin")

    assert caller == Caller(user_id="abc", is_super=True)


def test_rest_api_claims_are_supported() -> None:
    event = {"requestContext": {"authorizer": {"claims": {"sub": "abc"}}}}

    caller = resolve_caller(event=event, headers={}, super_user_group="SuperAdmin")

    assert caller == Caller(user_id="abc", is_super=False)


def test_claims_take_precedence_over_headers() -> None:
    event = _jwt_event({"sub": "from-token", "cognito:groups": ["Viewers"]})
    headers = {"x-user-id": "from-header", "x-user-groups": "SuperAdmin"}

    caller = resolve_caller(event=event, headers=headers, super_user_group="SuperAdmin")

    assert caller == Caller(user_id="from-token", is_super=False)


@pytest.mark.parametrize(
    ("groups", "expected"),
    [("SuperAdmin", True), ("Ops, SuperAdmin", True), ("Ops", False), (None, False)],
)
def test_header_identity_for_local_runs(groups: str | None, expected: bool) -> None:
    headers = {"x-user-id": "local-user"}
    if groups is not None:
        headers["x-user-groups"] = groups

    caller = resolve_caller(event=None, headers=headers, super_user_group="SuperAdmin")

    assert caller == Caller(user_id="local-user", is_super=expected)


def test_super_group_name_is_configurable() -> None:
    headers = {"x-user-id": "u1", "x-user-groups": "Root"}

    caller = resolve_caller(event=None, headers=headers, super_user_group="Root")

    assert caller is not None and caller.is_super


@pytest.mark.parametrize("event", [None, {}, {"requestContext": {}}, "garbage"])
def test_no_identity_resolves_to_none(event) -> None:
    assert resolve_caller(event=event, headers={}, super_user_group="SuperAdmin") is None
