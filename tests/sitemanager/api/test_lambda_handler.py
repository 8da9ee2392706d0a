"""Tests for the Lambda entry point and the caller it exposes to routes."""

from __future__ import annotations

from typing import Any

import pytest
from fastapi import HTTPException, Request
from mangum import Mangum
from starlette.datastructures import Headers

from sitemanager.services.caller import Caller
from sitemanager.services.dependencies import get_caller
from sitemanager.settings import AppSettings


def _lambda_request(
    event: dict[str, Any] | None, headers: dict[str, str] | None = None
) -> Request:
    """Build a request shaped like the ASGI scope Mangum hands to the app."""

    scope: dict[str, Any] = {
        "type": "http",
        "method": "GET",
        "path": "/v1/sites/favorites",
        "headers": Headers(headers or {}).raw,
    }
    if event is not None:
        scope["aws.event"] = event
    return Request(scope)


def _http_api_event(claims: dict[str, Any]) -> dict[str, Any]:
    return {
        "version": "2.0",
        "routeKey": "$default",
        "rawPath": "/v1/sites/favorites",
        "rawQueryString": "",
        "headers": {"host": "api.example.com"},
        "requestContext": {
            "http": {"method": "GET", "path": "/v1/sites/favorites"},
            "authorizer": {"jwt": {"claims": claims, "scopes": None}},
        },
        "isBase64Encoded": False,
    }


def test_handler_wraps_the_app_with_mangum() -> None:
    from sitemanager.handler import handler

    assert isinstance(handler, Mangum)


def test_authorizer_claims_in_the_lambda_event_identify_the_caller() -> None:
    request = _lambda_request(
        _http_api_event({"sub": "user-1", "cognito:groups": "[SuperAdmin]"})
    )

    caller = get_caller(request, AppSettings(_env_file=None))

    assert caller == Caller(user_id="user-1", is_super=True)


def test_super_user_group_comes_from_settings() -> None:
    request = _lambda_request(
        _http_api_event({"sub": "user-1", "cognito:groups": "[SuperAdmin]"})
    )

    caller = get_caller(
        request, AppSettings(_env_file=None, super_user_group="PlatformOwners")
    )

    assert caller == Caller(user_id="user-1", is_super=False)


def test_headers_are_used_outside_lambda() -> None:
    request = _lambda_request(None, {"X-User-Id": "local", "X-User-Groups": "SuperAdmin"})

    assert get_caller(request, AppSettings(_env_file=None)) == Caller(
        user_id="local", is_super=True
    )


def test_missing_identity_raises_unauthorized() -> None:
    with pytest.raises(HTTPException) as excinfo:
        get_caller(_lambda_request(None), AppSettings(_env_file=None))

    assert excinfo.value.status_code == 401
