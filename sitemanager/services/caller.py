"""Caller identity as resolved upstream of the API.

Tokens are verified by the API Gateway authorizer before the Lambda runs; the
verified claims reach the app through the Lambda event Mangum places in the
ASGI scope. Local runs without API Gateway pass the same information through
``X-User-Id`` / ``X-User-Groups`` headers.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any

USER_ID_HEADER = "x-user-id"
USER_GROUPS_HEADER = "x-user-groups"
GROUPS_CLAIM = "cognito:groups"


@dataclass(frozen=True)
class Caller:
    """The requesting user and whether they bypass membership checks."""

    user_id: str
    is_super: bool = False


def _split_groups(raw: Any) -> list[str]:
    if raw is None:
        return []
    if isinstance(raw, str):
        # HTTP API authorizers flatten list claims into "[a b]" or "a,b".
        cleaned = raw.strip().strip("[]")
        return [part for part in cleaned.replace(",", " ").split() if part]
    if isinstance(raw, Iterable):
        return [str(part) for part in raw]
    return []


def _authorizer_claims(event: Mapping[str, Any] | None) -> Mapping[str, Any]:
    if not isinstance(event, Mapping):
        return {}
    authorizer = (event.get("requestContext") or {}).get("authorizer") or {}
    jwt = authorizer.get("jwt") or {}
    claims = jwt.get("claims") or authorizer.get("claims") or {}
    return claims if isinstance(claims, Mapping) else {}


def resolve_caller(
    *,
    event: Mapping[str, Any] | None,
    headers: Mapping[str, str],
    super_user_group: str,
) -> Caller | None:
    """Return the caller described by authorizer claims or headers.

    Authorizer claims take precedence over headers. ``None`` means no identity
    was supplied at all.
    """

    claims = _authorizer_claims(event)
    user_id = claims.get("sub") or headers.get(USER_ID_HEADER)
    if not user_id:
        return None

    if claims.get("sub"):
        groups = _split_groups(claims.get(GROUPS_CLAIM))
    else:
        groups = _split_groups(headers.get(USER_GROUPS_HEADER))

    return Caller(user_id=str(user_id), is_super=super_user_group in groups)


__all__ = ["Caller", "resolve_caller"]
