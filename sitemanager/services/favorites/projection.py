"""Authorization filtering and projection of site records into views."""

from __future__ import annotations

import math
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from decimal import Decimal
from typing import Any

from sitemanager.schemas.favorites import CustomField, SiteView

SUPER_ROLE = "SuperAdmin"

_SITE_FIELDS: tuple[tuple[str, str], ...] = (
    ("site_name", "siteName"),
    ("client_name", "clientName"),
    ("address", "address"),
    ("country", "country"),
    ("city", "city"),
    ("state", "state"),
    ("postal_code", "postalCode"),
    ("created_by", "createdBy"),
    ("created_at", "createdAt"),
)

_DEVICE_COUNTERS: tuple[tuple[str, str], ...] = (
    ("c4_count", "c4Count"),
    ("smart_receiver_count", "smartReceiverCount"),
    ("lights_count", "lightsCount"),
    ("alerts_count", "alertsCount"),
    ("warnings_count", "warningsCount"),
)

_DEVICE_MEASURES: tuple[tuple[str, str], ...] = (
    ("health_score", "healthScore"),
    ("power_consumption", "powerConsumption"),
)


@dataclass(frozen=True)
class Membership:
    """The requester's standing on one site."""

    role: str | None
    assigned_at: str | None


def is_soft_deleted(record: Mapping[str, Any]) -> bool:
    """Return ``True`` when the record carries the soft-delete flag."""

    flag = record.get("isDeleted")
    if isinstance(flag, str):
        return flag == "true"
    return flag is True


def resolve_membership(
    record: Mapping[str, Any], *, user_id: str, is_super: bool
) -> Membership | None:
    """Return the requester's membership on ``record`` or ``None``.

    Super users always receive the synthetic super role, whether or not they
    also appear in the member list.
    """

    if is_super:
        return Membership(role=SUPER_ROLE, assigned_at=None)

    for member in record.get("members") or ():
        if isinstance(member, Mapping) and member.get("userId") == user_id:
            return Membership(
                role=_as_text(member.get("role")),
                assigned_at=_as_text(member.get("assignedAt")),
            )
    return None


def _as_text(value: Any) -> str | None:
    if value is None:
        return None
    return value if isinstance(value, str) else str(value)


def _as_count(value: Any) -> int | float:
    if value is None or isinstance(value, bool):
        return 0
    try:
        number = Decimal(str(value))
    except (ArithmeticError, ValueError):
        return 0
    if not number.is_finite():
        return 0
    # Fractional counters are passed through rather than truncated.
    if number == number.to_integral_value():
        return int(number)
    return float(number)


def _as_float(value: Any) -> float:
    if value is None or isinstance(value, bool):
        return 0.0
    try:
        number = float(Decimal(str(value)))
    except (ArithmeticError, ValueError):
        return 0.0
    return number if math.isfinite(number) else 0.0


def _custom_fields(record: Mapping[str, Any]) -> list[CustomField]:
    fields = record.get("customFields")
    if not isinstance(fields, Mapping):
        return []
    return [
        CustomField(key=str(key), value=value if isinstance(value, str) else None)
        for key, value in fields.items()
    ]


def project_site(
    record: Mapping[str, Any],
    membership: Membership,
    *,
    include_devices: bool = False,
) -> SiteView:
    """Build the requester-facing view of ``record``."""

    values: dict[str, Any] = {
        "site_id": _as_text(record.get("siteId")) or "",
        "role": membership.role,
        "assigned_at": membership.assigned_at,
        "custom_fields": _custom_fields(record),
    }
    for field_name, attribute in _SITE_FIELDS:
        values[field_name] = _as_text(record.get(attribute))

    if include_devices:
        for field_name, attribute in _DEVICE_COUNTERS:
            values[field_name] = _as_count(record.get(attribute))
        for field_name, attribute in _DEVICE_MEASURES:
            values[field_name] = _as_float(record.get(attribute))
        values["device_data_last_updated_at"] = (
            _as_text(record.get("deviceDataLastUpdatedAt")) or None
        )

    return SiteView(**values)


def authorize_and_project(
    records: Iterable[Mapping[str, Any]],
    *,
    user_id: str,
    is_super: bool,
    include_devices: bool = False,
) -> list[SiteView]:
    """Drop soft-deleted and inaccessible records, projecting the rest.

    Output order follows ``records``; ordering is applied later by the paging
    stage.
    """

    views: list[SiteView] = []
    for record in records:
        if is_soft_deleted(record):
            continue
        membership = resolve_membership(record, user_id=user_id, is_super=is_super)
        if membership is None:
            continue
        views.append(project_site(record, membership, include_devices=include_devices))
    return views


__all__ = [
    "Membership",
    "SUPER_ROLE",
    "authorize_and_project",
    "is_soft_deleted",
    "project_site",
    "resolve_membership",
]
