"""Helper functions for constructing structured API error responses.

Every exception handler and router goes through these builders so that error
payloads share one shape: the ``error`` message plus request id, path and a
timezone-aware timestamp.
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import UTC, datetime

from fastapi import status
from fastapi.responses import JSONResponse

from sitemanager.schemas.error import (
    ErrorResponse,
    ErrorType,
    ValidationErrorDetail,
    ValidationErrorResponse,
)
from sitemanager.utils.request_context import get_request_id

__all__ = [
    "build_error_response",
    "build_validation_error_response",
    "error_type_for_status",
    "render_error",
]

_STATUS_ERROR_TYPES: dict[int, ErrorType] = {
    status.HTTP_401_UNAUTHORIZED: ErrorType.AUTHENTICATION_ERROR,
    status.HTTP_403_FORBIDDEN: ErrorType.AUTHORIZATION_ERROR,
    status.HTTP_404_NOT_FOUND: ErrorType.NOT_FOUND,
    status.HTTP_422_UNPROCESSABLE_ENTITY: ErrorType.VALIDATION_ERROR,
}


def _current_timestamp() -> datetime:
    """Return a timezone-aware timestamp; tests monkeypatch this clock."""

    return datetime.now(UTC)


def error_type_for_status(status_code: int) -> ErrorType:
    """Map an HTTP status code onto the closest :class:`ErrorType`."""

    if status_code in _STATUS_ERROR_TYPES:
        return _STATUS_ERROR_TYPES[status_code]
    if status_code >= 500:
        return ErrorType.INTERNAL_ERROR
    return ErrorType.HTTP_ERROR


def build_validation_error_response(
    *,
    errors: Sequence[ValidationErrorDetail],
    message: str,
    detail: str,
    status_code: int,
    path: str,
    error_type: ErrorType = ErrorType.VALIDATION_ERROR,
    request_id: str | None = None,
) -> ValidationErrorResponse:
    """Construct a ``ValidationErrorResponse`` enriched with metadata.

    ``errors`` is copied into a list so a generator cannot be consumed twice.
    """

    resolved_request_id = request_id or get_request_id()
    return ValidationErrorResponse(
        error=message,
        error_type=error_type,
        detail=detail,
        status_code=status_code,
        timestamp=_current_timestamp(),
        request_id=resolved_request_id,
        path=path,
        errors=list(errors),
    )


def build_error_response(
    *,
    error_type: ErrorType,
    message: str,
    status_code: int,
    path: str,
    detail: str | None = None,
    retry_after: int | None = None,
    request_id: str | None = None,
) -> ErrorResponse:
    """Construct a generic ``ErrorResponse`` enriched with metadata."""

    resolved_request_id = request_id or get_request_id()
    return ErrorResponse(
        error=message,
        error_type=error_type,
        detail=detail,
        status_code=status_code,
        timestamp=_current_timestamp(),
        request_id=resolved_request_id,
        path=path,
        retry_after=retry_after,
    )


def render_error(response: ErrorResponse) -> JSONResponse:
    """Serialize ``response`` into a ``JSONResponse`` with its status code."""

    return JSONResponse(
        status_code=response.status_code,
        content=response.model_dump(mode="json"),
    )
