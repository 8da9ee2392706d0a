"""Error response schemas for consistent error handling."""

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ErrorType(str, Enum):
    """Types of errors that can occur."""

    VALIDATION_ERROR = "validation_error"
    NOT_FOUND = "not_found"
    STORE_ERROR = "store_error"
    INTERNAL_ERROR = "internal_error"
    AUTHENTICATION_ERROR = "authentication_error"
    AUTHORIZATION_ERROR = "authorization_error"
    HTTP_ERROR = "http_error"


class ErrorResponse(BaseModel):
    """Standardized error response model.

    ``error`` carries the human-readable message; the remaining fields are
    diagnostic metadata for operators correlating failures with logs.
    """

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "error": "Failed to load favorites",
                "error_type": "store_error",
                "detail": "The site store rejected the request. Please try again.",
                "status_code": 500,
                "timestamp": "2025-11-03T10:30:00Z",
                "request_id": "0b6f1f7e-3c39-4a51-a8d8-8a2f0f9b5b61",
                "path": "/v1/sites/favorites",
                "retry_after": 3,
            }
        }
    )

    error: str = Field(..., description="Human-readable error message")
    error_type: ErrorType = Field(..., description="Category of error")
    detail: str | None = Field(None, description="Additional error details or context")
    status_code: int = Field(..., description="HTTP status code")
    timestamp: datetime = Field(..., description="When error occurred")
    request_id: str | None = Field(None, description="Unique request identifier for tracking")
    path: str | None = Field(None, description="Request path that caused the error")
    retry_after: int | None = Field(
        None, description="Seconds to wait before retrying (for transient failures)"
    )


class ValidationErrorDetail(BaseModel):
    """Details for validation errors."""

    field: str = Field(..., description="Field that failed validation")
    message: str = Field(..., description="Validation error message")
    value: Any = Field(None, description="Value that failed validation")


class ValidationErrorResponse(ErrorResponse):
    """Extended error response for validation errors."""

    error_type: ErrorType = Field(default=ErrorType.VALIDATION_ERROR)
    errors: list[ValidationErrorDetail] = Field(
        default_factory=list, description="List of validation errors"
    )
