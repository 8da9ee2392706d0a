import logging
import time
import uuid
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from sitemanager.db.connection import get_client
from sitemanager.db.store import StoreError
from sitemanager.settings import AppSettings, get_settings

from .api import favorites
from .schemas.error import ErrorType, ValidationErrorDetail
from .utils.error_responses import (
    build_error_response,
    build_validation_error_response,
    error_type_for_status,
    render_error,
)
from .utils.request_context import get_request_id, set_request_id

settings = get_settings()

# Configure logging
logging.basicConfig(
    level=settings.log_level_numeric,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


def _validate_environment(active_settings: AppSettings | None = None) -> None:
    """Log warnings for optional configuration left at its defaults."""
    warnings = (active_settings or get_settings()).optional_config_warnings()

    if warnings:
        logger.warning("=" * 60)
        logger.warning("Environment Configuration Warnings:")
        for warning in warnings:
            logger.warning("  • %s", warning)
        logger.warning("=" * 60)


def validate_environment() -> None:
    """Public wrapper ensuring CLI tools can trigger configuration validation."""

    _validate_environment()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for startup and shutdown events."""
    validate_environment()

    current = get_settings()
    logger.info("=" * 60)
    logger.info("Site Manager API - Store Preflight Check")
    logger.info("=" * 60)
    logger.info("Region: %s", current.aws_region)
    logger.info("Endpoint: %s", current.dynamodb_endpoint_url or "AWS default")
    logger.info(
        "Tables: users=%s sites=%s bridges=%s",
        current.users_table,
        current.sites_table,
        current.iotbridges_table,
    )

    # Build the shared client before the first request pays for it.
    start = time.time()
    get_client()
    logger.info("✓ DynamoDB client ready (%.0fms)", (time.time() - start) * 1000)
    logger.info("=" * 60)

    yield

    logger.info("Shutting down Site Manager API")


app = FastAPI(
    title="Site Manager API",
    version="0.1.0",
    description="Favorites, membership-aware site listings and bridge counts.",
    lifespan=lifespan,
    redirect_slashes=False,
)


def _default_origins() -> list[str]:
    ports = list(range(3000, 3011)) + [5173]
    origins = []
    for host in ("localhost", "127.0.0.1"):
        origins.extend([f"http://{host}:{port}" for port in ports])
    return origins


def _combine_origins(*origin_groups: list[str]) -> list[str]:
    """Merge origins preserving order and removing duplicates."""
    seen: set[str] = set()
    combined: list[str] = []
    for group in origin_groups:
        for origin in group:
            normalized = origin.rstrip("/")
            if normalized and normalized not in seen:
                seen.add(normalized)
                combined.append(normalized)
    return combined


allow_origins = _combine_origins(_default_origins(), settings.cors_allow_origins)
logger.info("Configured CORS allow_origins: %s", ", ".join(allow_origins))

app.add_middleware(
    CORSMiddleware,
    allow_origins=allow_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Middleware to add request ID to each request
@app.middleware("http")
async def add_request_id(request: Request, call_next):
    """Add unique request ID to each request for tracking."""
    request_id = str(uuid.uuid4())
    set_request_id(request_id)
    response = await call_next(request)
    response.headers["X-Request-ID"] = request_id
    return response


# Exception handlers
@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Handle FastAPI request validation errors."""
    errors = [
        ValidationErrorDetail(
            field=".".join(str(loc) for loc in error["loc"]),
            message=error["msg"],
            value=error.get("input"),
        )
        for error in exc.errors()
    ]

    logger.warning(
        "Validation error for request %s to %s: %s errors",
        get_request_id(),
        request.url.path,
        len(errors),
    )

    error_response = build_validation_error_response(
        message="Request validation failed",
        detail=f"{len(errors)} validation error(s)",
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        path=str(request.url.path),
        errors=errors,
    )
    return render_error(error_response)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Render routed HTTP errors (401/403/404...) with the shared error shape."""
    if exc.status_code >= 500:
        logger.error(
            "HTTP %s for request %s to %s: %s",
            exc.status_code,
            get_request_id(),
            request.url.path,
            exc.detail,
        )
    else:
        logger.info(
            "HTTP %s for request %s to %s: %s",
            exc.status_code,
            get_request_id(),
            request.url.path,
            exc.detail,
        )

    error_response = build_error_response(
        error_type=error_type_for_status(exc.status_code),
        message=str(exc.detail),
        status_code=exc.status_code,
        path=str(request.url.path),
    )
    response = render_error(error_response)
    if exc.headers:
        response.headers.update(exc.headers)
    return response


@app.exception_handler(StoreError)
async def store_exception_handler(request: Request, exc: StoreError):
    """Fail the whole request when a store call errors; never serve partial pages."""
    logger.error(
        "Store error for request %s to %s during %s: %s",
        get_request_id(),
        request.url.path,
        exc.operation,
        str(exc),
    )

    error_response = build_error_response(
        error_type=ErrorType.STORE_ERROR,
        message="Failed to load favorites",
        detail="The site store rejected the request. Please try again.",
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        path=str(request.url.path),
        retry_after=3,
    )
    return render_error(error_response)


@app.exception_handler(Exception)
async def generic_exception_handler(request: Request, exc: Exception):
    """Handle all other unhandled exceptions."""
    logger.exception(
        "Unhandled exception for request %s to %s: %s",
        get_request_id(),
        request.url.path,
        type(exc).__name__,
    )

    error_response = build_error_response(
        error_type=ErrorType.INTERNAL_ERROR,
        message="Internal server error",
        detail=f"An unexpected error occurred: {type(exc).__name__}",
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        path=str(request.url.path),
        retry_after=5,
    )
    return render_error(error_response)


@app.get("/health", tags=["system"])
async def healthcheck() -> dict[str, str]:
    """Simple health endpoint for readiness checks."""
    return {"status": "ok"}


app.include_router(favorites.router, prefix="/v1/sites", tags=["favorites"])
