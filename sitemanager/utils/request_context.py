"""Utilities for working with request-scoped context metadata.

Every inbound HTTP call (or Lambda invocation routed through Mangum) receives a
request identifier. Error payloads and log lines read it back through these
helpers instead of threading it through every function signature.
"""

from __future__ import annotations

from contextvars import ContextVar, Token

__all__ = [
    "REQUEST_ID_CONTEXT",
    "clear_request_id",
    "get_request_id",
    "set_request_id",
]

# Each request handler runs in its own task, so the ContextVar isolates the
# identifier per request without global mutable state.
REQUEST_ID_CONTEXT: ContextVar[str] = ContextVar("request_id", default="")


def set_request_id(request_id: str) -> Token[str]:
    """Persist the provided request identifier in the context variable.

    The returned token lets tests ``reset`` the context once their assertions
    finish; the middleware ignores it.
    """

    return REQUEST_ID_CONTEXT.set(request_id)


def get_request_id() -> str:
    """Retrieve the current request identifier (empty string when unset)."""

    return REQUEST_ID_CONTEXT.get()


def clear_request_id(token: Token[str] | None = None) -> None:
    """Reset the request identifier, via ``token`` when one is supplied."""

    if token is not None:
        REQUEST_ID_CONTEXT.reset(token)
    else:
        REQUEST_ID_CONTEXT.set("")
