"""
Request-scoped correlation IDs.

The ID travels in the X-Correlation-ID header and is bound to a ContextVar so
that log entries written anywhere during a request carry it.
"""

import uuid
from contextvars import ContextVar
from typing import Mapping, Optional

CORRELATION_ID_HEADER = "X-Correlation-ID"

_correlation_id: ContextVar[Optional[str]] = ContextVar("correlation_id", default=None)


def create_correlation_id() -> str:
    return str(uuid.uuid4())


def set_correlation_id(correlation_id: str) -> None:
    _correlation_id.set(correlation_id)


def get_correlation_id() -> str:
    """Return the bound correlation ID, binding a fresh one outside a request."""
    correlation_id = _correlation_id.get()
    if not correlation_id:
        correlation_id = create_correlation_id()
        _correlation_id.set(correlation_id)
    return correlation_id


def extract_correlation_id_from_headers(headers: Mapping[str, str]) -> str:
    """Correlation ID sent by the caller, or a new one. Header names match case-insensitively."""
    wanted = CORRELATION_ID_HEADER.lower()
    for name, value in headers.items():
        if name.lower() == wanted and value:
            return value
    return create_correlation_id()
