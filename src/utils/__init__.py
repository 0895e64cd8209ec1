"""
Shared utilities package
"""

from .correlation_id import (
    CORRELATION_ID_HEADER,
    get_correlation_id,
    set_correlation_id,
    create_correlation_id,
    extract_correlation_id_from_headers,
)

__all__ = [
    "CORRELATION_ID_HEADER",
    "get_correlation_id",
    "set_correlation_id",
    "create_correlation_id",
    "extract_correlation_id_from_headers",
]
