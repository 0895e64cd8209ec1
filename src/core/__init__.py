"""
Core utilities package.

- logger: Structured logging with correlation IDs
- errors: Typed error responses and their handlers
- indexes: MongoDB index management
"""

from .errors import (
    DuplicateRatingError,
    ErrorResponse,
    ErrorResponseModel,
    InvalidIdError,
    InvalidScoreError,
    ItemNotFoundError,
    StorageUnavailableError,
    error_response_handler,
    http_exception_handler,
)
from .logger import logger

__all__ = [
    "DuplicateRatingError",
    "ErrorResponse",
    "ErrorResponseModel",
    "InvalidIdError",
    "InvalidScoreError",
    "ItemNotFoundError",
    "StorageUnavailableError",
    "error_response_handler",
    "http_exception_handler",
    "logger",
]
