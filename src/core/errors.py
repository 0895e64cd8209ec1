# Error handling utilities

from typing import Optional

from fastapi import HTTPException, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from src.core.logger import logger


class ErrorResponse(Exception):
    code = "Error"

    def __init__(self, message: str, status_code: int = 400, details: dict = None):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(message)


class InvalidIdError(ErrorResponse):
    code = "InvalidId"

    def __init__(self, message: str = "Invalid ID format", details: dict = None):
        super().__init__(message, status_code=400, details=details)


class InvalidScoreError(ErrorResponse):
    """Score outside the accepted range or not an integer. Nothing was stored."""

    code = "InvalidScore"

    def __init__(self, message: str = "Score must be an integer between 1 and 5", details: dict = None):
        super().__init__(message, status_code=422, details=details)


class DuplicateRatingError(ErrorResponse):
    """The rater already has a rating for this item."""

    code = "DuplicateRating"

    def __init__(self, message: str = "You have already rated this item", details: dict = None):
        super().__init__(message, status_code=409, details=details)


class ItemNotFoundError(ErrorResponse):
    code = "ItemNotFound"

    def __init__(self, message: str = "Item not found", details: dict = None):
        super().__init__(message, status_code=404, details=details)


class StorageUnavailableError(ErrorResponse):
    """Transient store failure. Callers may retry the whole operation."""

    code = "StorageUnavailable"

    def __init__(self, message: str = "Storage is temporarily unavailable", details: dict = None):
        details = dict(details or {})
        details.setdefault("retryable", True)
        super().__init__(message, status_code=503, details=details)


def error_response_handler(request: Request, exc: ErrorResponse):
    log = logger.error if exc.status_code >= 500 else logger.warning
    log(
        f"Error: {exc.message}",
        metadata={
            "event": "error_response",
            "code": exc.code,
            "status_code": exc.status_code,
            **exc.details,
        },
    )
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.message, "code": exc.code, "details": exc.details},
    )


def http_exception_handler(request: Request, exc: HTTPException):
    logger.warning(
        f"HTTPException: {exc.detail}",
        metadata={"event": "http_exception", "status_code": exc.status_code},
    )
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail},
        headers=getattr(exc, "headers", None),
    )


class ErrorResponseModel(BaseModel):
    error: str
    code: Optional[str] = None
    details: Optional[dict] = None
