"""
FastAPI dependency injection functions.
"""

from src.dependencies.auth import (
    CurrentUser,
    get_current_user,
    require_admin,
    require_role,
)
from src.dependencies.services import (
    get_item_repository,
    get_item_service,
    get_rating_repository,
    get_rating_service,
)
from src.utils.correlation_id import get_correlation_id

__all__ = [
    "CurrentUser",
    "get_current_user",
    "require_admin",
    "require_role",
    "get_item_repository",
    "get_item_service",
    "get_rating_repository",
    "get_rating_service",
    "get_correlation_id",
]
