"""
Catalog models package.
"""

from .item import (
    RATING_FIELDS,
    ItemCreate,
    ItemDB,
    ItemListResponse,
    ItemUpdate,
    PageMeta,
    RatingAggregate,
    initial_rating_state,
)
from .rating import (
    RatedItemSummary,
    RatingEvent,
    RatingHistoryEntry,
    RatingSubmission,
)

__all__ = [
    "RATING_FIELDS",
    "ItemCreate",
    "ItemDB",
    "ItemListResponse",
    "ItemUpdate",
    "PageMeta",
    "RatingAggregate",
    "initial_rating_state",
    "RatedItemSummary",
    "RatingEvent",
    "RatingHistoryEntry",
    "RatingSubmission",
]
