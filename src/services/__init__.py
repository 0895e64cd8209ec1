"""Service layer exports."""

from src.services.item_service import ItemService
from src.services.rating_aggregator import RatingAggregator
from src.services.rating_ledger import RatingLedger
from src.services.rating_service import RatingService

__all__ = [
    "ItemService",
    "RatingAggregator",
    "RatingLedger",
    "RatingService",
]
