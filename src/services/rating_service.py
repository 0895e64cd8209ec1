"""
Rating service layer - orchestrates a rating submission.

    validate score -> item exists? -> ledger insert -> aggregate update

Item existence is checked before the ledger insert. If the aggregate update
then fails (the item disappeared, or the store gave up), the inserted event is
deleted again before the error propagates, so a failed submission never leaves
a rating event behind and a retry starts from a clean ledger.
"""

from typing import Any, Dict, List, Optional

from bson import ObjectId

from src.core.errors import ItemNotFoundError, StorageUnavailableError
from src.core.logger import logger
from src.models.item import RatingAggregate
from src.models.rating import RatedItemSummary, RatingEvent, RatingHistoryEntry
from src.repositories.item_repository import ItemRepository
from src.repositories.rating_repository import RatingRepository
from src.services.rating_aggregator import RatingAggregator
from src.services.rating_ledger import RatingLedger
from src.validators import validate_object_id, validate_score


class RatingService:

    def __init__(
        self,
        item_repository: ItemRepository,
        rating_repository: RatingRepository,
        ledger: Optional[RatingLedger] = None,
        aggregator: Optional[RatingAggregator] = None,
    ):
        self.item_repository = item_repository
        self.rating_repository = rating_repository
        self.ledger = ledger or RatingLedger(rating_repository)
        self.aggregator = aggregator or RatingAggregator(item_repository, rating_repository)

    async def submit_rating(
        self,
        item_id: str,
        rater_id: str,
        score: Any,
        correlation_id: Optional[str] = None
    ) -> RatingAggregate:
        """
        Rate an item once on behalf of a rater.

        Args:
            item_id: Item ID (ObjectId string)
            rater_id: Authenticated rater ID
            score: Raw score from the caller

        Returns:
            RatingAggregate: The item's aggregate after this rating

        Raises:
            InvalidScoreError: Score is not an integer in range; nothing stored
            InvalidIdError: item_id is not an ObjectId
            ItemNotFoundError: No such item; nothing stored
            DuplicateRatingError: The rater already rated this item
            StorageUnavailableError: The store failed; safe to retry
        """
        score = validate_score(score)
        oid = validate_object_id(item_id)

        if await self.item_repository.find_rating_state(oid, correlation_id=correlation_id) is None:
            raise ItemNotFoundError(details={"itemId": item_id})

        event = await self.ledger.submit_rating(oid, rater_id, score, correlation_id=correlation_id)

        try:
            return await self.aggregator.apply_new_rating(oid, score, correlation_id=correlation_id)
        except (ItemNotFoundError, StorageUnavailableError) as e:
            logger.error(
                f"Aggregate update for item {item_id} failed after its rating was recorded, discarding the rating",
                correlation_id=correlation_id,
                user_id=rater_id,
                error=e,
                metadata={"event": "rating_compensated", "itemId": item_id, "ratingId": event.id}
            )
            await self._discard(event, correlation_id)
            raise

    async def _discard(self, event: RatingEvent, correlation_id: Optional[str]) -> None:
        # A rating the store will not delete is left for reconciliation
        try:
            await self.ledger.discard_rating(event, correlation_id=correlation_id)
        except StorageUnavailableError as e:
            logger.critical(
                f"Could not discard rating {event.id}, run reconciliation for item {event.itemId}",
                correlation_id=correlation_id,
                user_id=event.raterId,
                error=e,
                metadata={"event": "rating_compensation_failed", "itemId": event.itemId, "ratingId": event.id}
            )

    async def list_ratings_by_rater(
        self,
        rater_id: str,
        correlation_id: Optional[str] = None
    ) -> List[RatingEvent]:
        return await self.ledger.list_ratings_by_rater(rater_id, correlation_id=correlation_id)

    async def list_rater_history(
        self,
        rater_id: str,
        correlation_id: Optional[str] = None
    ) -> List[RatingHistoryEntry]:
        """A rater's ratings with a summary of each rated item attached."""
        events = await self.list_ratings_by_rater(rater_id, correlation_id=correlation_id)
        if not events:
            return []

        item_ids = list({ObjectId(event.itemId) for event in events})
        items = await self.item_repository.find_many(
            {"_id": {"$in": item_ids}},
            projection={"title": 1, "author": 1, "averageRating": 1, "totalRatingsCount": 1},
            correlation_id=correlation_id
        )
        summaries = {
            str(doc["_id"]): RatedItemSummary(
                title=doc.get("title"),
                author=doc.get("author"),
                averageRating=doc.get("averageRating", 0.0),
                totalRatingsCount=doc.get("totalRatingsCount", 0),
            )
            for doc in items
        }

        return [
            RatingHistoryEntry(
                itemId=event.itemId,
                score=event.score,
                createdAt=event.createdAt,
                item=summaries.get(event.itemId),
            )
            for event in events
        ]

    async def find_orphaned_ratings(
        self,
        correlation_id: Optional[str] = None
    ) -> Dict[str, int]:
        """
        Item IDs referenced by ratings whose item no longer exists.

        Returns:
            Mapping of orphaned item ID to the number of ratings pointing at it
        """
        rated_ids = await self.rating_repository.distinct_item_ids(correlation_id=correlation_id)
        existing = await self.item_repository.find_existing_ids(rated_ids, correlation_id=correlation_id)

        orphans = {}
        for item_id in rated_ids:
            if item_id not in existing:
                orphans[str(item_id)] = await self.rating_repository.count(
                    {"itemId": item_id}, correlation_id=correlation_id
                )

        if orphans:
            logger.error(
                f"Found ratings for {len(orphans)} missing items",
                correlation_id=correlation_id,
                metadata={"event": "rating_orphans_found", "orphans": orphans}
            )
        return orphans

    async def reconcile_item(
        self,
        item_id: str,
        correlation_id: Optional[str] = None
    ) -> RatingAggregate:
        return await self.aggregator.reconcile_item(
            validate_object_id(item_id), correlation_id=correlation_id
        )
