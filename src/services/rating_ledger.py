"""
Rating ledger: records at most one rating per (item, rater) pair.
"""

from datetime import datetime, UTC
from typing import List, Optional

from bson import ObjectId

from src.core.errors import DuplicateRatingError
from src.core.logger import logger
from src.models.rating import RatingEvent
from src.repositories.rating_repository import RatingRepository


class RatingLedger:
    """
    Append-only store of rating events keyed by (itemId, raterId).

    The lookup before the insert only exists to give the common case a cheap,
    friendly rejection. Two concurrent submissions for the same pair can both
    pass it; the unique index then rejects the loser and the repository turns
    that into the same DuplicateRatingError.
    """

    def __init__(self, repository: RatingRepository):
        self.repository = repository

    async def submit_rating(
        self,
        item_id: ObjectId,
        rater_id: str,
        score: int,
        correlation_id: Optional[str] = None
    ) -> RatingEvent:
        """
        Persist a new rating event.

        Args:
            item_id: Rated item
            rater_id: Authenticated rater
            score: Already validated score

        Returns:
            RatingEvent: The stored event

        Raises:
            DuplicateRatingError: If the rater already rated this item
        """
        existing = await self.repository.find_by_item_and_rater(
            item_id, rater_id, correlation_id=correlation_id
        )
        if existing:
            logger.warning(
                "Rater has already rated this item",
                correlation_id=correlation_id,
                user_id=rater_id,
                metadata={"event": "rating_duplicate", "itemId": str(item_id)}
            )
            raise DuplicateRatingError(
                details={"itemId": str(item_id), "raterId": rater_id}
            )

        document = {
            "itemId": item_id,
            "raterId": rater_id,
            "score": score,
            "createdAt": datetime.now(UTC),
        }
        inserted_id = await self.repository.insert_rating(document, correlation_id=correlation_id)
        document["_id"] = inserted_id

        logger.info(
            f"Recorded rating for item {item_id}",
            correlation_id=correlation_id,
            user_id=rater_id,
            metadata={"event": "rating_recorded", "itemId": str(item_id), "score": score}
        )

        return RatingEvent.from_document(document)

    async def discard_rating(
        self,
        event: RatingEvent,
        correlation_id: Optional[str] = None
    ) -> bool:
        """Compensating delete for an event whose aggregate update cannot happen."""
        return await self.repository.delete_rating(
            ObjectId(event.id), correlation_id=correlation_id
        )

    async def list_ratings_by_rater(
        self,
        rater_id: str,
        correlation_id: Optional[str] = None
    ) -> List[RatingEvent]:
        documents = await self.repository.find_by_rater(rater_id, correlation_id=correlation_id)
        return [RatingEvent.from_document(doc) for doc in documents]
