"""
Rating repository: the persistent side of the rating ledger.

Each document is one RatingEvent:
    {_id, itemId: ObjectId, raterId: str, score: int, createdAt: datetime}

A unique index on (itemId, raterId) is the authoritative one-rating-per-rater
guarantee; see src.core.indexes.
"""

from typing import Any, Dict, List, Optional

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorCollection
from pymongo.errors import DuplicateKeyError, PyMongoError

from src.core.errors import DuplicateRatingError
from src.core.logger import logger
from src.repositories.base_repository import BaseRepository


class RatingRepository(BaseRepository):

    def __init__(self, collection: AsyncIOMotorCollection):
        super().__init__(collection)

    async def find_by_item_and_rater(
        self,
        item_id: ObjectId,
        rater_id: str,
        correlation_id: Optional[str] = None
    ) -> Optional[Dict[str, Any]]:
        return await self.find_one(
            {"itemId": item_id, "raterId": rater_id},
            correlation_id=correlation_id
        )

    async def insert_rating(
        self,
        document: Dict[str, Any],
        correlation_id: Optional[str] = None
    ) -> ObjectId:
        """
        Insert a rating event.

        Raises:
            DuplicateRatingError: If the unique (itemId, raterId) index rejects
                the insert, i.e. a concurrent submission for the same pair won.
        """
        try:
            return await self.create(document, correlation_id=correlation_id)
        except DuplicateKeyError as e:
            logger.warning(
                "Rating insert lost the uniqueness race",
                correlation_id=correlation_id,
                metadata={
                    "event": "rating_duplicate_key",
                    "itemId": str(document.get("itemId")),
                    "raterId": document.get("raterId")
                }
            )
            raise DuplicateRatingError(
                details={
                    "itemId": str(document.get("itemId")),
                    "raterId": document.get("raterId")
                }
            ) from e

    async def find_by_rater(
        self,
        rater_id: str,
        correlation_id: Optional[str] = None
    ) -> List[Dict[str, Any]]:
        # _id order is insertion order for ObjectIds minted by the driver
        return await self.find_many(
            {"raterId": rater_id},
            sort=[("_id", 1)],
            correlation_id=correlation_id
        )

    async def delete_rating(
        self,
        rating_id: ObjectId,
        correlation_id: Optional[str] = None
    ) -> bool:
        return await self.delete(rating_id, correlation_id=correlation_id)

    async def delete_by_item(
        self,
        item_id: ObjectId,
        correlation_id: Optional[str] = None
    ) -> int:
        try:
            result = await self.collection.delete_many({"itemId": item_id})
        except PyMongoError as e:
            raise self._storage_error(
                "deleting item ratings", e, correlation_id, itemId=str(item_id)
            ) from e
        return result.deleted_count

    async def sum_scores_for_item(
        self,
        item_id: ObjectId,
        correlation_id: Optional[str] = None
    ) -> Dict[str, int]:
        """
        Full scan of an item's ratings. Only used by reconciliation.

        Returns:
            {"ratingSum": int, "totalRatingsCount": int}
        """
        pipeline = [
            {"$match": {"itemId": item_id}},
            {"$group": {"_id": None, "total": {"$sum": "$score"}, "count": {"$sum": 1}}},
        ]
        try:
            rows = await self.collection.aggregate(pipeline).to_list(length=1)
        except PyMongoError as e:
            raise self._storage_error(
                "summing item ratings", e, correlation_id, itemId=str(item_id)
            ) from e

        if not rows:
            return {"ratingSum": 0, "totalRatingsCount": 0}
        return {"ratingSum": rows[0]["total"], "totalRatingsCount": rows[0]["count"]}

    async def distinct_item_ids(self, correlation_id: Optional[str] = None) -> List[ObjectId]:
        try:
            return await self.collection.distinct("itemId")
        except PyMongoError as e:
            raise self._storage_error("listing rated items", e, correlation_id) from e
