"""
Item repository for catalog data access operations.

Extends BaseRepository with:
- Paginated listing ordered by rating
- Text search
- Compare-and-swap writes of the rating projection
"""

from datetime import datetime, UTC
from typing import Any, Dict, Iterable, List, Optional, Set, Tuple

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorCollection
from pymongo import ReturnDocument
from pymongo.errors import PyMongoError

from src.core.logger import logger
from src.models.item import RATING_FIELDS
from src.repositories.base_repository import BaseRepository

LISTING_SORT = [("averageRating", -1), ("_id", -1)]

RATING_PROJECTION = {field: 1 for field in RATING_FIELDS}


class ItemRepository(BaseRepository):
    """
    Repository for item-specific data access operations.
    """

    def __init__(self, collection: AsyncIOMotorCollection):
        super().__init__(collection)

    async def list_items(
        self,
        skip: int = 0,
        limit: int = 10,
        correlation_id: Optional[str] = None
    ) -> Tuple[List[Dict[str, Any]], int]:
        """
        List items best rated first, newest first on ties.

        Returns:
            Tuple of (list of items, total count)
        """
        items = await self.find_many(
            {}, skip=skip, limit=limit, sort=LISTING_SORT, correlation_id=correlation_id
        )
        total_count = await self.count({}, correlation_id=correlation_id)
        return items, total_count

    async def search_items(
        self,
        search_text: str,
        skip: int = 0,
        limit: int = 10,
        correlation_id: Optional[str] = None
    ) -> Tuple[List[Dict[str, Any]], int]:
        """
        Search items through the text index on title, author and categories.

        Returns:
            Tuple of (list of items ordered by text score, total count)
        """
        query = {
            "$text": {
                "$search": search_text.strip(),
                "$caseSensitive": False,
                "$diacriticSensitive": False
            }
        }

        logger.debug(
            "Searching items",
            correlation_id=correlation_id,
            metadata={"search_text": search_text, "skip": skip, "limit": limit}
        )

        items = await self.find_many(
            query,
            skip=skip,
            limit=limit,
            sort=[("score", {"$meta": "textScore"})],
            projection={"score": {"$meta": "textScore"}},
            correlation_id=correlation_id
        )
        total_count = await self.count(query, correlation_id=correlation_id)
        return items, total_count

    async def create_item(
        self,
        document: Dict[str, Any],
        correlation_id: Optional[str] = None
    ) -> ObjectId:
        now = datetime.now(UTC)
        document = {**document, "created_at": now, "updated_at": now}
        return await self.create(document, correlation_id=correlation_id)

    async def update_item(
        self,
        item_id: ObjectId,
        fields: Dict[str, Any],
        correlation_id: Optional[str] = None
    ) -> Optional[Dict[str, Any]]:
        """
        Set catalog fields on an item and return the updated document.
        Rating fields are dropped here so a catalog edit can never race the aggregator.
        """
        fields = {k: v for k, v in fields.items() if k not in RATING_FIELDS and k != "_id"}
        fields["updated_at"] = datetime.now(UTC)
        try:
            return await self.collection.find_one_and_update(
                {"_id": item_id},
                {"$set": fields},
                return_document=ReturnDocument.AFTER
            )
        except PyMongoError as e:
            raise self._storage_error(
                "updating item", e, correlation_id, itemId=str(item_id)
            ) from e

    async def find_rating_state(
        self,
        item_id: ObjectId,
        correlation_id: Optional[str] = None
    ) -> Optional[Dict[str, Any]]:
        return await self.find_by_id(
            item_id, projection=RATING_PROJECTION, correlation_id=correlation_id
        )

    async def compare_and_set_rating_state(
        self,
        item_id: ObjectId,
        expected_version: Optional[int],
        rating_sum: int,
        ratings_count: int,
        correlation_id: Optional[str] = None
    ) -> bool:
        """
        Write the rating projection only if nobody else wrote it since it was read.

        Args:
            item_id: Item to update
            expected_version: ratingVersion seen when the state was read;
                None for items created before versioning existed
            rating_sum: New integer sum of all scores
            ratings_count: New number of ratings

        Returns:
            bool: True if the write landed, False on a version conflict or a
            vanished item
        """
        query: Dict[str, Any] = {"_id": item_id}
        if expected_version is None:
            query["ratingVersion"] = {"$exists": False}
        else:
            query["ratingVersion"] = expected_version

        average = rating_sum / ratings_count if ratings_count else 0.0

        try:
            result = await self.collection.update_one(
                query,
                {
                    "$set": {
                        "ratingSum": rating_sum,
                        "totalRatingsCount": ratings_count,
                        "averageRating": average,
                        "ratingVersion": (expected_version or 0) + 1,
                    }
                }
            )
        except PyMongoError as e:
            raise self._storage_error(
                "writing rating state", e, correlation_id, itemId=str(item_id)
            ) from e

        return result.matched_count == 1

    async def delete_item(
        self,
        item_id: ObjectId,
        correlation_id: Optional[str] = None
    ) -> bool:
        return await self.delete(item_id, correlation_id=correlation_id)

    async def find_existing_ids(
        self,
        item_ids: Iterable[ObjectId],
        correlation_id: Optional[str] = None
    ) -> Set[ObjectId]:
        item_ids = list(item_ids)
        if not item_ids:
            return set()
        documents = await self.find_many(
            {"_id": {"$in": item_ids}},
            projection={"_id": 1},
            correlation_id=correlation_id
        )
        return {doc["_id"] for doc in documents}

    async def find_all_ids(self, correlation_id: Optional[str] = None) -> List[ObjectId]:
        documents = await self.find_many({}, projection={"_id": 1}, correlation_id=correlation_id)
        return [doc["_id"] for doc in documents]
