"""
Item service layer - business logic for catalog operations.
"""

import math
from typing import Optional

from src.config import config
from src.core.errors import ErrorResponse, ItemNotFoundError
from src.core.logger import logger
from src.models.item import (
    ItemCreate,
    ItemDB,
    ItemListResponse,
    ItemUpdate,
    PageMeta,
    initial_rating_state,
)
from src.repositories.item_repository import ItemRepository
from src.repositories.rating_repository import RatingRepository
from src.validators import validate_object_id


class ItemService:
    """
    Service class for catalog business logic.

    Rating fields are never written from here; they belong to RatingAggregator.
    """

    def __init__(self, repository: ItemRepository, rating_repository: RatingRepository):
        self.repository = repository
        self.rating_repository = rating_repository

    @staticmethod
    def _page_window(page: int, limit: int) -> tuple:
        if page < 1:
            raise ErrorResponse("Page must be 1 or greater", status_code=400)
        if limit < 1 or limit > config.MAX_PAGE_SIZE:
            raise ErrorResponse(
                f"Limit must be between 1 and {config.MAX_PAGE_SIZE}", status_code=400
            )
        return (page - 1) * limit, limit

    @staticmethod
    def _page(documents, total_count: int, page: int, limit: int) -> ItemListResponse:
        return ItemListResponse(
            data=[ItemDB(**doc) for doc in documents],
            meta=PageMeta(
                page=page,
                limit=limit,
                totalCount=total_count,
                totalPages=math.ceil(total_count / limit),
            ),
        )

    async def list_items(
        self,
        page: int = 1,
        limit: int = config.DEFAULT_PAGE_SIZE,
        correlation_id: Optional[str] = None
    ) -> ItemListResponse:
        skip, limit = self._page_window(page, limit)
        documents, total_count = await self.repository.list_items(
            skip=skip, limit=limit, correlation_id=correlation_id
        )
        return self._page(documents, total_count, page, limit)

    async def search_items(
        self,
        search_text: str,
        page: int = 1,
        limit: int = config.DEFAULT_PAGE_SIZE,
        correlation_id: Optional[str] = None
    ) -> ItemListResponse:
        """
        Raises:
            ErrorResponse: If search text is empty or pagination is invalid
        """
        if not search_text or not search_text.strip():
            raise ErrorResponse("Search text cannot be empty", status_code=400)

        skip, limit = self._page_window(page, limit)
        documents, total_count = await self.repository.search_items(
            search_text, skip=skip, limit=limit, correlation_id=correlation_id
        )

        logger.info(
            f"Search completed: found {total_count} items",
            correlation_id=correlation_id,
            metadata={"search_text": search_text, "total_count": total_count}
        )
        return self._page(documents, total_count, page, limit)

    async def get_item(self, item_id: str, correlation_id: Optional[str] = None) -> ItemDB:
        document = await self.repository.find_by_id(
            validate_object_id(item_id), correlation_id=correlation_id
        )
        if not document:
            raise ItemNotFoundError(details={"itemId": item_id})
        return ItemDB(**document)

    async def create_item(
        self,
        item_data: ItemCreate,
        correlation_id: Optional[str] = None
    ) -> ItemDB:
        document = {**item_data.model_dump(), **initial_rating_state()}
        item_id = await self.repository.create_item(document, correlation_id=correlation_id)

        logger.info(
            f"Created item: {item_data.title}",
            correlation_id=correlation_id,
            metadata={"itemId": str(item_id), "title": item_data.title}
        )
        return await self.get_item(str(item_id), correlation_id=correlation_id)

    async def update_item(
        self,
        item_id: str,
        item_data: ItemUpdate,
        correlation_id: Optional[str] = None
    ) -> ItemDB:
        oid = validate_object_id(item_id)
        fields = item_data.model_dump(exclude_unset=True)
        if not fields:
            raise ErrorResponse("No fields to update", status_code=400)

        document = await self.repository.update_item(oid, fields, correlation_id=correlation_id)
        if not document:
            raise ItemNotFoundError(details={"itemId": item_id})

        logger.info(
            f"Updated item: {item_id}",
            correlation_id=correlation_id,
            metadata={"itemId": item_id, "fields": sorted(fields)}
        )
        return ItemDB(**document)

    async def delete_item(self, item_id: str, correlation_id: Optional[str] = None) -> None:
        """Delete an item together with its ratings, so none are left dangling."""
        oid = validate_object_id(item_id)
        if not await self.repository.delete_item(oid, correlation_id=correlation_id):
            raise ItemNotFoundError(details={"itemId": item_id})

        removed = await self.rating_repository.delete_by_item(oid, correlation_id=correlation_id)
        logger.info(
            f"Deleted item: {item_id}",
            correlation_id=correlation_id,
            metadata={"itemId": item_id, "ratingsRemoved": removed}
        )
