"""
Service layer dependency injection for FastAPI.

Provides repository and service instances with their collections injected.
"""

from fastapi import Depends
from motor.motor_asyncio import AsyncIOMotorCollection

from src.db.mongodb import get_items_collection, get_ratings_collection
from src.repositories.item_repository import ItemRepository
from src.repositories.rating_repository import RatingRepository
from src.services.item_service import ItemService
from src.services.rating_service import RatingService


async def get_item_repository(
    collection: AsyncIOMotorCollection = Depends(get_items_collection)
) -> ItemRepository:
    return ItemRepository(collection)


async def get_rating_repository(
    collection: AsyncIOMotorCollection = Depends(get_ratings_collection)
) -> RatingRepository:
    return RatingRepository(collection)


async def get_item_service(
    items: ItemRepository = Depends(get_item_repository),
    ratings: RatingRepository = Depends(get_rating_repository),
) -> ItemService:
    """
    FastAPI dependency to get ItemService instance.

    Usage:
        @router.get("/items")
        async def list_items(service: ItemService = Depends(get_item_service)):
            ...
    """
    return ItemService(items, ratings)


async def get_rating_service(
    items: ItemRepository = Depends(get_item_repository),
    ratings: RatingRepository = Depends(get_rating_repository),
) -> RatingService:
    return RatingService(items, ratings)
