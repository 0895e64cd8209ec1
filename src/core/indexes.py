"""
Database index management for MongoDB.

Creates the indexes the catalog and the rating ledger rely on.
Indexes are created at application startup.
"""

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ASCENDING, DESCENDING, TEXT

from src.config import config
from src.core.logger import logger


async def create_rating_indexes(db: AsyncIOMotorDatabase) -> None:
    """
    Create indexes on the ratings collection.

    The unique (itemId, raterId) index is what makes a rating one-per-rater:
    two concurrent submissions can both pass the existence check, only one
    insert survives it.
    """
    collection = db[config.RATINGS_COLLECTION]

    await collection.create_index(
        [("itemId", ASCENDING), ("raterId", ASCENDING)],
        unique=True,
        name="idx_item_rater_unique"
    )
    logger.info("Created unique index on 'itemId', 'raterId'")

    await collection.create_index(
        [("raterId", ASCENDING)],
        name="idx_rater"
    )
    logger.info("Created index on 'raterId'")


async def create_item_indexes(db: AsyncIOMotorDatabase) -> None:
    """Create indexes on the items collection."""
    collection = db[config.ITEMS_COLLECTION]

    await collection.create_index(
        [
            ("title", TEXT),
            ("author", TEXT),
            ("categories", TEXT)
        ],
        weights={
            "title": 10,
            "author": 5,
            "categories": 2
        },
        name="idx_text_search"
    )
    logger.info("Created text search index on 'title', 'author', 'categories'")

    # Default listing order: best rated first, newest first on ties
    await collection.create_index(
        [
            ("averageRating", DESCENDING),
            ("_id", DESCENDING)
        ],
        name="idx_rating_listing"
    )
    logger.info("Created compound index on 'averageRating', '_id'")

    for field in ("title", "author", "categories", "year"):
        await collection.create_index([(field, ASCENDING)], name=f"idx_{field}")
        logger.info(f"Created index on '{field}'")

    await collection.create_index(
        [("title", ASCENDING), ("author", ASCENDING)],
        name="idx_title_author"
    )
    logger.info("Created compound index on 'title', 'author'")


async def create_indexes(db: AsyncIOMotorDatabase) -> None:
    """
    Create all required MongoDB indexes.

    Args:
        db: MongoDB database instance
    """
    try:
        await create_rating_indexes(db)
        await create_item_indexes(db)
        logger.info("All database indexes created successfully")
    except Exception as e:
        logger.error("Failed to create database indexes", error=e)
        raise

