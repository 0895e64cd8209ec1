from typing import Optional

from motor.motor_asyncio import (
    AsyncIOMotorClient,
    AsyncIOMotorCollection,
    AsyncIOMotorDatabase,
)
from pymongo.errors import PyMongoError

from src.config import config
from src.core.errors import StorageUnavailableError
from src.core.logger import logger

_client: Optional[AsyncIOMotorClient] = None


async def connect_to_mongo() -> AsyncIOMotorDatabase:
    """Create the process-wide Motor client and verify the server answers."""
    global _client

    if _client is None:
        logger.debug(
            "Attempting to connect to MongoDB",
            metadata={"event": "mongodb_connect_attempt", "db_name": config.DATABASE_NAME}
        )
        _client = AsyncIOMotorClient(
            config.MONGODB_URI,
            serverSelectionTimeoutMS=config.MONGODB_TIMEOUT_MS,
        )

    db = _client[config.DATABASE_NAME]

    try:
        await db.command("ping")
        collections = await db.list_collection_names()
    except PyMongoError as e:
        logger.error(
            f"MongoDB database '{config.DATABASE_NAME}' is not accessible",
            error=e,
            metadata={"event": "mongodb_db_unreachable"}
        )
        raise StorageUnavailableError(
            f"MongoDB database '{config.DATABASE_NAME}' is not accessible"
        ) from e

    logger.info(
        f"Successfully connected to MongoDB database '{config.DATABASE_NAME}'",
        metadata={
            "event": "mongodb_connected",
            "database": config.DATABASE_NAME,
            "collections_count": len(collections)
        }
    )
    return db


async def close_mongo_connection() -> None:
    global _client

    if _client is not None:
        _client.close()
        _client = None
        logger.info("MongoDB connection closed", metadata={"event": "mongodb_closed"})


async def get_db() -> AsyncIOMotorDatabase:
    if _client is None:
        return await connect_to_mongo()
    return _client[config.DATABASE_NAME]


async def get_items_collection() -> AsyncIOMotorCollection:
    db = await get_db()
    return db[config.ITEMS_COLLECTION]


async def get_ratings_collection() -> AsyncIOMotorCollection:
    db = await get_db()
    return db[config.RATINGS_COLLECTION]
