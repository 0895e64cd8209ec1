"""Shared test fixtures"""
import os

os.environ["ENVIRONMENT"] = "test"

from datetime import datetime, UTC
from unittest.mock import AsyncMock

import jwt
import pytest
from bson import ObjectId

from src.config import config
from src.models.item import initial_rating_state
from src.repositories.item_repository import ItemRepository
from src.repositories.rating_repository import RatingRepository
from src.services.item_service import ItemService
from src.services.rating_service import RatingService
from tests.fakes import InMemoryCollection


@pytest.fixture
def mock_collection():
    """Mock MongoDB collection for testing"""
    collection = AsyncMock()
    collection.name = "mock"
    return collection


@pytest.fixture
def item_id():
    """Sample item ID for testing"""
    return "507f1f77bcf86cd799439011"


@pytest.fixture
def items_collection():
    return InMemoryCollection(config.ITEMS_COLLECTION)


@pytest.fixture
def ratings_collection():
    return InMemoryCollection(config.RATINGS_COLLECTION, unique_indexes=[("itemId", "raterId")])


@pytest.fixture
def item_repository(items_collection):
    return ItemRepository(items_collection)


@pytest.fixture
def rating_repository(ratings_collection):
    return RatingRepository(ratings_collection)


@pytest.fixture
def rating_service(item_repository, rating_repository):
    return RatingService(item_repository, rating_repository)


@pytest.fixture
def item_service(item_repository, rating_repository):
    return ItemService(item_repository, rating_repository)


@pytest.fixture
def make_item(items_collection):
    """Insert an item document straight into the fake collection"""
    def _make(title="El Eternauta", author="Oesterheld", **fields):
        document = {
            "_id": ObjectId(),
            "title": title,
            "author": author,
            "categories": ["comic"],
            "year": 1957,
            "created_at": datetime.now(UTC),
            "updated_at": datetime.now(UTC),
            **initial_rating_state(),
            **fields,
        }
        items_collection.documents.append(document)
        return document
    return _make


@pytest.fixture
def make_token():
    def _make(user_id="rater-a", roles=None):
        return jwt.encode(
            {"sub": user_id, "email": f"{user_id}@example.org", "roles": roles or ["user"]},
            config.JWT_SECRET,
            algorithm=config.JWT_ALGORITHM,
        )
    return _make
