"""Tests for index management"""
from unittest.mock import AsyncMock, MagicMock

import pytest
from pymongo.errors import OperationFailure

from src.config import config
from src.core.indexes import create_indexes, create_rating_indexes


def mock_db():
    collections = {
        config.ITEMS_COLLECTION: AsyncMock(),
        config.RATINGS_COLLECTION: AsyncMock(),
    }
    db = MagicMock()
    db.__getitem__.side_effect = collections.__getitem__
    return db, collections


class TestRatingIndexes:

    @pytest.mark.asyncio
    async def test_unique_item_rater_index(self):
        db, collections = mock_db()

        await create_rating_indexes(db)

        first_call = collections[config.RATINGS_COLLECTION].create_index.call_args_list[0]
        assert first_call.args[0] == [("itemId", 1), ("raterId", 1)]
        assert first_call.kwargs["unique"] is True


class TestCreateIndexes:

    @pytest.mark.asyncio
    async def test_creates_listing_index(self):
        db, collections = mock_db()

        await create_indexes(db)

        names = [c.kwargs["name"] for c in collections[config.ITEMS_COLLECTION].create_index.call_args_list]
        assert "idx_rating_listing" in names
        assert "idx_text_search" in names

    @pytest.mark.asyncio
    async def test_failure_propagates(self):
        db, collections = mock_db()
        collections[config.RATINGS_COLLECTION].create_index.side_effect = OperationFailure("index conflict")

        with pytest.raises(OperationFailure):
            await create_indexes(db)
