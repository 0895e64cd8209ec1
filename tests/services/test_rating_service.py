"""Tests for RatingService: the full submission path"""
import asyncio
import random
from datetime import datetime, UTC
from unittest.mock import AsyncMock, patch

import pytest
from bson import ObjectId
from pymongo.errors import AutoReconnect

from src.core.errors import (
    DuplicateRatingError,
    InvalidIdError,
    InvalidScoreError,
    ItemNotFoundError,
    StorageUnavailableError,
)
from src.models.item import initial_rating_state
from src.repositories.rating_repository import RatingRepository
from src.services.rating_aggregator import RatingAggregator
from src.services.rating_service import RatingService


class TestSubmitRating:

    @pytest.mark.asyncio
    async def test_two_raters_then_duplicate(self, rating_service, make_item, items_collection, ratings_collection):
        item = make_item()
        item_id = str(item["_id"])

        first = await rating_service.submit_rating(item_id, "rater-a", 4)
        assert first.averageRating == 4
        assert first.totalRatingsCount == 1

        second = await rating_service.submit_rating(item_id, "rater-b", 2)
        assert second.averageRating == 3
        assert second.totalRatingsCount == 2

        with pytest.raises(DuplicateRatingError) as exc_info:
            await rating_service.submit_rating(item_id, "rater-a", 5)

        assert exc_info.value.status_code == 409
        stored = items_collection.documents[0]
        assert stored["averageRating"] == 3
        assert stored["totalRatingsCount"] == 2
        assert len(ratings_collection.documents) == 2

    @pytest.mark.asyncio
    async def test_sum_is_reconstructible(self, rating_service, make_item, items_collection):
        item = make_item()
        for rater, score in (("a", 5), ("b", 4), ("c", 4)):
            await rating_service.submit_rating(str(item["_id"]), rater, score)

        stored = items_collection.documents[0]
        assert stored["ratingSum"] == 13
        assert round(stored["averageRating"] * stored["totalRatingsCount"]) == 13

    @pytest.mark.asyncio
    async def test_average_matches_arithmetic_mean(self, rating_service, make_item, items_collection):
        item = make_item()
        rng = random.Random(7)
        scores = [rng.randint(1, 5) for _ in range(60)]

        for index, score in enumerate(scores):
            await rating_service.submit_rating(str(item["_id"]), f"rater-{index}", score)

        stored = items_collection.documents[0]
        assert stored["totalRatingsCount"] == len(scores)
        assert abs(stored["averageRating"] - sum(scores) / len(scores)) <= 1e-9

    @pytest.mark.asyncio
    async def test_string_score_from_path_is_accepted(self, rating_service, make_item):
        item = make_item()

        aggregate = await rating_service.submit_rating(str(item["_id"]), "rater-a", "5")

        assert aggregate.averageRating == 5

    @pytest.mark.asyncio
    @pytest.mark.parametrize("score", [0, 6, 1.5, "abc", True, None, -3])
    async def test_invalid_score_changes_nothing(
        self, rating_service, make_item, items_collection, ratings_collection, score
    ):
        item = make_item()

        with pytest.raises(InvalidScoreError) as exc_info:
            await rating_service.submit_rating(str(item["_id"]), "rater-a", score)

        assert exc_info.value.status_code == 422
        assert ratings_collection.documents == []
        assert items_collection.documents[0]["totalRatingsCount"] == 0
        assert items_collection.documents[0]["ratingVersion"] == 0

    @pytest.mark.asyncio
    async def test_invalid_item_id(self, rating_service, ratings_collection):
        with pytest.raises(InvalidIdError):
            await rating_service.submit_rating("not-an-id", "rater-a", 3)

        assert ratings_collection.documents == []

    @pytest.mark.asyncio
    async def test_missing_item_stores_nothing(self, rating_service, ratings_collection):
        with pytest.raises(ItemNotFoundError) as exc_info:
            await rating_service.submit_rating(str(ObjectId()), "rater-a", 3)

        assert exc_info.value.status_code == 404
        assert ratings_collection.documents == []

    @pytest.mark.asyncio
    async def test_item_vanishing_after_insert_discards_rating(
        self, rating_service, item_repository, make_item, ratings_collection
    ):
        item = make_item()
        lookups = AsyncMock(side_effect=[initial_rating_state(), None])

        with patch.object(item_repository, "find_rating_state", lookups), \
                patch("src.services.rating_service.logger") as mock_logger:
            with pytest.raises(ItemNotFoundError):
                await rating_service.submit_rating(str(item["_id"]), "rater-a", 4)

        assert ratings_collection.documents == []
        mock_logger.error.assert_called_once()

    @pytest.mark.asyncio
    async def test_storage_failure_is_retryable(self, item_repository, make_item, mock_collection, items_collection):
        item = make_item()
        mock_collection.find_one.return_value = None
        mock_collection.insert_one.side_effect = AutoReconnect("connection reset")
        service = RatingService(item_repository, RatingRepository(mock_collection))

        with pytest.raises(StorageUnavailableError) as exc_info:
            await service.submit_rating(str(item["_id"]), "rater-a", 4)

        assert exc_info.value.status_code == 503
        assert exc_info.value.details["retryable"] is True
        assert items_collection.documents[0]["totalRatingsCount"] == 0

    @pytest.mark.asyncio
    async def test_exhausted_retries_discard_rating(
        self, item_repository, rating_repository, make_item, items_collection, ratings_collection
    ):
        item = make_item()
        service = RatingService(
            item_repository,
            rating_repository,
            aggregator=RatingAggregator(item_repository, rating_repository, max_retries=2),
        )

        with patch.object(item_repository, "compare_and_set_rating_state", AsyncMock(return_value=False)):
            with pytest.raises(StorageUnavailableError) as exc_info:
                await service.submit_rating(str(item["_id"]), "rater-a", 4)

        assert exc_info.value.details["retryable"] is True
        assert ratings_collection.documents == []

        aggregate = await service.submit_rating(str(item["_id"]), "rater-a", 4)

        assert aggregate.totalRatingsCount == 1
        assert len(ratings_collection.documents) == 1

    @pytest.mark.asyncio
    async def test_aggregate_write_failure_discards_rating(
        self, rating_service, item_repository, make_item, ratings_collection
    ):
        item = make_item()
        failing_write = AsyncMock(side_effect=StorageUnavailableError(details={"operation": "writing rating state"}))

        with patch.object(item_repository, "compare_and_set_rating_state", failing_write):
            with pytest.raises(StorageUnavailableError):
                await rating_service.submit_rating(str(item["_id"]), "rater-a", 4)

        assert ratings_collection.documents == []

    @pytest.mark.asyncio
    async def test_failed_discard_keeps_original_error(
        self, rating_service, item_repository, rating_repository, make_item
    ):
        item = make_item()
        failing_write = AsyncMock(side_effect=StorageUnavailableError(details={"operation": "writing rating state"}))
        failing_delete = AsyncMock(side_effect=StorageUnavailableError(details={"operation": "deleting document"}))

        with patch.object(item_repository, "compare_and_set_rating_state", failing_write), \
                patch.object(rating_repository, "delete_rating", failing_delete), \
                patch("src.services.rating_service.logger") as mock_logger:
            with pytest.raises(StorageUnavailableError) as exc_info:
                await rating_service.submit_rating(str(item["_id"]), "rater-a", 4)

        assert exc_info.value.details["operation"] == "writing rating state"
        mock_logger.critical.assert_called_once()


class TestConcurrentSubmissions:

    @pytest.mark.asyncio
    async def test_same_pair_exactly_one_wins(self, rating_service, make_item, items_collection, ratings_collection):
        item = make_item()
        attempts = 8

        results = await asyncio.gather(
            *(rating_service.submit_rating(str(item["_id"]), "rater-a", 4) for _ in range(attempts)),
            return_exceptions=True
        )

        failures = [r for r in results if isinstance(r, Exception)]
        assert len(failures) == attempts - 1
        assert all(isinstance(f, DuplicateRatingError) for f in failures)
        assert len(ratings_collection.documents) == 1
        assert items_collection.documents[0]["totalRatingsCount"] == 1

    @pytest.mark.asyncio
    async def test_two_raters_same_item_no_lost_update(self, rating_service, make_item, items_collection):
        item = make_item()

        await asyncio.gather(
            rating_service.submit_rating(str(item["_id"]), "rater-a", 5),
            rating_service.submit_rating(str(item["_id"]), "rater-b", 2),
        )

        stored = items_collection.documents[0]
        assert stored["totalRatingsCount"] == 2
        assert stored["ratingSum"] == 7
        assert stored["averageRating"] == 3.5

    @pytest.mark.asyncio
    async def test_many_raters_all_counted(self, item_repository, rating_repository, make_item, items_collection):
        item = make_item()
        service = RatingService(
            item_repository,
            rating_repository,
            aggregator=RatingAggregator(item_repository, rating_repository, max_retries=100),
        )
        scores = [1, 2, 3, 4, 5, 5, 4, 3, 2, 1, 5, 5]

        await asyncio.gather(
            *(service.submit_rating(str(item["_id"]), f"rater-{i}", s) for i, s in enumerate(scores))
        )

        stored = items_collection.documents[0]
        assert stored["totalRatingsCount"] == len(scores)
        assert stored["ratingSum"] == sum(scores)


class TestRaterHistory:

    @pytest.mark.asyncio
    async def test_list_ratings_by_rater_in_submission_order(self, rating_service, make_item):
        first = make_item(title="Ficciones", author="Borges")
        second = make_item(title="Rayuela", author="Cortázar")
        await rating_service.submit_rating(str(first["_id"]), "rater-a", 5)
        await rating_service.submit_rating(str(second["_id"]), "rater-b", 1)
        await rating_service.submit_rating(str(second["_id"]), "rater-a", 3)

        events = await rating_service.list_ratings_by_rater("rater-a")

        assert [(e.itemId, e.score) for e in events] == [
            (str(first["_id"]), 5),
            (str(second["_id"]), 3),
        ]

    @pytest.mark.asyncio
    async def test_unknown_rater_has_no_ratings(self, rating_service):
        assert await rating_service.list_ratings_by_rater("nobody") == []
        assert await rating_service.list_rater_history("nobody") == []

    @pytest.mark.asyncio
    async def test_history_carries_item_summary(self, rating_service, make_item):
        item = make_item(title="Ficciones", author="Borges")
        await rating_service.submit_rating(str(item["_id"]), "rater-a", 4)

        history = await rating_service.list_rater_history("rater-a")

        assert len(history) == 1
        assert history[0].score == 4
        assert history[0].item.title == "Ficciones"
        assert history[0].item.totalRatingsCount == 1


class TestMaintenance:

    @pytest.mark.asyncio
    async def test_find_orphaned_ratings(self, rating_service, make_item, ratings_collection):
        item = make_item()
        missing = ObjectId()
        now = datetime.now(UTC)
        ratings_collection.documents.extend([
            {"_id": ObjectId(), "itemId": item["_id"], "raterId": "a", "score": 3, "createdAt": now},
            {"_id": ObjectId(), "itemId": missing, "raterId": "a", "score": 4, "createdAt": now},
            {"_id": ObjectId(), "itemId": missing, "raterId": "b", "score": 2, "createdAt": now},
        ])

        orphans = await rating_service.find_orphaned_ratings()

        assert orphans == {str(missing): 2}

    @pytest.mark.asyncio
    async def test_reconcile_item_by_string_id(self, rating_service, make_item, ratings_collection):
        item = make_item(averageRating=1.0, totalRatingsCount=1, ratingSum=1, ratingVersion=1)
        ratings_collection.documents.extend([
            {"_id": ObjectId(), "itemId": item["_id"], "raterId": "a", "score": 4, "createdAt": datetime.now(UTC)},
            {"_id": ObjectId(), "itemId": item["_id"], "raterId": "b", "score": 5, "createdAt": datetime.now(UTC)},
        ])

        aggregate = await rating_service.reconcile_item(str(item["_id"]))

        assert aggregate.totalRatingsCount == 2
        assert aggregate.averageRating == 4.5
