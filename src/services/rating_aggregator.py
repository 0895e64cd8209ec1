"""
Rating aggregator: keeps each item's averageRating / totalRatingsCount in step
with the rating ledger.

The item stores the integer sum of scores next to the count, so the average is
always ratingSum / totalRatingsCount and never accumulates floating-point drift.
Writes are compare-and-swap on ratingVersion: two raters hitting the same item
at once both land, the loser of the race re-reads and retries.
"""

from typing import Optional

from bson import ObjectId

from src.config import config
from src.core.errors import ItemNotFoundError, StorageUnavailableError
from src.core.logger import logger
from src.models.item import RatingAggregate
from src.repositories.item_repository import ItemRepository
from src.repositories.rating_repository import RatingRepository


def current_rating_sum(state: dict) -> int:
    """
    Integer sum of scores for a stored rating state.

    Items written before ratingSum existed only carry the average and the
    count; their sum is reconstructed from those, rounded.
    """
    if state.get("ratingSum") is not None:
        return int(state["ratingSum"])
    return int(round(state.get("averageRating", 0.0) * state.get("totalRatingsCount", 0)))


class RatingAggregator:

    def __init__(
        self,
        item_repository: ItemRepository,
        rating_repository: Optional[RatingRepository] = None,
        max_retries: int = config.RATING_MAX_CAS_RETRIES,
    ):
        self.item_repository = item_repository
        self.rating_repository = rating_repository
        self.max_retries = max_retries

    async def apply_new_rating(
        self,
        item_id: ObjectId,
        score: int,
        correlation_id: Optional[str] = None
    ) -> RatingAggregate:
        """
        Fold one accepted score into the item's aggregate in O(1).

        Raises:
            ItemNotFoundError: If the item does not exist
            StorageUnavailableError: If every attempt lost the version race
        """
        for attempt in range(1, self.max_retries + 1):
            state = await self.item_repository.find_rating_state(
                item_id, correlation_id=correlation_id
            )
            if state is None:
                raise ItemNotFoundError(details={"itemId": str(item_id)})

            new_sum = current_rating_sum(state) + score
            new_count = state.get("totalRatingsCount", 0) + 1

            written = await self.item_repository.compare_and_set_rating_state(
                item_id,
                state.get("ratingVersion"),
                new_sum,
                new_count,
                correlation_id=correlation_id
            )
            if written:
                aggregate = RatingAggregate(
                    averageRating=new_sum / new_count,
                    totalRatingsCount=new_count,
                )
                logger.info(
                    f"Updated rating aggregate for item {item_id}",
                    correlation_id=correlation_id,
                    metadata={
                        "event": "rating_aggregate_updated",
                        "itemId": str(item_id),
                        "score": score,
                        "newAverage": aggregate.averageRating,
                        "totalRatingsCount": new_count,
                        "attempt": attempt
                    }
                )
                return aggregate

            logger.debug(
                "Rating aggregate version conflict, retrying",
                correlation_id=correlation_id,
                metadata={"itemId": str(item_id), "attempt": attempt}
            )

        logger.error(
            f"Gave up updating rating aggregate for item {item_id}",
            correlation_id=correlation_id,
            metadata={
                "event": "rating_aggregate_conflict",
                "itemId": str(item_id),
                "attempts": self.max_retries
            }
        )
        raise StorageUnavailableError(
            "Too many concurrent updates on this item, try again",
            details={"itemId": str(item_id), "attempts": self.max_retries}
        )

    async def reconcile_item(
        self,
        item_id: ObjectId,
        correlation_id: Optional[str] = None
    ) -> RatingAggregate:
        """
        Recompute an item's aggregate from a full scan of its ratings.

        Compensating control for aggregates that drifted from the ledger (for
        example a process killed between the ledger insert and the aggregate
        write). Not used on the submission path. The item must not be receiving
        ratings while this runs, or an in-flight rating is counted twice.
        """
        if self.rating_repository is None:
            raise RuntimeError("reconcile_item needs a rating repository")

        for _ in range(self.max_retries):
            state = await self.item_repository.find_rating_state(
                item_id, correlation_id=correlation_id
            )
            if state is None:
                raise ItemNotFoundError(details={"itemId": str(item_id)})

            totals = await self.rating_repository.sum_scores_for_item(
                item_id, correlation_id=correlation_id
            )
            written = await self.item_repository.compare_and_set_rating_state(
                item_id,
                state.get("ratingVersion"),
                totals["ratingSum"],
                totals["totalRatingsCount"],
                correlation_id=correlation_id
            )
            if written:
                count = totals["totalRatingsCount"]
                aggregate = RatingAggregate(
                    averageRating=totals["ratingSum"] / count if count else 0.0,
                    totalRatingsCount=count,
                )
                if count != state.get("totalRatingsCount", 0) or totals["ratingSum"] != current_rating_sum(state):
                    logger.warning(
                        f"Reconciled drifted rating aggregate for item {item_id}",
                        correlation_id=correlation_id,
                        metadata={
                            "event": "rating_aggregate_reconciled",
                            "itemId": str(item_id),
                            "before": {
                                "ratingSum": current_rating_sum(state),
                                "totalRatingsCount": state.get("totalRatingsCount", 0)
                            },
                            "after": totals
                        }
                    )
                return aggregate

        raise StorageUnavailableError(
            "Too many concurrent updates on this item, try again",
            details={"itemId": str(item_id), "attempts": self.max_retries}
        )
