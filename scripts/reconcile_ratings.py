"""
Recompute rating aggregates from the ratings collection and report orphans.

    python -m scripts.reconcile_ratings            # every item
    python -m scripts.reconcile_ratings <item_id>  # one item

Run it while the item is not receiving ratings: a rating recorded in the
ledger but not yet folded into the aggregate would be counted twice.
"""
import asyncio
import sys

from dotenv import load_dotenv

load_dotenv()

from src.core.errors import ItemNotFoundError
from src.db.mongodb import close_mongo_connection, connect_to_mongo
from src.config import config
from src.repositories.item_repository import ItemRepository
from src.repositories.rating_repository import RatingRepository
from src.services.rating_service import RatingService


async def reconcile(item_ids: list = None) -> dict:
    db = await connect_to_mongo()
    service = RatingService(
        ItemRepository(db[config.ITEMS_COLLECTION]),
        RatingRepository(db[config.RATINGS_COLLECTION]),
    )

    try:
        if not item_ids:
            item_ids = [str(i) for i in await service.item_repository.find_all_ids()]

        results = {}
        for item_id in item_ids:
            try:
                aggregate = await service.reconcile_item(item_id)
            except ItemNotFoundError:
                print(f"  {item_id}: not found")
                continue
            results[item_id] = aggregate
            print(f"  {item_id}: {aggregate.averageRating:.3f} over {aggregate.totalRatingsCount} ratings")

        orphans = await service.find_orphaned_ratings()
        for item_id, count in orphans.items():
            print(f"  orphaned: {count} rating(s) for missing item {item_id}")

        return results
    finally:
        await close_mongo_connection()


if __name__ == "__main__":
    asyncio.run(reconcile(sys.argv[1:]))
