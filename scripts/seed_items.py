"""
Seed the items collection from a JSON file.

    python -m scripts.seed_items [path/to/items.json]

Each entry is validated as an ItemCreate and gets zeroed rating fields.
"""
import asyncio
import json
import os
import sys
from datetime import datetime, UTC

from dotenv import load_dotenv
from motor.motor_asyncio import AsyncIOMotorClient
from pydantic import ValidationError

load_dotenv()

from src.config import config
from src.models.item import ItemCreate, initial_rating_state

DEFAULT_DATA_FILE = os.path.join(os.path.dirname(os.path.abspath(__file__)), "items-data.json")


def load_items_from_json(path: str) -> list:
    """Load and validate items; invalid entries are reported and skipped"""
    try:
        with open(path, "r", encoding="utf-8") as file:
            raw_items = json.load(file)
    except FileNotFoundError:
        print(f"Error: {path} not found")
        return []
    except json.JSONDecodeError as e:
        print(f"Error parsing {path}: {e}")
        return []

    items = []
    now = datetime.now(UTC)
    for index, raw in enumerate(raw_items):
        try:
            item = ItemCreate(**raw)
        except ValidationError as e:
            print(f"Skipping entry {index}: {e.error_count()} validation error(s)")
            continue
        items.append({
            **item.model_dump(),
            **initial_rating_state(),
            "created_at": now,
            "updated_at": now,
        })
    return items


async def seed(path: str = DEFAULT_DATA_FILE):
    items = load_items_from_json(path)

    if not items:
        print("No items to seed.")
        return

    client = AsyncIOMotorClient(config.MONGODB_URI)
    items_col = client[config.DATABASE_NAME][config.ITEMS_COLLECTION]

    try:
        result = await items_col.insert_many(items)
        print(f"Successfully seeded {len(result.inserted_ids)} items.")
    finally:
        client.close()


if __name__ == "__main__":
    asyncio.run(seed(sys.argv[1] if len(sys.argv) > 1 else DEFAULT_DATA_FILE))
