"""
Repository layer for data access.

Repository classes wrap Motor collections and keep query shapes out of the
service layer.
"""

from src.repositories.base_repository import BaseRepository
from src.repositories.item_repository import ItemRepository
from src.repositories.rating_repository import RatingRepository

__all__ = ["BaseRepository", "ItemRepository", "RatingRepository"]
