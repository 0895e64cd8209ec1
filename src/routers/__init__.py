# Router modules for the catalog service
from .item_router import router as item_router
from .rating_router import router as rating_router

__all__ = [
    "item_router",
    "rating_router",
]
