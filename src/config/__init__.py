# Configuration Factory for Catalog Service
import os
from typing import Type


class Config:
    """Base configuration class"""

    # Environment
    ENVIRONMENT = os.getenv("ENVIRONMENT", "development")
    DEBUG = False

    # Service
    SERVICE_NAME = os.getenv("SERVICE_NAME", "catalog-service")
    SERVICE_VERSION = os.getenv("SERVICE_VERSION", "1.0.0")

    # Server
    HOST = os.getenv("HOST", "0.0.0.0")  # nosec B104
    PORT = int(os.getenv("PORT", 8000))

    # Database
    MONGODB_URI = os.getenv("MONGODB_URI", "mongodb://localhost:27017")
    DATABASE_NAME = os.getenv("DATABASE_NAME", "catalog_db")
    ITEMS_COLLECTION = os.getenv("ITEMS_COLLECTION", "items")
    RATINGS_COLLECTION = os.getenv("RATINGS_COLLECTION", "ratings")
    MONGODB_TIMEOUT_MS = int(os.getenv("MONGODB_TIMEOUT_MS", 5000))

    # Security
    JWT_SECRET = os.getenv("JWT_SECRET")
    JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")

    # Ratings
    RATING_MIN_SCORE = 1
    RATING_MAX_SCORE = 5
    RATING_MAX_CAS_RETRIES = int(os.getenv("RATING_MAX_CAS_RETRIES", 10))
    RATE_LIMIT_RATINGS = os.getenv("RATE_LIMIT_RATINGS", "10/minute")

    # Pagination
    DEFAULT_PAGE_SIZE = 10
    MAX_PAGE_SIZE = 100

    # Logging
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")


def get_config() -> Type[Config]:
    """
    Get configuration class based on environment
    """
    env = os.getenv("ENVIRONMENT", "development").lower()

    if env == "production":
        from .production import ProductionConfig

        return ProductionConfig
    elif env in ("test", "testing"):
        from .testing import TestingConfig

        return TestingConfig
    else:
        # Default to development
        from .development import DevelopmentConfig

        return DevelopmentConfig


config = get_config()
