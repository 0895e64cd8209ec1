# Development Configuration for Catalog Service
import os

from . import Config


class DevelopmentConfig(Config):
    """Development configuration settings"""

    ENVIRONMENT = "development"
    DEBUG = True

    # Database Configuration - MongoDB
    # Construct MongoDB URI from environment variables
    _mongo_host = os.getenv("MONGODB_HOST", "localhost")
    _mongo_port = os.getenv("MONGODB_PORT", "27017")
    _mongo_username = os.getenv("MONGO_INITDB_ROOT_USERNAME")
    _mongo_password = os.getenv("MONGO_INITDB_ROOT_PASSWORD")
    _mongo_auth_source = os.getenv("MONGODB_AUTH_SOURCE", "admin")

    if os.getenv("MONGODB_URI"):
        MONGODB_URI = os.getenv("MONGODB_URI")
    elif _mongo_username and _mongo_password:
        MONGODB_URI = f"mongodb://{_mongo_username}:{_mongo_password}@{_mongo_host}:{_mongo_port}/?authSource={_mongo_auth_source}"
    else:
        MONGODB_URI = f"mongodb://{_mongo_host}:{_mongo_port}"

    # Security
    JWT_SECRET = os.getenv("JWT_SECRET", "catalog-dev-secret-change-me-0123456789")

    # Logging
    LOG_LEVEL = "DEBUG"

    # Rate Limiting
    RATE_LIMIT_RATINGS = os.getenv("RATE_LIMIT_RATINGS", "100/minute")
