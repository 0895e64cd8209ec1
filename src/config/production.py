# Production Configuration for Catalog Service
import os

from . import Config


class ProductionConfig(Config):
    """Production configuration settings"""

    ENVIRONMENT = "production"
    DEBUG = False

    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

    # No fallback secret: validate_config stops startup when JWT_SECRET is unset
    JWT_SECRET = os.getenv("JWT_SECRET")
