# Testing Configuration for Catalog Service
from . import Config


class TestingConfig(Config):
    """Settings used by the test suite"""

    ENVIRONMENT = "test"
    DEBUG = True

    DATABASE_NAME = "catalog_test_db"
    JWT_SECRET = "catalog-test-secret-key-at-least-32-bytes"
    JWT_ALGORITHM = "HS256"

    RATING_MAX_CAS_RETRIES = 10
    RATE_LIMIT_RATINGS = "1000/minute"
