"""
Configuration validation, run once at startup before MongoDB is contacted.

Fails fast with SystemExit when a setting the service cannot run without is
missing or malformed. Messages go through print() on stderr so they show up
even when logging itself is misconfigured.
"""

import sys
from datetime import datetime
from typing import Any, Dict, List, Type

from src.config import Config, config

VALID_JWT_ALGORITHMS = ("HS256", "HS384", "HS512")
VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

# setting -> (check, message shown when the check fails)
VALIDATION_RULES: Dict[str, tuple] = {
    "JWT_SECRET": (
        lambda v: isinstance(v, str) and len(v) >= 32,
        "JWT_SECRET must be set and at least 32 characters long",
    ),
    "JWT_ALGORITHM": (
        lambda v: v in VALID_JWT_ALGORITHMS,
        f"JWT_ALGORITHM must be one of: {', '.join(VALID_JWT_ALGORITHMS)}",
    ),
    "MONGODB_URI": (
        lambda v: isinstance(v, str) and v.startswith(("mongodb://", "mongodb+srv://")),
        "MONGODB_URI must be a mongodb:// or mongodb+srv:// URI",
    ),
    "PORT": (
        lambda v: isinstance(v, int) and 0 < v <= 65535,
        "PORT must be a valid port number (1-65535)",
    ),
    "LOG_LEVEL": (
        lambda v: str(v).upper() in VALID_LOG_LEVELS,
        f"LOG_LEVEL must be one of: {', '.join(VALID_LOG_LEVELS)}",
    ),
    "RATING_MAX_CAS_RETRIES": (
        lambda v: isinstance(v, int) and v > 0,
        "RATING_MAX_CAS_RETRIES must be a positive integer",
    ),
}


def find_config_errors(settings: Type[Config] = config) -> List[str]:
    errors = []
    for key, (check, message) in VALIDATION_RULES.items():
        value: Any = getattr(settings, key, None)
        if not check(value):
            errors.append(message)
    return errors


def validate_config(settings: Type[Config] = config) -> None:
    """
    Raises:
        SystemExit: If any setting fails validation
    """
    errors = find_config_errors(settings)
    if not errors:
        return

    timestamp = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
    print(f"[{timestamp}] ERROR - [CONFIG] Configuration validation failed:", file=sys.stderr)
    for error in errors:
        print(f"[{timestamp}] ERROR - {error}", file=sys.stderr)
    sys.exit(1)
