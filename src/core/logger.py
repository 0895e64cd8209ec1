"""
Structured logging for the catalog service.

Every entry carries the service name, environment and the correlation ID of
the request being served. Console output is colored text in development and
JSON lines in production; file output, when enabled, is always JSON.

Usage:
    from src.core.logger import logger

    logger.info("Rating recorded", correlation_id=cid, metadata={"itemId": item_id})
    logger.error("Aggregate update failed", error=exc)
"""

import json
import logging
import os
import sys
from datetime import datetime, timezone
from functools import partialmethod
from typing import Any, Dict, Optional, Union

from src.config import config
from src.utils.correlation_id import get_correlation_id

SERVICE_NAME = config.SERVICE_NAME
ENVIRONMENT = config.ENVIRONMENT

LOG_LEVEL = os.getenv("LOG_LEVEL", config.LOG_LEVEL).upper()
LOG_FORMAT = os.getenv("LOG_FORMAT", "json" if ENVIRONMENT == "production" else "console")
LOG_TO_CONSOLE = os.getenv("LOG_TO_CONSOLE", "true").lower() == "true"
LOG_TO_FILE = os.getenv("LOG_TO_FILE", "false").lower() == "true"
LOG_FILE_PATH = os.getenv("LOG_FILE_PATH", f"logs/{SERVICE_NAME}.log")


def describe_error(error: Union[str, Exception]) -> Dict[str, str]:
    if isinstance(error, Exception):
        return {"type": type(error).__name__, "message": str(error)}
    return {"message": str(error)}


class StructuredLogger:
    """
    Thin wrapper over a stdlib logger that emits one structured entry per call.

    All level methods share the signature of ``log`` minus the level:
    ``correlation_id`` defaults to the one bound to the current request,
    ``error`` is folded into ``metadata["error"]`` and any extra keyword
    becomes a top-level field of the entry.
    """

    def __init__(self, name: str = SERVICE_NAME):
        self.service_name = name
        self._logger = logging.getLogger(name)
        self._logger.handlers.clear()
        self._logger.setLevel(LOG_LEVEL)
        self._logger.propagate = False

        if LOG_TO_CONSOLE:
            formatter = JSONFormatter() if LOG_FORMAT == "json" else ConsoleFormatter()
            self._add_handler(logging.StreamHandler(sys.stdout), formatter)

        if LOG_TO_FILE:
            os.makedirs(os.path.dirname(LOG_FILE_PATH) or ".", exist_ok=True)
            self._add_handler(logging.FileHandler(LOG_FILE_PATH), JSONFormatter())

    def _add_handler(self, handler: logging.Handler, formatter: logging.Formatter) -> None:
        handler.setLevel(LOG_LEVEL)
        handler.setFormatter(formatter)
        self._logger.addHandler(handler)

    def log(
        self,
        level: str,
        message: str,
        correlation_id: Optional[str] = None,
        user_id: Optional[str] = None,
        error: Optional[Union[str, Exception]] = None,
        metadata: Optional[Dict[str, Any]] = None,
        **fields
    ) -> None:
        levelno = logging.getLevelName(level)
        if not self._logger.isEnabledFor(levelno):
            return

        entry: Dict[str, Any] = {
            "service": self.service_name,
            "environment": ENVIRONMENT,
            "correlationId": correlation_id or get_correlation_id(),
        }
        if user_id:
            entry["userId"] = user_id
        if error:
            metadata = {**(metadata or {}), "error": describe_error(error)}
        if metadata:
            entry["metadata"] = metadata
        entry.update(fields)

        self._logger.log(levelno, message, extra={"entry": entry})

    debug = partialmethod(log, "DEBUG")
    info = partialmethod(log, "INFO")
    warning = partialmethod(log, "WARNING")
    error = partialmethod(log, "ERROR")
    critical = partialmethod(log, "CRITICAL")


class JSONFormatter(logging.Formatter):
    """One JSON object per line"""

    def format(self, record):
        payload = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "message": record.getMessage(),
            **getattr(record, "entry", {"service": SERVICE_NAME}),
        }
        return json.dumps(payload, default=str)


class ConsoleFormatter(logging.Formatter):
    """Colored single-line output for development"""

    COLORS = {
        "DEBUG": "\033[36m",
        "INFO": "\033[32m",
        "WARNING": "\033[33m",
        "ERROR": "\033[31m",
        "CRITICAL": "\033[35m",
    }
    RESET = "\033[0m"

    def format(self, record):
        entry = getattr(record, "entry", {})
        color = self.COLORS.get(record.levelname, self.RESET)
        when = datetime.fromtimestamp(record.created).strftime("%Y-%m-%d %H:%M:%S")

        line = f"{color}[{when}] {record.levelname}{self.RESET}"
        if entry.get("correlationId"):
            line += f" [{entry['correlationId']}]"
        line += f" - {record.getMessage()}"
        if entry.get("metadata"):
            line += f" {json.dumps(entry['metadata'], default=str)}"
        return line


logger = StructuredLogger()
