"""
Operational endpoints for load balancers, orchestrators and monitoring.

/health        process is up
/health/ready  MongoDB answers a ping, so ratings can be accepted
/health/live   event loop is serving requests
/metrics       process-level resource usage (psutil)
"""

import os
import platform
import time
from datetime import datetime, timezone

import psutil
from fastapi import Request
from fastapi.responses import JSONResponse
from pymongo.errors import PyMongoError

from src.config import config
from src.core.errors import StorageUnavailableError
from src.core.logger import logger
from src.db.mongodb import get_db

STARTED_AT = time.monotonic()


def _report(status: str, **fields) -> dict:
    return {
        "status": status,
        "service": config.SERVICE_NAME,
        "version": config.SERVICE_VERSION,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        **fields,
    }


def _uptime() -> float:
    return round(time.monotonic() - STARTED_AT, 3)


def health(request: Request):
    return _report("healthy")


async def readiness(request: Request):
    try:
        db = await get_db()
        await db.command("ping")
    except (PyMongoError, StorageUnavailableError) as e:
        logger.error("Readiness check failed", error=e, metadata={"event": "readiness_failed"})
        return JSONResponse(
            status_code=503,
            content=_report("not ready", checks={"database": "unavailable"}),
        )

    return _report("ready", checks={"database": "connected"})


def liveness(request: Request):
    return _report("alive", uptime=_uptime())


def metrics(request: Request):
    process = psutil.Process()
    with process.oneshot():
        memory = process.memory_info()
        usage = {
            "uptime": _uptime(),
            "memory": {"rss": memory.rss, "vms": memory.vms},
            "cpu_percent": process.cpu_percent(),
            "threads": process.num_threads(),
            "pid": os.getpid(),
            "python_version": platform.python_version(),
        }
    return _report("ok", metrics=usage)
