"""
Lightweight process state for /api/debug: start time, process info, which
database environment variables are present (never their values).
"""
import os
import platform
import sys
import time
from typing import Dict

# In-memory state (reset on restart)
_started_at: float = time.time()

# Presence of these is reported as set/missing, mirroring the startup env check
DATABASE_ENV_VARS = (
    "DB_DRIVER",
    "DB_HOST",
    "DB_PORT",
    "DB_USER",
    "DB_PASSWORD",
    "DB_NAME",
    "DB_SSL_MODE",
    "DB_POOL_SIZE",
    "AZURE_SQL_SERVER",
    "AZURE_SQL_PORT",
    "AZURE_SQL_USERNAME",
    "AZURE_SQL_PASSWORD",
    "AZURE_SQL_DATABASE",
    "ROLE",
    "SERVER_ROLE",
    "REGION",
    "WEBSITE_LOCATION",
)


def mark_started() -> None:
    """Record process start (call from app lifespan)."""
    global _started_at
    _started_at = time.time()


def get_process_status() -> dict:
    now = time.time()
    return {
        "pid": os.getpid(),
        "python_version": platform.python_version(),
        "platform": platform.platform(),
        "executable": sys.executable,
        "started_at": _started_at,
        "uptime_seconds": round(now - _started_at, 3),
    }


def get_environment_presence() -> Dict[str, str]:
    return {name: "set" if os.environ.get(name) else "missing" for name in DATABASE_ENV_VARS}
