"""Health checks: liveness (process up) and readiness (database reachable and fit for this role)."""
import logging
from typing import Any, Dict, Tuple

from tournament_api.core.readiness import ReadinessTracker, Verdict
from tournament_api.core.settings import Settings
from tournament_api.db import Database

logger = logging.getLogger(__name__)


def check_live(settings: Settings) -> Dict[str, Any]:
    """Liveness: app process is running."""
    return {"status": "ok", "check": "live", "role": settings.role.value, "region": settings.region}


def probe_database(database: Database, readiness: ReadinessTracker) -> None:
    """Probe the database when a pool exists and record the outcome.

    Without a pool nothing is probed and the cached state stays disconnected.
    """
    if not database.is_established:
        return
    try:
        read_only = database.probe()
    except Exception as e:
        logger.warning("Database probe failed: %s", e)
        readiness.record_probe_result(False, error=str(e))
        return
    readiness.record_probe_result(True, read_only=read_only)


def check_ready(settings: Settings, database: Database, readiness: ReadinessTracker) -> Tuple[Verdict, Dict[str, Any]]:
    """Readiness: probe, then classify role + connectivity + read-only into a verdict and payload."""
    probe_database(database, readiness)
    snap = readiness.snapshot()
    verdict = readiness.verdict()
    payload: Dict[str, Any] = {
        "status": verdict.status.value,
        "check": "ready",
        "role": readiness.role.value,
        "region": settings.region,
        "database": "connected" if snap.connected else "disconnected",
        "read_only": snap.read_only,
        "writable": snap.connected and readiness.writes_allowed,
    }
    if snap.last_error:
        payload["error"] = snap.last_error
    return verdict, payload
