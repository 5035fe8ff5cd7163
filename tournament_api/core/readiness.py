"""
Readiness classification for primary/secondary failover.

A traffic router polls GET /api/health and only sends requests to instances
answering 200. A primary must hold a writable connection; a secondary may
serve from a read-only replica. An instance that is not connected is never
ready, whatever its role.
"""
import threading
import time
from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional


class Role(str, Enum):
    PRIMARY = "primary"
    SECONDARY = "secondary"


class HealthStatus(str, Enum):
    HEALTHY = "healthy"
    DEGRADED = "degraded"


@dataclass(frozen=True)
class Verdict:
    status: HealthStatus
    http_code: int

    @property
    def healthy(self) -> bool:
        return self.status is HealthStatus.HEALTHY


HEALTHY = Verdict(HealthStatus.HEALTHY, 200)
DEGRADED = Verdict(HealthStatus.DEGRADED, 503)


def classify(role: Role, connected: bool, read_only: bool) -> Verdict:
    """Map (role, connected, read_only) to a health verdict.

    - not connected: degraded/503 for every role
    - primary: healthy only when the database accepts writes
    - secondary: healthy whenever connected, read-only included
    """
    if not connected:
        return DEGRADED
    if Role(role) is Role.PRIMARY and read_only:
        return DEGRADED
    return HEALTHY


@dataclass(frozen=True)
class ReadinessSnapshot:
    """Cached view of database state. Replaced as a whole, never mutated."""

    connected: bool = False
    read_only: bool = False
    last_probe_at: Optional[float] = None
    last_error: Optional[str] = None

    def as_dict(self) -> dict:
        return {
            "connected": self.connected,
            "read_only": self.read_only,
            "last_probe_at": self.last_probe_at,
            "last_error": self.last_error,
        }


class ReadinessTracker:
    """Holds the role and the current snapshot; the only writer of connectivity state.

    Readers take the snapshot reference without locking. Writers build a new
    snapshot under the lock so concurrent probes cannot interleave fields.
    """

    def __init__(self, role: Role, snapshot: Optional[ReadinessSnapshot] = None) -> None:
        self.role = Role(role)
        self._snapshot = snapshot or ReadinessSnapshot()
        self._lock = threading.Lock()

    def snapshot(self) -> ReadinessSnapshot:
        return self._snapshot

    def record_probe_result(
        self,
        ok: bool,
        read_only: Optional[bool] = None,
        error: Optional[str] = None,
    ) -> ReadinessSnapshot:
        """Apply one probe outcome.

        ok=True marks the database connected and clears the last error;
        read_only, when given, refreshes the cached flag. ok=False marks it
        disconnected and keeps the previous read_only value.
        """
        with self._lock:
            current = self._snapshot
            if ok:
                new = replace(
                    current,
                    connected=True,
                    read_only=current.read_only if read_only is None else bool(read_only),
                    last_probe_at=time.time(),
                    last_error=None,
                )
            else:
                new = replace(
                    current,
                    connected=False,
                    last_probe_at=time.time(),
                    last_error=error,
                )
            self._snapshot = new
            return new

    def verdict(self) -> Verdict:
        snap = self._snapshot
        return classify(self.role, snap.connected, snap.read_only)

    @property
    def writes_allowed(self) -> bool:
        """Conservative write policy: primary role and not known to be read-only."""
        return self.role is Role.PRIMARY and not self._snapshot.read_only
