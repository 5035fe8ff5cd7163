"""
Data access facade: fixed queries over TournamentRepository.
Checks the cached readiness state before touching the database and turns
driver exceptions into QueryFailure.
"""
import logging
from typing import Callable, List, TypeVar

from tournament_api.core.errors import DatabaseUnavailable, QueryFailure, ValidationFailure, WriteRefused
from tournament_api.core.readiness import ReadinessTracker, Role
from tournament_api.models import MatchCreate
from tournament_api.repositories.protocols import TournamentRepository

logger = logging.getLogger(__name__)

T = TypeVar("T")

REQUIRED_MATCH_FIELDS = ("MatchDate", "Team1", "Team2")


def _clean(value):
    if isinstance(value, str):
        value = value.strip()
        return value or None
    return value


def ensure_writable(readiness: ReadinessTracker) -> None:
    """Raise WriteRefused on a secondary or a read-only database. Never touches the database."""
    if readiness.role is Role.SECONDARY:
        raise WriteRefused("Writes are disabled on a secondary instance")
    if readiness.snapshot().read_only:
        raise WriteRefused("Database is read-only; writes are disabled")


class TournamentService:
    """List matches, standings and player stats; insert matches on a writable primary."""

    def __init__(self, repo: TournamentRepository, readiness: ReadinessTracker) -> None:
        self._repo = repo
        self._readiness = readiness

    def _require_connected(self) -> None:
        if not self._readiness.snapshot().connected:
            raise DatabaseUnavailable()

    def _run(self, what: str, fn: Callable[[], T]) -> T:
        self._require_connected()
        try:
            return fn()
        except DatabaseUnavailable:
            raise
        except Exception as e:
            logger.exception("Error %s", what)
            raise QueryFailure(f"Failed {what}: {e}")

    def list_matches(self) -> List[dict]:
        return self._run("fetching matches", self._repo.list_matches)

    def list_standings(self) -> List[dict]:
        return self._run("fetching standings", self._repo.list_standings)

    def list_player_stats(self) -> List[dict]:
        return self._run("fetching player stats", self._repo.list_player_stats)

    def create_match(self, body: MatchCreate) -> int:
        """Insert a match. Refused on a secondary or read-only database before any validation."""
        ensure_writable(self._readiness)

        values = {name: _clean(getattr(body, name)) for name in ("MatchDate", "Team1", "Team2", "Venue", "Stage")}
        missing = [name for name in REQUIRED_MATCH_FIELDS if values[name] is None]
        if missing:
            raise ValidationFailure(
                "Missing required fields: " + ", ".join(missing),
                details=missing,
            )

        match_id = self._run(
            "creating match",
            lambda: self._repo.insert_match(
                values["MatchDate"].isoformat(),
                values["Team1"],
                values["Team2"],
                venue=values["Venue"],
                stage=values["Stage"],
            ),
        )
        logger.info("Created match %s: %s v %s", match_id, values["Team1"], values["Team2"])
        return match_id
