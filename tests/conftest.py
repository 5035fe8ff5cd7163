"""
Pytest fixtures: settings, app/client factories on a temporary SQLite file, in-memory repository.
"""
import os
import tempfile
from datetime import date
from typing import List, Optional

import pytest
from fastapi.testclient import TestClient

# Configure the process settings before the app module builds its default instance
_tmp_dir = tempfile.mkdtemp(prefix="tournament-tests-")
os.environ["DB_DRIVER"] = "sqlite"
os.environ["DB_SQLITE_PATH"] = os.path.join(_tmp_dir, "default.db")
os.environ["ROLE"] = "primary"
os.environ["REGION"] = "test-region"
os.environ["RATE_LIMIT_WRITES"] = "1000/minute"

from tournament_api.core.readiness import ReadinessSnapshot, ReadinessTracker, Role  # noqa: E402
from tournament_api.core.settings import Settings  # noqa: E402
from tournament_api.main import create_app  # noqa: E402
from tournament_api.repositories.protocols import TournamentRepository  # noqa: E402


class InMemoryTournamentRepository(TournamentRepository):
    """In-memory tournament store for tests. Applies the same orderings as the SQL queries."""

    def __init__(
        self,
        matches: Optional[List[dict]] = None,
        standings: Optional[List[dict]] = None,
        player_stats: Optional[List[dict]] = None,
    ) -> None:
        self.matches = list(matches or [])
        self.standings = list(standings or [])
        self.player_stats = list(player_stats or [])
        self.inserted: List[dict] = []

    def list_matches(self) -> List[dict]:
        return sorted(self.matches, key=lambda m: str(m["MatchDate"]))

    def list_standings(self) -> List[dict]:
        return sorted(self.standings, key=lambda s: (-s["Points"], -s["GoalDifference"]))

    def list_player_stats(self) -> List[dict]:
        return sorted(self.player_stats, key=lambda p: (-p["Runs"], -p["Wickets"]))

    def insert_match(
        self,
        match_date: str,
        team1: str,
        team2: str,
        venue: Optional[str] = None,
        stage: Optional[str] = None,
    ) -> int:
        match_id = len(self.matches) + 1
        row = {
            "MatchID": match_id,
            "MatchDate": match_date,
            "Team1": team1,
            "Team2": team2,
            "Venue": venue,
            "Result": None,
            "Stage": stage,
        }
        self.matches.append(row)
        self.inserted.append(row)
        return match_id


SEEDED_STANDINGS = [
    {"TeamID": 1, "TeamName": "India", "MatchesPlayed": 2, "Wins": 2, "Losses": 0, "Points": 4, "GoalDifference": 15},
    {"TeamID": 2, "TeamName": "Pakistan", "MatchesPlayed": 2, "Wins": 1, "Losses": 1, "Points": 2, "GoalDifference": 5},
    {"TeamID": 3, "TeamName": "Sri Lanka", "MatchesPlayed": 2, "Wins": 1, "Losses": 1, "Points": 2, "GoalDifference": -3},
    {"TeamID": 4, "TeamName": "Bangladesh", "MatchesPlayed": 2, "Wins": 0, "Losses": 2, "Points": 0, "GoalDifference": -17},
]


@pytest.fixture
def in_memory_repo():
    return InMemoryTournamentRepository(
        matches=[
            {"MatchID": 1, "MatchDate": date(2025, 9, 2), "Team1": "Sri Lanka", "Team2": "Bangladesh",
             "Venue": "Abu Dhabi", "Result": None, "Stage": "Group B"},
            {"MatchID": 2, "MatchDate": date(2025, 9, 1), "Team1": "India", "Team2": "Pakistan",
             "Venue": "Dubai", "Result": None, "Stage": "Group A"},
        ],
        standings=list(reversed(SEEDED_STANDINGS)),
    )


@pytest.fixture
def connected_tracker():
    return ReadinessTracker(Role.PRIMARY, ReadinessSnapshot(connected=True))


@pytest.fixture
def make_settings(tmp_path):
    """Settings factory on a per-test SQLite file."""

    def _make(role: str = "primary", **overrides) -> Settings:
        values = dict(
            db_driver="sqlite",
            db_sqlite_path=str(tmp_path / "tournament.db"),
            role=role,
            region="test-region",
            db_pool_size=2,
        )
        values.update(overrides)
        return Settings(**values)

    return _make


@pytest.fixture
def make_client(make_settings):
    """TestClient factory; each client runs the real lifespan (connect, bootstrap, seed)."""
    clients: List[TestClient] = []

    def _make(role: str = "primary", **overrides) -> TestClient:
        client = TestClient(create_app(make_settings(role, **overrides)))
        client.__enter__()
        clients.append(client)
        return client

    yield _make
    for client in reversed(clients):
        client.__exit__(None, None, None)


@pytest.fixture
def client(make_client):
    """Primary instance on a freshly seeded SQLite database."""
    return make_client()
