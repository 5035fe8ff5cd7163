"""SQL implementation of TournamentRepository over the pooled Database handle."""
from typing import List, Optional

from tournament_api.db import Database

SELECT_MATCHES = (
    "SELECT MatchID, MatchDate, Team1, Team2, Venue, Result, Stage "
    "FROM GroupMatches ORDER BY MatchDate ASC"
)
SELECT_STANDINGS = (
    "SELECT TeamID, TeamName, MatchesPlayed, Wins, Losses, Points, GoalDifference "
    "FROM Standings ORDER BY Points DESC, GoalDifference DESC"
)
SELECT_PLAYER_STATS = (
    "SELECT PlayerID, PlayerName, Team, Matches, Runs, Wickets, Catches "
    "FROM PlayerStats ORDER BY Runs DESC, Wickets DESC"
)
INSERT_MATCH = (
    "INSERT INTO GroupMatches (MatchDate, Team1, Team2, Venue, Stage) "
    "VALUES (%s, %s, %s, %s, %s)"
)


class SqlTournamentRepository:
    """Rows are returned as plain dicts keyed by column name."""

    def __init__(self, database: Database) -> None:
        self._db = database

    def list_matches(self) -> List[dict]:
        return self._db.fetch_all(SELECT_MATCHES)

    def list_standings(self) -> List[dict]:
        return self._db.fetch_all(SELECT_STANDINGS)

    def list_player_stats(self) -> List[dict]:
        return self._db.fetch_all(SELECT_PLAYER_STATS)

    def insert_match(
        self,
        match_date: str,
        team1: str,
        team2: str,
        venue: Optional[str] = None,
        stage: Optional[str] = None,
    ) -> int:
        return self._db.insert(INSERT_MATCH, (match_date, team1, team2, venue, stage))
