"""Repository protocols (interfaces) for testability and clear boundaries."""
from typing import List, Optional, Protocol


class TournamentRepository(Protocol):
    """Tournament data: fixed read queries plus match insert."""

    def list_matches(self) -> List[dict]:
        """All group matches ordered by MatchDate ascending."""
        ...

    def list_standings(self) -> List[dict]:
        """All standings ordered by Points desc, then GoalDifference desc."""
        ...

    def list_player_stats(self) -> List[dict]:
        """All player stats ordered by Runs desc, then Wickets desc."""
        ...

    def insert_match(
        self,
        match_date: str,
        team1: str,
        team2: str,
        venue: Optional[str] = None,
        stage: Optional[str] = None,
    ) -> int:
        """Insert a match; return the generated MatchID."""
        ...
