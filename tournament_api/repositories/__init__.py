"""Repository layer: data access abstractions and implementations."""

from tournament_api.repositories.protocols import TournamentRepository
from tournament_api.repositories.tournament_repository import SqlTournamentRepository

__all__ = [
    "TournamentRepository",
    "SqlTournamentRepository",
]
