from .tournament_service import TournamentService

__all__ = ["TournamentService"]
