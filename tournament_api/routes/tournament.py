"""Tournament data endpoints: matches, standings, player stats, match insert."""
from typing import Annotated, List

from fastapi import APIRouter, Depends, Request
from slowapi import Limiter

from tournament_api.deps import get_tournament_service, require_writable
from tournament_api.models import ErrorResponse, Match, MatchCreate, MatchCreated, PlayerStat, Standing
from tournament_api.services.tournament_service import TournamentService

_errors = {
    500: {"model": ErrorResponse},
    503: {"model": ErrorResponse},
}


def build_router(limiter: Limiter, write_limit: str) -> APIRouter:
    """Routes bound to the app's limiter; POST /api/match is limited to write_limit."""
    router = APIRouter(prefix="/api", tags=["tournament"])

    @router.get("/group-matches", response_model=List[Match], responses=_errors)
    def list_group_matches(svc: Annotated[TournamentService, Depends(get_tournament_service)]):
        """Group matches, earliest first."""
        return svc.list_matches()

    @router.get("/standings", response_model=List[Standing], responses=_errors)
    def list_standings(svc: Annotated[TournamentService, Depends(get_tournament_service)]):
        """Standings by points, then goal difference."""
        return svc.list_standings()

    @router.get("/player-stats", response_model=List[PlayerStat], responses=_errors)
    def list_player_stats(svc: Annotated[TournamentService, Depends(get_tournament_service)]):
        """Player stats by runs, then wickets."""
        return svc.list_player_stats()

    # The write gate is a route dependency so it runs before the body is validated
    @router.post(
        "/match",
        status_code=201,
        response_model=MatchCreated,
        responses={400: {"model": ErrorResponse}, 423: {"model": ErrorResponse}, 429: {"model": ErrorResponse}, **_errors},
        dependencies=[Depends(require_writable)],
    )
    @limiter.limit(write_limit)
    def create_match(
        request: Request,
        body: MatchCreate,
        svc: Annotated[TournamentService, Depends(get_tournament_service)],
    ):
        """Insert a match. 423 on a secondary or read-only instance."""
        match_id = svc.create_match(body)
        return MatchCreated(MatchID=match_id)

    return router
