"""FastAPI dependency injection: settings, database handle, readiness, repositories, services.

Everything comes from app.state, populated by the application lifespan.
"""
from typing import Annotated

from fastapi import Depends, Request

from tournament_api.core.readiness import ReadinessTracker
from tournament_api.core.settings import Settings
from tournament_api.db import Database
from tournament_api.repositories import SqlTournamentRepository
from tournament_api.repositories.protocols import TournamentRepository
from tournament_api.services.tournament_service import TournamentService, ensure_writable


def get_settings_dep(request: Request) -> Settings:
    return request.app.state.settings


def get_database(request: Request) -> Database:
    return request.app.state.database


def get_readiness(request: Request) -> ReadinessTracker:
    return request.app.state.readiness


def require_writable(readiness: Annotated[ReadinessTracker, Depends(get_readiness)]) -> None:
    """Route-level write gate: 423 before the request body is validated."""
    ensure_writable(readiness)


def get_tournament_repository(
    database: Annotated[Database, Depends(get_database)],
) -> TournamentRepository:
    return SqlTournamentRepository(database)


def get_tournament_service(
    repo: Annotated[TournamentRepository, Depends(get_tournament_repository)],
    readiness: Annotated[ReadinessTracker, Depends(get_readiness)],
) -> TournamentService:
    return TournamentService(repo, readiness)
