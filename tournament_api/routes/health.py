"""Health endpoints used by the traffic router, plus process introspection."""
from typing import Annotated

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from tournament_api.core.health import check_live, check_ready
from tournament_api.core.readiness import ReadinessTracker
from tournament_api.core.settings import Settings
from tournament_api.db import Database
from tournament_api.deps import get_database, get_readiness, get_settings_dep
from tournament_api.models import DebugResponse, HealthResponse, LiveResponse
from tournament_api.utils import ops_state

router = APIRouter(prefix="/api", tags=["health"])


@router.get("/health", response_model=HealthResponse, responses={503: {"model": HealthResponse}})
def health(
    settings: Annotated[Settings, Depends(get_settings_dep)],
    database: Annotated[Database, Depends(get_database)],
    readiness: Annotated[ReadinessTracker, Depends(get_readiness)],
):
    """Readiness: 200 when this instance should receive traffic for its role, else 503."""
    verdict, payload = check_ready(settings, database, readiness)
    return JSONResponse(status_code=verdict.http_code, content=payload)


@router.get("/health/live", response_model=LiveResponse)
def health_live(settings: Annotated[Settings, Depends(get_settings_dep)]):
    """Liveness: process is up."""
    return check_live(settings)


@router.get("/debug", response_model=DebugResponse)
def debug(
    request: Request,
    settings: Annotated[Settings, Depends(get_settings_dep)],
    database: Annotated[Database, Depends(get_database)],
    readiness: Annotated[ReadinessTracker, Depends(get_readiness)],
):
    """Environment and process introspection. Reports presence of credentials, never values."""
    if database.dialect.name == "sqlite":
        db_info = {"driver": "sqlite", "path": str(settings.sqlite_path)}
    else:
        db_info = {
            "driver": database.dialect.name,
            "host": settings.db_host,
            "port": settings.db_port,
            "name": settings.db_name,
            "ssl_mode": settings.db_ssl_mode,
        }
    db_info["pool"] = database.pool_status()
    return DebugResponse(
        service=request.app.title,
        version=request.app.version,
        role=settings.role.value,
        region=settings.region,
        process=ops_state.get_process_status(),
        database=db_info,
        readiness=readiness.snapshot().as_dict(),
        environment=ops_state.get_environment_presence(),
    )
