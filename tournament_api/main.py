"""
FastAPI application and API wiring.
Layered: API -> service -> repository. The pool and readiness state live on
app.state and reach handlers through tournament_api.deps.
"""
import logging
import time
import uuid
from contextlib import asynccontextmanager
from typing import List, Optional, Tuple

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from starlette.exceptions import HTTPException as StarletteHTTPException

from tournament_api import __version__
from tournament_api.core.errors import ServiceError
from tournament_api.core.rate_limit import create_limiter
from tournament_api.core.readiness import ReadinessTracker
from tournament_api.core.settings import Settings, get_settings
from tournament_api.db import Database, init_db
from tournament_api.models import ErrorDetail, ErrorResponse
from tournament_api.routes import frontend, health, tournament
from tournament_api.utils import ops_state
from tournament_api.utils.request_logger import log_request, setup_request_logger

logger = logging.getLogger(__name__)


def connect_database(settings: Settings) -> Tuple[Database, ReadinessTracker]:
    """Open the pool, detect read-only, bootstrap schema on a writable primary.

    Never raises: a connection failure leaves the pool unset and the tracker
    disconnected so the process keeps serving degraded.
    """
    database = Database(settings)
    readiness = ReadinessTracker(settings.role)
    logger.info(
        "Connecting to %s database (role=%s, region=%s)",
        database.dialect.name,
        settings.role.value,
        settings.region,
    )
    if settings.is_primary:
        try:
            database.ensure_database_exists()
        except Exception as e:
            logger.warning("Could not ensure database exists: %s", e)
    try:
        database.connect()
        read_only = database.probe()
    except Exception as e:
        logger.error("Database connection failed: %s. Serving with connectivity=false.", e)
        database.close()
        readiness.record_probe_result(False, error=str(e))
        return database, readiness
    readiness.record_probe_result(True, read_only=read_only)

    if settings.is_primary and not read_only:
        try:
            init_db(database)
            logger.info("Database initialized")
        except Exception:
            logger.exception("Database initialization error")
    else:
        logger.info(
            "Skipping schema bootstrap (role=%s, read_only=%s)",
            settings.role.value,
            read_only,
        )
    return database, readiness


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup: connect and bootstrap the database, publish state. Shutdown: close the pool."""
    settings: Settings = app.state.settings
    ops_state.mark_started()
    database, readiness = connect_database(settings)
    app.state.database = database
    app.state.readiness = readiness
    logger.info("Server ready (role=%s, region=%s)", settings.role.value, settings.region)
    yield
    database.close()


def _normalize_detail(detail: object) -> List[str]:
    """Convert FastAPI/HTTPException detail to list of strings for ErrorResponse."""
    if isinstance(detail, str):
        return [detail]
    if isinstance(detail, list):
        out = []
        for d in detail:
            if isinstance(d, str):
                out.append(d)
            elif isinstance(d, dict):
                loc = ".".join(str(p) for p in d.get("loc", ()) if p != "body")
                msg = d.get("msg", d.get("message", str(d)))
                out.append(f"{loc}: {msg}" if loc else msg)
            else:
                out.append(str(d))
        return out if out else ["Error"]
    return [str(detail)]


def _error_response(
    request: Request,
    status_code: int,
    code: str,
    message: str,
    details: Optional[List[str]] = None,
) -> JSONResponse:
    """Structured ErrorResponse body. Includes request_id when available."""
    body = ErrorResponse(
        code=code,
        message=message,
        details=[ErrorDetail(code=code, message=d) for d in (details or [])] or None,
    )
    payload = body.model_dump()
    request_id = getattr(request.state, "request_id", None)
    if request_id:
        payload["request_id"] = request_id
    response = JSONResponse(status_code=status_code, content=payload)
    if request_id:
        response.headers["X-Request-ID"] = request_id
    return response


def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    details = _normalize_detail(exc.detail)
    return _error_response(request, exc.status_code, str(exc.status_code), details[0] if details else "Error", details)


def service_error_handler(request: Request, exc: ServiceError) -> JSONResponse:
    return _error_response(request, exc.status_code, exc.code, exc.message, exc.details)


def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed request bodies are client errors: 400, like a missing field."""
    details = _normalize_detail(exc.errors())
    return _error_response(request, 400, "validation_failed", "Invalid request body", details)


def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    return _error_response(request, 429, "rate_limited", f"Rate limit exceeded: {exc.detail}")


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Application factory. Uses the process settings unless an explicit instance is given."""
    settings = settings or get_settings()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s - %(message)s",
    )
    setup_request_logger(settings)

    app = FastAPI(
        title="Tournament Board API",
        description="Matches, standings and player stats with primary/secondary readiness",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = settings
    limiter = create_limiter()
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(ServiceError, service_error_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def request_id_middleware(request: Request, call_next):
        """Set request_id on request.state and add X-Request-ID to response."""
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        request.state.request_id = request_id
        response = await call_next(request)
        response.headers["X-Request-ID"] = request_id
        return response

    @app.middleware("http")
    async def server_identity_middleware(request: Request, call_next):
        """Echo which deployment answered, for the frontend and the traffic router."""
        response = await call_next(request)
        response.headers["X-Region"] = settings.region
        response.headers["X-Role"] = settings.role.value
        return response

    @app.middleware("http")
    async def security_headers_middleware(request: Request, call_next):
        response = await call_next(request)
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        return response

    @app.middleware("http")
    async def structured_logging_middleware(request: Request, call_next):
        start = time.perf_counter()
        response = await call_next(request)
        latency_ms = (time.perf_counter() - start) * 1000
        log_request(request, response.status_code, latency_ms)
        return response

    app.include_router(health.router)
    app.include_router(tournament.build_router(limiter, settings.rate_limit_writes))
    # Catch-all GET; must stay last
    app.include_router(frontend.router)
    return app


app = create_app()
