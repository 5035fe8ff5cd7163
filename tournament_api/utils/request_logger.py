"""
Structured request logging: path, method, client_ip, status_code, latency_ms, request_id, role, region.
"""
import json
import logging
import time
from pathlib import Path
from typing import Optional

from tournament_api.core.settings import Settings

REQUEST_LOGGER_NAME = "tournament_api.requests"


def _log_path(settings: Settings) -> Optional[Path]:
    if not settings.log_file.strip():
        return None
    p = Path(settings.log_file)
    if not p.is_absolute():
        p = settings.base_dir / p
    return p


def setup_request_logger(settings: Settings) -> logging.Logger:
    """Configure and return a logger for request logs (file when LOG_FILE is set, else stderr)."""
    logger = logging.getLogger(REQUEST_LOGGER_NAME)
    logger.setLevel(logging.INFO)
    logger.propagate = False
    if not logger.handlers:
        log_path = _log_path(settings)
        if log_path is not None:
            log_path.parent.mkdir(parents=True, exist_ok=True)
            handler = logging.FileHandler(log_path, encoding="utf-8")
        else:
            handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter("%(message)s"))
        logger.addHandler(handler)
    return logger


def log_request(request, status_code: int, latency_ms: float) -> None:
    """Emit one structured JSON log line."""
    state = getattr(request, "state", None)
    request_id = getattr(state, "request_id", None) if state else None
    settings = getattr(request.app.state, "settings", None)
    payload = {
        "path": request.url.path,
        "method": request.method,
        "client_ip": request.client.host if request.client else "",
        "status_code": status_code,
        "latency_ms": round(latency_ms, 2),
        "timestamp": time.time(),
    }
    if request_id:
        payload["request_id"] = request_id
    if settings is not None:
        payload["role"] = settings.role.value
        payload["region"] = settings.region
    logging.getLogger(REQUEST_LOGGER_NAME).info(json.dumps(payload))
