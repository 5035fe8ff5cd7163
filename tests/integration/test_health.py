"""Integration tests: health, debug and frontend endpoints with the real lifespan on SQLite."""
from unittest.mock import patch

from tournament_api.db import Database


def test_health_primary_ok(client):
    r = client.get("/api/health")
    assert r.status_code == 200
    data = r.json()
    assert data["status"] == "healthy"
    assert data["check"] == "ready"
    assert data["role"] == "primary"
    assert data["region"] == "test-region"
    assert data["database"] == "connected"
    assert data["read_only"] is False
    assert data["writable"] is True


def test_health_live(client):
    r = client.get("/api/health/live")
    assert r.status_code == 200
    data = r.json()
    assert data.get("status") == "ok" and data.get("check") == "live"


def test_health_secondary_ok_on_existing_database(make_client):
    make_client("primary")  # bootstraps the shared SQLite file
    secondary = make_client("secondary")
    r = secondary.get("/api/health")
    assert r.status_code == 200
    assert r.json()["role"] == "secondary"
    assert r.json()["writable"] is False


def test_health_primary_read_only_degraded(client):
    with patch.object(Database, "probe", return_value=True):
        r = client.get("/api/health")
    assert r.status_code == 503
    data = r.json()
    assert data["status"] == "degraded"
    assert data["read_only"] is True


def test_probe_failure_degrades_and_blocks_reads(client):
    with patch.object(Database, "probe", side_effect=OSError("Lost connection")):
        r = client.get("/api/health")
    assert r.status_code == 503
    assert r.json()["database"] == "disconnected"
    assert r.json()["error"] == "Lost connection"

    r = client.get("/api/standings")
    assert r.status_code == 503
    assert r.json()["code"] == "database_unavailable"

    # next successful probe restores service
    assert client.get("/api/health").status_code == 200
    assert client.get("/api/standings").status_code == 200


def test_startup_connection_failure_serves_degraded(make_client, tmp_path):
    c = make_client(db_sqlite_path=str(tmp_path))
    r = c.get("/api/health")
    assert r.status_code == 503
    data = r.json()
    assert data["database"] == "disconnected"
    assert "error" in data
    assert c.get("/api/group-matches").status_code == 503
    assert c.get("/api/health/live").status_code == 200


def test_debug_reports_presence_not_values(client, monkeypatch):
    monkeypatch.setenv("DB_PASSWORD", "s3cret")
    r = client.get("/api/debug")
    assert r.status_code == 200
    data = r.json()
    assert data["role"] == "primary"
    assert data["region"] == "test-region"
    assert data["database"]["driver"] == "sqlite"
    assert data["database"]["pool"]["established"] is True
    assert data["readiness"]["connected"] is True
    assert data["environment"]["DB_PASSWORD"] == "set"
    assert data["process"]["pid"] > 0
    assert "s3cret" not in r.text


def test_root_serves_html(client):
    r = client.get("/")
    assert r.status_code == 200
    assert "text/html" in r.headers.get("content-type", "")


def test_spa_fallback_and_static_asset(client):
    r = client.get("/standings/group-a")
    assert r.status_code == 200
    assert "text/html" in r.headers.get("content-type", "")
    r = client.get("/script.js")
    assert r.status_code == 200
    assert "/health" in r.text


def test_unknown_api_path_is_json_404(client):
    r = client.get("/api/nope")
    assert r.status_code == 404
    assert r.json()["code"] == "404"


def test_request_id_echoed(client):
    r = client.get("/api/health/live", headers={"X-Request-ID": "abc-123"})
    assert r.headers["x-request-id"] == "abc-123"
    r = client.get("/api/health/live")
    assert r.headers.get("x-request-id")


def test_server_identity_headers(client):
    r = client.get("/api/health/live")
    assert r.headers["x-region"] == "test-region"
    assert r.headers["x-role"] == "primary"
    assert r.headers["x-content-type-options"] == "nosniff"
