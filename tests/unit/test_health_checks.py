"""Unit tests for readiness checks with a mocked database handle."""
from unittest.mock import MagicMock

from tournament_api.core.health import check_live, check_ready
from tournament_api.core.readiness import ReadinessSnapshot, ReadinessTracker, Role
from tournament_api.db import Database


def _database(established: bool = True, read_only: bool = False, error: Exception = None):
    db = MagicMock(spec=Database)
    db.is_established = established
    if error is not None:
        db.probe.side_effect = error
    else:
        db.probe.return_value = read_only
    return db


def test_check_live(make_settings):
    data = check_live(make_settings(role="secondary"))
    assert data == {"status": "ok", "check": "live", "role": "secondary", "region": "test-region"}


def test_primary_writable_is_healthy(make_settings):
    tracker = ReadinessTracker(Role.PRIMARY)
    verdict, payload = check_ready(make_settings(), _database(), tracker)
    assert verdict.http_code == 200
    assert payload["status"] == "healthy"
    assert payload["database"] == "connected"
    assert payload["writable"] is True
    assert "error" not in payload


def test_primary_read_only_is_degraded(make_settings):
    tracker = ReadinessTracker(Role.PRIMARY)
    verdict, payload = check_ready(make_settings(), _database(read_only=True), tracker)
    assert verdict.http_code == 503
    assert payload["status"] == "degraded"
    assert payload["read_only"] is True
    assert payload["writable"] is False


def test_secondary_read_only_is_healthy(make_settings):
    tracker = ReadinessTracker(Role.SECONDARY)
    verdict, payload = check_ready(make_settings(role="secondary"), _database(read_only=True), tracker)
    assert verdict.http_code == 200
    assert payload["role"] == "secondary"
    assert payload["writable"] is False


def test_probe_failure_flips_connectivity(make_settings):
    tracker = ReadinessTracker(Role.SECONDARY, ReadinessSnapshot(connected=True, read_only=True))
    verdict, payload = check_ready(
        make_settings(role="secondary"), _database(error=OSError("Connection refused")), tracker
    )
    assert verdict.http_code == 503
    assert payload["database"] == "disconnected"
    assert payload["error"] == "Connection refused"
    assert tracker.snapshot().connected is False


def test_no_pool_no_probe(make_settings):
    db = _database(established=False)
    tracker = ReadinessTracker(Role.PRIMARY)
    verdict, _ = check_ready(make_settings(), db, tracker)
    assert verdict.http_code == 503
    db.probe.assert_not_called()


def test_probe_recovers_after_failure(make_settings):
    tracker = ReadinessTracker(Role.PRIMARY)
    tracker.record_probe_result(False, error="timeout")
    verdict, payload = check_ready(make_settings(), _database(), tracker)
    assert verdict.http_code == 200
    assert "error" not in payload
