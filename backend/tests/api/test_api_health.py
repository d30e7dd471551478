"""HTTP tests for the health endpoint."""

from __future__ import annotations

from tests.helpers.http import build_url


def test_health_reports_database(client):
    resp = client.get(build_url("/health"))
    assert resp.status_code == 200
    assert resp.get_json()["status"] == "ok"
    assert resp.get_json()["db"] == "ok"
