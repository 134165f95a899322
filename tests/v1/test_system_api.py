# tests/v1/test_system_api.py
"""Tests for the public configuration endpoint."""

from fastapi import status
from fastapi.testclient import TestClient


def test_system_config(client: TestClient) -> None:
    r = client.get("/api/v1/system/config")
    assert r.status_code == status.HTTP_200_OK
    data = r.json()
    assert set(data) >= {"app", "challenge", "modes", "aim", "leaderboard"}
    assert data["challenge"] == {"base_delay_ms": 1_500, "jitter_ms": 2_500, "ttl_ms": 30_000}
    assert data["modes"]["simple"] == {"direction": "asc", "min_value": 80, "max_value": 5_000}
    assert data["modes"]["pro"]["min_value"] == 60
    assert data["modes"]["aim"]["max_value"] == 2_000 + 60 * 150


def test_system_config_hides_secrets(client: TestClient) -> None:
    text = client.get("/api/v1/system/config").text
    assert "test-secret-key" not in text
    assert "sqlite" not in text
