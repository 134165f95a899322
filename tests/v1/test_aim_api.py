# tests/v1/test_aim_api.py
"""Tests for aim mode submissions and device gating."""

import pytest
from fastapi import status
from fastapi.testclient import TestClient

DESKTOP_UA = "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 Chrome/126.0 Safari/537.36"
PHONE_UA = "Mozilla/5.0 (Linux; Android 14; Pixel 8) AppleWebKit/537.36 Mobile Safari/537.36"


def _run(hits: list[float] | None = None, misses: int = 0, name: str = "alice") -> dict:
    return {"name": name, "hits": hits if hits is not None else [200.0] * 20, "misses": misses}


def test_aim_submit_scores_run(client: TestClient) -> None:
    r = client.post("/api/v1/aim/submit", json=_run(misses=2), headers={"User-Agent": DESKTOP_UA})

    assert r.status_code == status.HTTP_200_OK
    assert r.json() == {"best_value": 500, "avg_ms": 200, "misses": 2, "record_broken": True}


@pytest.mark.parametrize(
    "headers",
    [{"User-Agent": PHONE_UA}, {"User-Agent": DESKTOP_UA, "Sec-CH-UA-Mobile": "?1"}],
)
def test_aim_refuses_touch_devices(client: TestClient, headers: dict[str, str]) -> None:
    r = client.post("/api/v1/aim/submit", json=_run(), headers=headers)

    assert r.status_code == status.HTTP_403_FORBIDDEN
    assert r.json()["detail"] == {"error": "unsupported_client", "message": "mobile not allowed"}


def test_aim_rejects_too_fast_average(client: TestClient) -> None:
    r = client.post("/api/v1/aim/submit", json=_run(hits=[100.0] * 20))

    assert r.status_code == status.HTTP_400_BAD_REQUEST
    assert r.json()["detail"]["message"] == "average too low"


def test_aim_rejects_wrong_hit_count(client: TestClient) -> None:
    r = client.post("/api/v1/aim/submit", json=_run(hits=[200.0] * 5))
    assert r.status_code == status.HTTP_400_BAD_REQUEST


def test_aim_leaderboard_rows_carry_breakdown(client: TestClient) -> None:
    client.post("/api/v1/aim/submit", json=_run(misses=1, name="alice"))
    client.post("/api/v1/aim/submit", json=_run(hits=[300.0] * 20, name="bob"))

    body = client.get("/api/v1/aim/leaderboard", params={"name": "bob"}).json()

    assert body["mode"] == "aim"
    assert body["rows"][0] == {"rank": 1, "name": "bob", "best_value": 300, "avg_ms": 300, "misses": 0}
    assert body["rows"][1] == {"rank": 2, "name": "alice", "best_value": 350, "avg_ms": 200, "misses": 1}
    assert body["me"]["rank"] == 1
    assert len(client.get("/api/v1/aim/leaderboard/all").json()["rows"]) == 2
