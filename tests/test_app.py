"""Tests for ui/app.py: the FastAPI surface over the store."""

import json

import pytest
from fastapi.testclient import TestClient

from ui.app import app


@pytest.fixture
def client(workspace):
    with TestClient(app) as c:
        yield c


def test_healthz(client):
    assert client.get("/healthz").json() == {"ok": "true"}


def test_index_page(client):
    resp = client.get("/")
    assert resp.status_code == 200
    assert "Sam" in resp.text
    assert "Morning Meditation" in resp.text


def test_list_routines(client):
    data = client.get("/api/routines").json()
    assert [r["id"] for r in data["routines"]] == ["r1", "r2"]
    assert data["routines"][0]["startTime"] == "06:00"


def test_create_routine(client):
    resp = client.post("/api/routines", json={"title": "Reading", "startTime": "12:00", "endTime": "12:30", "category": "Growth"})
    assert resp.status_code == 201
    assert resp.json()["routine"]["order"] == 2
    assert len(client.get("/api/routines").json()["routines"]) == 3


def test_create_routine_invalid(client):
    resp = client.post("/api/routines", json={"title": "Nap", "category": "Sleep"})
    assert resp.status_code == 400
    assert "Invalid category: Sleep" in resp.json()["detail"]


def test_update_and_delete(client):
    resp = client.put("/api/routines/r1", json={"title": "Sit Quietly"})
    assert resp.json()["routine"]["title"] == "Sit Quietly"
    assert client.put("/api/routines/ghost", json={"title": "x"}).status_code == 404

    assert client.delete("/api/routines/r1").json() == {"ok": True, "routine_id": "r1"}
    assert client.delete("/api/routines/r1").status_code == 404
    completions = client.get("/api/completions").json()["completions"]
    assert all(c["routineId"] == "r2" for c in completions)


def test_toggle_required_and_reorder(client):
    assert client.post("/api/routines/r2/required").json()["routine"]["required"] is False
    resp = client.post("/api/routines/reorder", json={"ids": ["r2", "r1"]})
    assert [r["id"] for r in resp.json()["routines"]] == ["r2", "r1"]
    assert client.post("/api/routines/reorder", json={}).status_code == 400
    assert client.post("/api/routines/reorder", json={"ids": ["r2"]}).status_code == 400


def test_reset(client):
    assert client.post("/api/reset").json() == {"ok": True, "count": 8}


def test_toggle_completion(client):
    resp = client.post("/api/completions/toggle", json={"routineId": "r1", "date": "2026-03-10"})
    assert resp.status_code == 200
    assert resp.json()["completion"]["completed"] is True

    listed = client.get("/api/completions", params={"date": "2026-03-10"}).json()["completions"]
    assert [c["routineId"] for c in listed] == ["r1"]


def test_toggle_completion_errors(client):
    assert client.post("/api/completions/toggle", json={}).status_code == 400
    assert client.post("/api/completions/toggle", json={"routineId": "ghost"}).status_code == 404
    resp = client.post("/api/completions/toggle", json={"routineId": "r1", "date": "yesterday"})
    assert resp.status_code == 400
    for day in ("20260309", 20260309, ["2026-03-09"]):
        resp = client.post("/api/completions/toggle", json={"routineId": "r1", "date": day})
        assert resp.status_code == 400
    assert client.get("/api/completions", params={"date": "2026-03-09"}).json()["completions"][0]["completed"] is True


def test_clear_history(client):
    assert client.delete("/api/completions").json() == {"ok": True, "removed": 4}
    assert client.get("/api/completions").json() == {"completions": []}


def test_today_and_analytics(client, workspace):
    client.post("/api/completions/toggle", json={"routineId": "r1"})
    today = client.get("/api/today").json()
    assert today["completed"] == 1
    assert today["percentage"] == 50
    assert today["statusText"] == "Almost there"

    data = client.get("/api/analytics").json()
    assert set(data) == {"generatedAt", "today", "streaks", "weekly", "heatmap", "insights"}
    cached = json.loads((workspace / "analytics.json").read_text(encoding="utf-8"))
    assert cached["streaks"] == data["streaks"]

    assert client.get("/api/analytics/streaks").json() == data["streaks"]
    assert "insights" in client.get("/api/analytics/insights").json()


def test_corrupt_workspace_is_500(client, workspace):
    (workspace / "completions.json").write_text("{oops", encoding="utf-8")
    assert client.get("/api/routines").status_code == 500
