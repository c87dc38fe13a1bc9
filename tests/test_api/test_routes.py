"""HTTP tests for the FastAPI app via TestClient."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

from training_api.main import create_app

RUNNER = {"X-User-Id": "runner-1", "X-User-Email": "runner@example.com"}
STRANGER = {"X-User-Id": "runner-2"}
ADMIN = {"X-User-Id": "admin-1", "X-User-Email": "coach@example.com"}


@pytest.fixture
def client(ctx) -> TestClient:
    return TestClient(create_app(ctx))


@pytest.fixture
def logged(client) -> dict:
    body = {"date": "2024-06-12", "title": "Rodagem", "distance": 8, "duration": 44}
    resp = client.post("/api/user/workouts/log", json=body, headers=RUNNER)
    return resp.json()["workout"]


# ---------------------------------------------------------------------------
# Plans
# ---------------------------------------------------------------------------


class TestPlanRoutes:
    def test_list(self, client):
        resp = client.get("/api/plans", params={"distance": "10km"})
        assert resp.status_code == 200
        assert [p["path"] for p in resp.json()] == ["10km-test"]

    def test_list_filtered_out(self, client):
        assert client.get("/api/plans", params={"nivel": "elite"}).json() == []

    def test_get_plan(self, client):
        doc = client.get("/api/plans/10km-test").json()
        assert len(doc["dailyWorkouts"]) == 9

    def test_missing_plan(self, client):
        resp = client.get("/api/plans/nope")
        assert resp.status_code == 404
        assert resp.json() == {"error": "Plan not found"}

    def test_plan_view(self, client):
        resp = client.get("/api/plan-views/10km-test", params={"startDate": "2024-06-10"})
        assert resp.status_code == 200
        doc = resp.json()
        assert doc["startDate"] == "2024-06-10"
        assert doc["weeks"][0]["totalWorkouts"] == 6

    def test_plan_view_uses_caller_settings(self, client):
        client.post(
            "/api/user/plans/10km-test/paces", json={"startDate": "2024-06-03"}, headers=RUNNER
        )
        anonymous = client.get("/api/plan-views/10km-test").json()
        personal = client.get("/api/plan-views/10km-test", headers=RUNNER).json()
        assert anonymous["startDate"] == "2024-06-12"
        assert personal["startDate"] == "2024-06-03"


# ---------------------------------------------------------------------------
# User plans and paces
# ---------------------------------------------------------------------------


class TestUserPlanRoutes:
    def test_requires_user(self, client):
        resp = client.get("/api/user/plans")
        assert resp.status_code == 401
        assert resp.json() == {"error": "Unauthorized"}

    def test_activate(self, client):
        resp = client.post("/api/user/plans/activate", json={"planPath": "10km-test"}, headers=RUNNER)
        assert resp.json() == {
            "success": True,
            "activePlan": "10km-test",
            "savedPlans": ["10km-test"],
        }
        plans = client.get("/api/user/plans", headers=RUNNER).json()
        assert plans["activePlan"]["path"] == "10km-test"

    def test_activate_missing_body_field(self, client):
        resp = client.post("/api/user/plans/activate", json={}, headers=RUNNER)
        assert resp.status_code == 400
        assert resp.json()["error"] == "Invalid request"

    def test_unsave(self, client):
        client.post("/api/user/plans/activate", json={"planPath": "10km-test"}, headers=RUNNER)
        resp = client.post(
            "/api/user/plans/save", json={"planPath": "10km-test", "save": False}, headers=RUNNER
        )
        assert resp.json()["activePlan"] is None

    def test_paces_round_trip(self, client):
        resp = client.post(
            "/api/user/plans/10km-test/paces",
            json={"baseTime": "00:42:00", "baseDistance": "10km"},
            headers=RUNNER,
        )
        assert resp.json() == {
            "success": True,
            "settings": {"baseTime": "00:42:00", "baseDistance": "10km"},
        }
        got = client.get("/api/user/plans/10km-test/paces", headers=RUNNER).json()
        assert got["baseTime"] == "00:42:00"

    def test_invalid_paces(self, client):
        resp = client.post(
            "/api/user/plans/10km-test/paces", json={"custom_T Km": "fast"}, headers=RUNNER
        )
        assert resp.status_code == 400
        assert resp.json() == {
            "error": "Invalid request",
            "details": ["Value error, Invalid pace format for T Km. Use MM:SS"],
        }


# ---------------------------------------------------------------------------
# Workouts
# ---------------------------------------------------------------------------


class TestWorkoutRoutes:
    def test_log(self, client):
        body = {"date": "2024-06-12", "title": "Rodagem", "distance": 8, "duration": 44}
        resp = client.post("/api/user/workouts/log", json=body, headers=RUNNER)
        assert resp.status_code == 201
        data = resp.json()
        assert data["success"] is True
        assert data["workout"]["pace"] == "5:30"
        assert data["id"] == data["workout"]["id"]

    def test_log_invalid(self, client):
        resp = client.post("/api/user/workouts/log", json={"title": "x"}, headers=RUNNER)
        assert resp.status_code == 400
        assert resp.json()["error"] == "Invalid request"
        assert "date: Field required" in resp.json()["details"]

    def test_list_and_get(self, client, logged):
        listed = client.get("/api/user/workouts", headers=RUNNER).json()
        assert [w["id"] for w in listed] == [logged["id"]]
        got = client.get(f"/api/user/workouts/{logged['id']}", headers=RUNNER).json()
        assert got == logged

    def test_other_user_forbidden(self, client, logged):
        resp = client.get(f"/api/user/workouts/{logged['id']}", headers=STRANGER)
        assert resp.status_code == 403
        resp = client.get("/api/user/workouts", params={"userId": "runner-1"}, headers=STRANGER)
        assert resp.status_code == 403

    def test_admin_allowed(self, client, logged):
        resp = client.get("/api/user/workouts", params={"userId": "runner-1"}, headers=ADMIN)
        assert resp.status_code == 200

    def test_update_and_delete(self, client, logged):
        update = {"date": "2024-06-12", "title": "Rodagem longa", "distance": 10, "duration": 55}
        resp = client.put(f"/api/user/workouts/{logged['id']}", json=update, headers=RUNNER)
        assert resp.json()["workout"]["title"] == "Rodagem longa"

        resp = client.delete(f"/api/user/workouts/{logged['id']}", headers=RUNNER)
        assert resp.json() == {"success": True}
        resp = client.get(f"/api/user/workouts/{logged['id']}", headers=RUNNER)
        assert resp.status_code == 404

    def test_update_keeps_activity_type(self, client):
        body = {
            "date": "2024-06-12",
            "title": "Tiros",
            "distance": 6,
            "duration": 30,
            "activityType": "interval",
        }
        resp = client.post("/api/user/workouts/log", json=body, headers=RUNNER)
        logged = resp.json()["workout"]
        update = {"date": "2024-06-12", "title": "Tiros", "distance": 7, "duration": 35}
        resp = client.put(f"/api/user/workouts/{logged['id']}", json=update, headers=RUNNER)
        assert resp.status_code == 200
        assert resp.json()["workout"]["activityType"] == "interval"

    def test_plan_day_index_for_unknown_plan_dropped(self, client):
        body = {
            "date": "2024-06-12",
            "title": "Rodagem",
            "distance": 8,
            "duration": 44,
            "planPath": "no-such-plan",
            "planDayIndex": 999,
        }
        resp = client.post("/api/user/workouts/log", json=body, headers=RUNNER)
        assert resp.status_code == 201
        assert "planDayIndex" not in resp.json()["workout"]

    def test_bad_limit(self, client):
        resp = client.get("/api/user/workouts", params={"limit": 0}, headers=RUNNER)
        assert resp.status_code == 400


# ---------------------------------------------------------------------------
# Profile and Strava
# ---------------------------------------------------------------------------


class TestProfileRoutes:
    def test_summary(self, client, logged):
        summary = client.get("/api/user/profile", headers=RUNNER).json()
        assert summary["totalDistance"] == 8
        assert summary["streakDays"] == 1

    def test_history(self, client, logged):
        history = client.get("/api/user/profile/history", params={"weeks": 2}, headers=RUNNER).json()
        assert [h["distance"] for h in history] == [0, 8]

    def test_history_bounds(self, client):
        resp = client.get("/api/user/profile/history", params={"weeks": 500}, headers=RUNNER)
        assert resp.status_code == 400


class TestStravaRoutes:
    @pytest.fixture
    def tokens(self, ctx) -> dict:
        expires = int(ctx.now().timestamp()) + 3600
        return {"accessToken": "acc", "refreshToken": "ref", "expiresAt": expires, "athleteId": 7}

    def test_connect_and_status(self, client, tokens):
        resp = client.post("/api/strava/connect", json=tokens, headers=RUNNER)
        assert resp.status_code == 200
        assert resp.json()["connected"] is True
        status = client.get("/api/strava/status", headers=RUNNER).json()
        assert status["athleteId"] == "7"

    def test_connect_missing_token(self, client):
        resp = client.post("/api/strava/connect", json={"accessToken": "acc"}, headers=RUNNER)
        assert resp.status_code == 400

    def test_import_without_link(self, client):
        resp = client.post("/api/strava/import", headers=RUNNER)
        assert resp.status_code == 401
        assert resp.json() == {"error": "Strava account not connected"}

    def test_import(self, client, ctx, tokens):
        fake = MagicMock()
        fake.get_activities.return_value = [
            {
                "id": 5,
                "name": "Evening Run",
                "sport_type": "Run",
                "distance": 6000,
                "moving_time": 1800,
                "start_date_local": "2024-06-11T18:00:00Z",
            }
        ]
        ctx.strava_factory = MagicMock(return_value=fake)
        client.post("/api/strava/connect", json=tokens, headers=RUNNER)

        resp = client.post("/api/strava/import", json={"days": 3, "perPage": 10}, headers=RUNNER)
        assert resp.status_code == 200
        assert resp.json()["imported"] == 1
        assert fake.get_activities.call_args.kwargs["per_page"] == 10

    def test_import_bad_window(self, client):
        resp = client.post("/api/strava/import", json={"days": 0}, headers=RUNNER)
        assert resp.status_code == 400


class TestUnknownRoutes:
    def test_method_not_allowed(self, client):
        resp = client.delete("/api/plans")
        assert resp.status_code == 405
        assert resp.json() == {"error": "Method Not Allowed"}

    def test_not_found(self, client):
        resp = client.get("/api/nothing-here")
        assert resp.status_code == 404
        assert resp.json() == {"error": "Not Found"}
