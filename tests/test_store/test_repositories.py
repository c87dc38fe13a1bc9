"""Tests for the model repositories and the plan seeding command."""

from __future__ import annotations

from pathlib import Path

import pytest

from pace_engine.models import Plan, UserProfile, WorkoutLog
from training_store import (
    JsonDocumentStore,
    PlanRepository,
    ProfileRepository,
    WorkoutRepository,
)
from training_store.seed import load_plans, main, seed_plans

SAMPLE_PLANS = Path(__file__).resolve().parents[2] / "sample_plans"


def _log(**overrides) -> WorkoutLog:
    fields = dict(
        id="",
        user_id="runner-1",
        date="2024-06-10",
        title="Rodagem",
        distance=8.0,
        duration=44.0,
    )
    fields.update(overrides)
    return WorkoutLog(**fields)


class TestPlanRepository:
    def test_save_and_get(self, store, plan):
        repo = PlanRepository(store)
        repo.save(plan)
        assert repo.get("10km-test") == plan
        assert repo.exists("10km-test")
        assert repo.get("other") is None

    def test_summaries_carry_day_count(self, store, plan):
        repo = PlanRepository(store)
        repo.save(plan)
        (summary,) = repo.list_summaries()
        assert summary["days"] == 9
        assert summary["path"] == "10km-test"
        assert "dailyWorkouts" not in summary


class TestProfileRepository:
    def test_get_or_new_is_not_saved(self, store):
        repo = ProfileRepository(store)
        assert repo.get_or_new("u1") == UserProfile(user_id="u1")
        assert repo.get("u1") is None

    def test_save_round_trip(self, store):
        repo = ProfileRepository(store)
        profile = UserProfile(user_id="u1", active_plan="10km-test", saved_plans=("10km-test",))
        repo.save(profile)
        assert repo.get("u1") == profile

    def test_linked_to_strava(self, store):
        repo = ProfileRepository(store)
        repo.save(UserProfile(user_id="a", strava={"athleteId": "1"}))
        repo.save(UserProfile(user_id="b"))
        assert [p.user_id for p in repo.linked_to_strava()] == ["a"]
        assert len(repo.all()) == 2


class TestWorkoutRepository:
    def test_insert_assigns_id(self, store):
        repo = WorkoutRepository(store)
        saved = repo.insert(_log())
        assert saved.id
        assert repo.get(saved.id) == saved

    def test_list_most_recent_first(self, store):
        repo = WorkoutRepository(store)
        repo.insert_many(
            [
                _log(id="a", date="2024-06-10"),
                _log(id="b", date="2024-06-12"),
                _log(id="c", date="2024-06-11"),
                _log(id="d", date="2024-06-12", user_id="someone-else"),
            ]
        )
        assert [w.id for w in repo.list_for_user("runner-1")] == ["b", "c", "a"]
        assert [w.id for w in repo.list_for_user("runner-1", limit=2)] == ["b", "c"]

    def test_replace_and_delete(self, store):
        repo = WorkoutRepository(store)
        saved = repo.insert(_log(id="a"))
        repo.replace(_log(id="a", title="Longão"))
        assert repo.get("a").title == "Longão"
        assert repo.delete(saved.id)
        assert repo.get("a") is None

    def test_existing_strava_ids(self, store):
        repo = WorkoutRepository(store)
        repo.insert(_log(id="a", strava_activity_id="111"))
        repo.insert(_log(id="b", strava_activity_id="222", user_id="other"))
        assert repo.existing_strava_ids("runner-1", ["111", "222", "333"]) == {"111"}


# ---------------------------------------------------------------------------
# Seeding
# ---------------------------------------------------------------------------


class TestSeed:
    def test_load_sample_plans(self):
        plans = {p.path: p for p in load_plans(SAMPLE_PLANS)}
        assert set(plans) == {"5km-iniciante", "10km-intermediario"}
        assert plans["5km-iniciante"].days_count == 14
        assert plans["10km-intermediario"].nivel == "intermediário"

    def test_missing_workouts_file(self, tmp_path):
        (tmp_path / "index.json").write_text(
            '[{"path": "ghost", "name": "Ghost"}, {"name": "No path"}]', encoding="utf-8"
        )
        (plan,) = load_plans(tmp_path)
        assert plan == Plan(path="ghost", name="Ghost")

    def test_seed_and_drop(self, store, tmp_path):
        assert seed_plans(store, SAMPLE_PLANS) == 2
        (tmp_path / "one").mkdir()
        (tmp_path / "one" / "index.json").write_text('[{"path": "solo", "name": "Solo"}]')
        seed_plans(store, tmp_path / "one", drop=True)
        assert [s["path"] for s in PlanRepository(store).list_summaries()] == ["solo"]

    def test_main(self, tmp_path):
        main([str(SAMPLE_PLANS), "--data-dir", str(tmp_path / "data")])
        store = JsonDocumentStore(tmp_path / "data")
        assert PlanRepository(store).exists("5km-iniciante")


@pytest.mark.parametrize("path", ["5km-iniciante", "10km-intermediario"])
def test_sample_plans_parse_every_activity(path):
    (plan,) = [p for p in load_plans(SAMPLE_PLANS) if p.path == path]
    assert all(day.activities for day in plan.daily_workouts)
