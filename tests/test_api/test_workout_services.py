"""Tests for workout logging and the profile totals that follow it."""

from __future__ import annotations

import pytest

from pace_engine.models import ActivityType, WorkoutSource
from training_api.errors import NotFoundError, PermissionDeniedError, ValidationError
from training_api.services import workouts
from training_api.services.context import Caller
from training_store.repositories import PROFILES


@pytest.fixture
def body() -> dict:
    return {
        "date": "2024-06-12",
        "title": "Intervalado",
        "distance": 8,
        "duration": 40,
        "activityType": "interval",
        "planPath": "10km-test",
        "planDayIndex": 2,
        "notes": "5x1 km",
    }


@pytest.fixture
def stranger() -> Caller:
    return Caller(user_id="runner-2", email="other@example.com")


class TestLogWorkout:
    def test_stored_and_returned(self, ctx, runner, body):
        log = workouts.log_workout(ctx, runner, body)
        assert log.id
        assert log.user_id == "runner-1"
        assert log.pace == "5:00"
        assert log.activity_type == ActivityType.INTERVAL
        assert log.source == WorkoutSource.MANUAL
        assert log.plan_day_index == 2
        assert log.created_at == "2024-06-12T08:30:00"
        assert ctx.workouts.get(log.id) == log

    def test_profile_totals(self, ctx, runner, body):
        log = workouts.log_workout(ctx, runner, body)
        workouts.log_workout(ctx, runner, {**body, "date": "2024-06-11", "distance": 5.5})
        profile = ctx.profiles.get(runner.user_id)
        assert profile.total_distance == pytest.approx(13.5)
        assert profile.streak_days == 2
        assert profile.completed_workouts[0].workout_id == log.id
        assert profile.completed_workouts[0].plan_path == "10km-test"
        assert profile.last_active == "2024-06-12T08:30:00"

    def test_plan_day_index_beyond_plan_dropped(self, ctx, runner, body):
        log = workouts.log_workout(ctx, runner, {**body, "planDayIndex": 9})
        assert log.plan_day_index is None
        assert log.plan_path == "10km-test"

    @pytest.mark.parametrize(
        "link",
        [
            {"planPath": "no-such-plan", "planDayIndex": 999},
            {"planPath": "no-such-plan", "planDayIndex": 1},
            {"planDayIndex": 999},
            {"planPath": "", "planDayIndex": 3},
        ],
    )
    def test_plan_day_index_without_known_plan_dropped(self, ctx, runner, body, link):
        base = {k: v for k, v in body.items() if k not in ("planPath", "planDayIndex")}
        log = workouts.log_workout(ctx, runner, {**base, **link})
        assert log.plan_day_index is None
        (entry,) = ctx.profiles.get(runner.user_id).completed_workouts
        assert entry.plan_day_index is None

    def test_plan_day_index_in_profile_summary(self, ctx, runner, body):
        log = workouts.log_workout(ctx, runner, body)
        (entry,) = ctx.profiles.get(runner.user_id).completed_workouts
        assert entry.workout_id == log.id
        assert entry.plan_day_index == 2
        (stored,) = ctx.store.get(PROFILES, runner.user_id)["completedWorkouts"]
        assert stored["planDayIndex"] == 2
        assert stored["planPath"] == "10km-test"

    def test_default_activity_type(self, ctx, runner, body):
        base = {k: v for k, v in body.items() if k != "activityType"}
        assert workouts.log_workout(ctx, runner, base).activity_type == ActivityType.EASY

    def test_incomplete_body(self, ctx, runner):
        with pytest.raises(ValidationError, match="Incomplete workout data") as excinfo:
            workouts.log_workout(ctx, runner, {"title": "x"})
        assert "date: Field required" in excinfo.value.details
        assert ctx.workouts.list_for_user(runner.user_id) == []
        assert ctx.profiles.get(runner.user_id) is None

    def test_not_an_object(self, ctx, runner):
        with pytest.raises(ValidationError):
            workouts.log_workout(ctx, runner, ["not", "a", "dict"])


# ---------------------------------------------------------------------------
# Reading
# ---------------------------------------------------------------------------


class TestReadWorkouts:
    def test_list_own(self, ctx, runner, body):
        workouts.log_workout(ctx, runner, {**body, "date": "2024-06-10"})
        workouts.log_workout(ctx, runner, body)
        listed = workouts.list_workouts(ctx, runner)
        assert [w.date for w in listed] == ["2024-06-12", "2024-06-10"]
        assert len(workouts.list_workouts(ctx, runner, limit=1)) == 1

    def test_list_other_user_denied(self, ctx, runner, stranger):
        with pytest.raises(PermissionDeniedError, match="Access denied"):
            workouts.list_workouts(ctx, stranger, user_id=runner.user_id)

    def test_admin_lists_anyone(self, ctx, runner, admin, body):
        workouts.log_workout(ctx, runner, body)
        assert len(workouts.list_workouts(ctx, admin, user_id=runner.user_id)) == 1

    def test_get(self, ctx, runner, stranger, admin, body):
        log = workouts.log_workout(ctx, runner, body)
        assert workouts.get_workout(ctx, runner, log.id) == log
        assert workouts.get_workout(ctx, admin, log.id) == log
        with pytest.raises(PermissionDeniedError):
            workouts.get_workout(ctx, stranger, log.id)

    def test_get_missing(self, ctx, runner):
        with pytest.raises(NotFoundError, match="Workout not found"):
            workouts.get_workout(ctx, runner, "missing")


# ---------------------------------------------------------------------------
# Updating and deleting
# ---------------------------------------------------------------------------


class TestUpdateWorkout:
    def test_fields_and_totals(self, ctx, runner, body):
        log = workouts.log_workout(ctx, runner, body)
        update = {"date": "2024-06-11", "title": "Mais longo", "distance": 10, "duration": 50}
        updated = workouts.update_workout(ctx, runner, log.id, update)
        assert updated.title == "Mais longo"
        assert updated.pace == "5:00"
        assert updated.plan_path == "10km-test"
        assert updated.plan_day_index == 2
        assert updated.created_at == log.created_at

        profile = ctx.profiles.get(runner.user_id)
        assert profile.total_distance == pytest.approx(10)
        (entry,) = profile.completed_workouts
        assert entry.date == "2024-06-11"
        assert entry.distance == 10

    def test_activity_type_kept_when_omitted(self, ctx, runner, body):
        log = workouts.log_workout(ctx, runner, body)
        assert log.activity_type == ActivityType.INTERVAL
        update = {"date": "2024-06-12", "title": "Intervalado", "distance": 9, "duration": 45}
        updated = workouts.update_workout(ctx, runner, log.id, update)
        assert updated.activity_type == ActivityType.INTERVAL
        assert ctx.workouts.get(log.id).activity_type == ActivityType.INTERVAL
        assert updated.notes == "5x1 km"

    def test_activity_type_changed_when_given(self, ctx, runner, body):
        log = workouts.log_workout(ctx, runner, body)
        update = {**body, "activityType": "long"}
        assert workouts.update_workout(ctx, runner, log.id, update).activity_type == ActivityType.LONG

    def test_summary_entry_keeps_plan_day(self, ctx, runner, body):
        log = workouts.log_workout(ctx, runner, body)
        workouts.update_workout(ctx, runner, log.id, {**body, "date": "2024-06-11"})
        (entry,) = ctx.profiles.get(runner.user_id).completed_workouts
        assert entry.date == "2024-06-11"
        assert entry.plan_day_index == 2

    def test_plan_link_not_updatable(self, ctx, runner, body):
        log = workouts.log_workout(ctx, runner, body)
        update = {**body, "planPath": None, "planDayIndex": 5, "source": "strava"}
        updated = workouts.update_workout(ctx, runner, log.id, update)
        assert updated.plan_path == "10km-test"
        assert updated.plan_day_index == 2
        assert updated.source == WorkoutSource.MANUAL

    def test_invalid_update(self, ctx, runner, body):
        log = workouts.log_workout(ctx, runner, body)
        with pytest.raises(ValidationError):
            workouts.update_workout(ctx, runner, log.id, {"title": "only a title"})
        assert ctx.workouts.get(log.id) == log

    def test_other_user_denied(self, ctx, runner, stranger, body):
        log = workouts.log_workout(ctx, runner, body)
        with pytest.raises(PermissionDeniedError):
            workouts.update_workout(ctx, stranger, log.id, body)


class TestDeleteWorkout:
    def test_removes_from_totals(self, ctx, runner, body):
        first = workouts.log_workout(ctx, runner, body)
        workouts.log_workout(ctx, runner, {**body, "date": "2024-06-11", "distance": 5})
        workouts.delete_workout(ctx, runner, first.id)

        profile = ctx.profiles.get(runner.user_id)
        assert profile.total_distance == pytest.approx(5)
        assert [c.date for c in profile.completed_workouts] == ["2024-06-11"]
        assert profile.streak_days == 1
        assert ctx.workouts.get(first.id) is None

    def test_delete_twice(self, ctx, runner, body):
        log = workouts.log_workout(ctx, runner, body)
        workouts.delete_workout(ctx, runner, log.id)
        with pytest.raises(NotFoundError):
            workouts.delete_workout(ctx, runner, log.id)

    def test_admin_can_delete(self, ctx, runner, admin, body):
        log = workouts.log_workout(ctx, runner, body)
        workouts.delete_workout(ctx, admin, log.id)
        assert ctx.profiles.get(runner.user_id).total_distance == 0

    def test_other_user_denied(self, ctx, runner, stranger, body):
        log = workouts.log_workout(ctx, runner, body)
        with pytest.raises(PermissionDeniedError):
            workouts.delete_workout(ctx, stranger, log.id)
        assert ctx.workouts.get(log.id) is not None
