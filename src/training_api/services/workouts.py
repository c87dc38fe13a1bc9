"""Workout log CRUD and the profile totals that follow it.

Every write keeps the profile's ``completedWorkouts`` summary list and
``totalDistance`` in step with the workouts collection.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Any, Mapping

from pace_engine.matching import validate_plan_day_index
from pace_engine.models import ActivityType, UserProfile, WorkoutLog

from training_api.errors import NotFoundError, PermissionDeniedError
from training_api.schemas import WorkoutLogRequest, parse_request
from training_api.services.context import Caller, ServiceContext
from training_api.services.profile import compute_streak

logger = logging.getLogger(__name__)

INCOMPLETE_WORKOUT = "Incomplete workout data"


def _plan_day_index(ctx: ServiceContext, plan_path: str | None, index: int | None) -> int | None:
    """*index* when it names a day of the stored plan *plan_path*, else None."""
    if index is None or not plan_path:
        return None
    plan = ctx.plans.get(plan_path)
    if plan is None:
        return None
    return validate_plan_day_index(index, plan.days_count)


def _check_access(ctx: ServiceContext, caller: Caller, owner_id: str) -> None:
    if owner_id != caller.user_id and not ctx.is_admin(caller):
        raise PermissionDeniedError("Access denied")


def record_logged_workouts(
    ctx: ServiceContext,
    profile: UserProfile,
    logs: list[WorkoutLog],
) -> UserProfile:
    """Profile with *logs* added to its summary list, distance and streak."""
    completed = (*profile.completed_workouts, *(log.summary_entry() for log in logs))
    return replace(
        profile,
        completed_workouts=completed,
        total_distance=profile.total_distance + sum(log.distance for log in logs),
        streak_days=compute_streak((c.date for c in completed), ctx.today()),
    ).touched(ctx.now())


# ---------------------------------------------------------------------------
# Operations
# ---------------------------------------------------------------------------


def log_workout(
    ctx: ServiceContext,
    caller: Caller,
    body: WorkoutLogRequest | Mapping[str, Any],
) -> WorkoutLog:
    """Validate and store a manually logged workout."""
    request = parse_request(WorkoutLogRequest, body, INCOMPLETE_WORKOUT)
    now = ctx.timestamp()
    log = WorkoutLog(
        id=ctx.workouts.new_id(),
        user_id=caller.user_id,
        date=request.date,
        title=request.title,
        distance=request.distance,
        duration=request.duration,
        pace=request.pace or "",
        notes=request.notes,
        activity_type=request.activityType or ActivityType.EASY,
        source=request.source,
        plan_path=request.planPath,
        plan_day_index=_plan_day_index(ctx, request.planPath, request.planDayIndex),
        created_at=now,
        updated_at=now,
    )
    log = ctx.workouts.insert(log)

    profile = ctx.profiles.get_or_new(caller.user_id)
    ctx.profiles.save(record_logged_workouts(ctx, profile, [log]))
    logger.info("Logged workout %s for %s (%.2f km)", log.id, caller.user_id, log.distance)
    return log


def list_workouts(
    ctx: ServiceContext,
    caller: Caller,
    user_id: str | None = None,
    limit: int | None = None,
) -> list[WorkoutLog]:
    """Workouts of *user_id* (the caller by default), most recent first."""
    target = user_id or caller.user_id
    _check_access(ctx, caller, target)
    return ctx.workouts.list_for_user(target, limit=limit)


def get_workout(ctx: ServiceContext, caller: Caller, workout_id: str) -> WorkoutLog:
    log = ctx.workouts.get(workout_id)
    if log is None:
        raise NotFoundError("Workout not found")
    _check_access(ctx, caller, log.user_id)
    return log


def update_workout(
    ctx: ServiceContext,
    caller: Caller,
    workout_id: str,
    body: WorkoutLogRequest | Mapping[str, Any],
) -> WorkoutLog:
    """Replace the editable fields of a workout.

    Plan link, source and owner stay as logged; an update without an
    activity type keeps the stored one. The owner's total distance moves
    by the distance difference and the matching summary entry takes the
    new date and distance.
    """
    existing = get_workout(ctx, caller, workout_id)
    request = parse_request(WorkoutLogRequest, body, INCOMPLETE_WORKOUT)
    updated = replace(
        existing,
        date=request.date,
        title=request.title,
        distance=request.distance,
        duration=request.duration,
        pace=request.pace or existing.pace,
        notes=request.notes if "notes" in request.model_fields_set else existing.notes,
        activity_type=request.activityType or existing.activity_type,
        updated_at=ctx.timestamp(),
    )
    ctx.workouts.replace(updated)

    diff = updated.distance - existing.distance
    profile = ctx.profiles.get(existing.user_id)
    if profile is not None:
        completed = tuple(
            updated.summary_entry() if c.workout_id == workout_id else c
            for c in profile.completed_workouts
        )
        profile = replace(
            profile,
            completed_workouts=completed,
            total_distance=max(0.0, profile.total_distance + diff),
            streak_days=compute_streak((c.date for c in completed), ctx.today()),
        )
        ctx.profiles.save(profile)
    return updated


def delete_workout(ctx: ServiceContext, caller: Caller, workout_id: str) -> None:
    """Delete a workout and take it out of the owner's totals."""
    log = get_workout(ctx, caller, workout_id)
    if not ctx.workouts.delete(workout_id):
        raise NotFoundError("Workout not found")

    profile = ctx.profiles.get(log.user_id)
    if profile is not None:
        completed = tuple(c for c in profile.completed_workouts if c.workout_id != workout_id)
        profile = replace(
            profile,
            completed_workouts=completed,
            total_distance=max(0.0, profile.total_distance - log.distance),
            streak_days=compute_streak((c.date for c in completed), ctx.today()),
        )
        ctx.profiles.save(profile)
    logger.info("Deleted workout %s of %s", workout_id, log.user_id)
