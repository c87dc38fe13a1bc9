"""Dashboard summary: totals, streak, milestones and distance history."""

from __future__ import annotations

import logging
from datetime import date, timedelta
from typing import Any, Iterable

import pandas as pd

from pace_engine.models import WorkoutLog
from pace_engine.schedule import (
    find_day_for_date,
    organize_weekly_blocks,
    parse_iso_date,
    prepare_plan_days,
)

from training_api.services.context import Caller, ServiceContext

logger = logging.getLogger(__name__)

# (label, km needed) in ascending order.
MILESTONES: tuple[tuple[str, float], ...] = (
    ("5K", 0.0),
    ("10K", 50.0),
    ("Half Marathon", 100.0),
    ("Marathon", 200.0),
    ("Ultra", 500.0),
)


def compute_streak(dates: Iterable[str | date], today: date) -> int:
    """Consecutive training days ending today (or yesterday)."""
    days = {d for d in (parse_iso_date(x) for x in dates) if d is not None}
    cursor = today if today in days else today - timedelta(days=1)
    streak = 0
    while cursor in days:
        streak += 1
        cursor -= timedelta(days=1)
    return streak


def next_milestone(total_km: float) -> dict[str, Any] | None:
    """First milestone above *total_km* and the distance still to go."""
    for label, threshold in MILESTONES:
        if total_km < threshold:
            return {"name": label, "target": threshold, "remaining": round(threshold - total_km, 2)}
    return None


def current_milestone(total_km: float) -> str:
    reached = [label for label, threshold in MILESTONES if total_km >= threshold]
    return reached[-1]


def weekly_distance_history(
    workouts: list[WorkoutLog],
    weeks: int = 12,
    today: date | None = None,
) -> list[dict[str, Any]]:
    """Kilometres per week (weeks starting Monday) over the last *weeks* weeks.

    Weeks without workouts are reported with zero distance.
    """
    today = today or date.today()
    last_monday = today - timedelta(days=today.weekday())
    first_monday = last_monday - timedelta(weeks=weeks - 1)
    index = pd.date_range(first_monday, last_monday, freq="7D")

    frame = pd.DataFrame(
        {
            "date": pd.to_datetime([w.date for w in workouts], errors="coerce"),
            "distance": [w.distance for w in workouts],
            "duration": [w.duration for w in workouts],
        }
    ).dropna(subset=["date"])
    if frame.empty:
        weekly = pd.DataFrame(0, index=index, columns=["distance", "duration", "workouts"])
    else:
        weekday = pd.to_timedelta(frame["date"].dt.weekday, unit="D")
        frame["week"] = frame["date"].dt.normalize() - weekday
        weekly = (
            frame.groupby("week")
            .agg(
                distance=("distance", "sum"),
                duration=("duration", "sum"),
                workouts=("distance", "size"),
            )
            .reindex(index, fill_value=0)
        )

    return [
        {
            "weekStart": ts.date().isoformat(),
            "distance": round(float(row["distance"]), 2),
            "duration": round(float(row["duration"]), 1),
            "workouts": int(row["workouts"]),
        }
        for ts, row in weekly.iterrows()
    ]


def get_user_summary(ctx: ServiceContext, caller: Caller) -> dict[str, Any]:
    """Totals, streak, milestones, active plan and today's planned day."""
    profile = ctx.profiles.get_or_new(caller.user_id)
    today = ctx.today()
    total = profile.total_distance
    milestone = next_milestone(total)

    todays_workout = None
    if profile.active_plan:
        plan = ctx.plans.get(profile.active_plan)
        if plan is not None:
            start = parse_iso_date(profile.settings_for(plan.path).start_date) or today
            blocks = organize_weekly_blocks(plan.daily_workouts, start, today=today)
            days = prepare_plan_days(blocks)
            day = find_day_for_date(days, today)
            if day is not None:
                todays_workout = {
                    "planPath": plan.path,
                    "index": day.index,
                    "activities": [a.to_dict() for a in day.activities],
                }

    return {
        "userId": profile.user_id,
        "totalDistance": round(total, 2),
        "totalWorkouts": len(profile.completed_workouts),
        "streakDays": compute_streak((c.date for c in profile.completed_workouts), today),
        "currentMilestone": current_milestone(total),
        "nextMilestone": milestone,
        "activePlan": profile.active_plan,
        "lastActive": profile.last_active,
        "stravaConnected": bool(profile.strava),
        "todaysWorkout": todays_workout,
    }


def get_distance_history(
    ctx: ServiceContext,
    caller: Caller,
    weeks: int = 12,
) -> list[dict[str, Any]]:
    workouts = ctx.workouts.list_for_user(caller.user_id)
    return weekly_distance_history(workouts, weeks=max(1, weeks), today=ctx.today())
