"""Pure functions mapping Strava activity dicts to our models.

No I/O: takes raw dicts from :class:`StravaClient` and returns
:class:`ImportedActivity` / :class:`WorkoutLog` values.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional

from pace_engine.math.pace import seconds_to_pace
from pace_engine.models import ActivityType, ImportedActivity, WorkoutLog, WorkoutSource
from pace_engine.schedule import parse_iso_date

logger = logging.getLogger(__name__)

# Name keywords (English and Portuguese) that refine a generic "Run".
_RUN_NAME_KEYWORDS: tuple[tuple[tuple[str, ...], ActivityType], ...] = (
    (("interval", "intervalo"), ActivityType.INTERVAL),
    (("tempo", "limiar", "threshold"), ActivityType.THRESHOLD),
    (("long", "longo"), ActivityType.LONG),
    (("recup", "recovery"), ActivityType.RECOVERY),
    (("race", "compet", "prova"), ActivityType.RACE),
)


def map_activity(raw: Mapping[str, Any]) -> Optional[ImportedActivity]:
    """Map one Strava activity to an :class:`ImportedActivity`.

    Distance is converted from metres to km and moving time from seconds
    to minutes.  Returns None for records without an id or start date.
    """
    activity_id = raw.get("id")
    start = parse_iso_date(raw.get("start_date_local") or raw.get("start_date"))
    if activity_id is None or start is None:
        logger.warning("Skipping Strava activity without id/date: %r", raw.get("id"))
        return None
    return ImportedActivity(
        external_id=str(activity_id),
        date=start,
        sport_type=str(raw.get("sport_type") or raw.get("type") or ""),
        name=str(raw.get("name") or ""),
        distance_km=round(_number(raw.get("distance")) / 1000, 2),
        duration_min=round(_number(raw.get("moving_time")) / 60, 2),
        elevation_gain=_optional_number(raw.get("total_elevation_gain")),
        average_heartrate=_optional_number(raw.get("average_heartrate")),
        max_heartrate=_optional_number(raw.get("max_heartrate")),
        average_cadence=_optional_number(raw.get("average_cadence")),
    )


def classify_activity_type(sport_type: str, name: str = "") -> ActivityType:
    """Our activity type for a Strava sport type, refined by the name for runs."""
    if sport_type == "Run":
        name_lower = name.lower()
        for keywords, activity_type in _RUN_NAME_KEYWORDS:
            if any(k in name_lower for k in keywords):
                return activity_type
        return ActivityType.EASY
    if sport_type == "Walk":
        return ActivityType.WALK
    if sport_type in ("Workout", "WeightTraining"):
        return ActivityType.STRENGTH
    return ActivityType.EASY


def to_workout_log(
    activity: ImportedActivity,
    user_id: str,
    workout_id: str,
    plan_path: str | None = None,
    plan_day_index: int | None = None,
    created_at: str | None = None,
) -> WorkoutLog:
    """Build the workout log stored for an imported activity."""
    pace = ""
    if activity.distance_km > 0:
        pace = seconds_to_pace(activity.duration_min * 60 / activity.distance_km)
    return WorkoutLog(
        id=workout_id,
        user_id=user_id,
        date=activity.date.isoformat(),
        title=activity.name or activity.sport_type or "Strava activity",
        distance=activity.distance_km,
        duration=activity.duration_min,
        pace=pace,
        notes=f"Imported from Strava (ID: {activity.external_id})",
        activity_type=classify_activity_type(activity.sport_type, activity.name),
        source=WorkoutSource.STRAVA,
        plan_path=plan_path,
        plan_day_index=plan_day_index,
        strava_activity_id=activity.external_id,
        elevation_gain=activity.elevation_gain,
        average_heartrate=activity.average_heartrate,
        max_heartrate=activity.max_heartrate,
        average_cadence=activity.average_cadence,
        created_at=created_at,
        updated_at=created_at,
    )


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _number(value: Any) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return 0.0


def _optional_number(value: Any) -> Optional[float]:
    if value is None:
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None
