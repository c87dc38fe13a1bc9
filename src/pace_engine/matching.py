"""Link real (imported or logged) activities to plan days.

Returning None means "do not link"; it is never an error.
"""

from __future__ import annotations

import math
from datetime import date
from types import MappingProxyType
from typing import Any, Mapping, Sequence

from pace_engine.models.activity import Activity
from pace_engine.models.plan import PlanDay
from pace_engine.schedule import parse_iso_date

_RUN_TYPES = frozenset(
    {"easy", "recovery", "threshold", "interval", "repetition", "long", "marathon", "race"}
)

# External (Strava sport_type) and manual activity types -> compatible plan types.
TYPE_COMPATIBILITY: Mapping[str, frozenset[str]] = MappingProxyType(
    {
        "Run": _RUN_TYPES,
        "Walk": frozenset({"walk"}),
        "Workout": frozenset({"strength"}),
        "WeightTraining": frozenset({"strength"}),
        "Ride": frozenset({"bike", "cycling"}),
        "easy": frozenset({"easy"}),
        "recovery": frozenset({"recovery"}),
        "threshold": frozenset({"threshold"}),
        "interval": frozenset({"interval"}),
        "repetition": frozenset({"repetition"}),
        "long": frozenset({"long"}),
        "marathon": frozenset({"marathon"}),
        "race": frozenset({"race"}),
        "walk": frozenset({"walk"}),
        "strength": frozenset({"strength"}),
        "other": frozenset({"easy", "recovery"}),
    }
)


def is_compatible(external_type: str, plan_type: Any) -> bool:
    """True if a plan activity of *plan_type* can absorb *external_type*."""
    plan_value = getattr(plan_type, "value", plan_type)
    return plan_value in TYPE_COMPATIBILITY.get(external_type, frozenset())


def find_matching_plan_day(
    activity_date: str | date | None,
    activity_type: str,
    plan_days: Sequence[PlanDay],
) -> int | None:
    """Index of the plan day on *activity_date* holding a compatible activity.

    Both a calendar-day match and a type-compatible planned activity are
    required.
    """
    on_date = parse_iso_date(activity_date)
    if on_date is None or not plan_days:
        return None
    day = next((d for d in plan_days if d.date == on_date), None)
    if day is None:
        return None
    if any(is_compatible(activity_type, a.type) for a in day.activities):
        return day.index
    return None


def find_best_plan_activity_match(
    external_type: str,
    day_activities: Sequence[Activity],
    distance_km: float | None = None,
) -> Activity | None:
    """Pick the planned activity a real one most likely corresponds to.

    First type-compatible activity; otherwise the day's only activity
    whatever its type; otherwise the activity with the closest numeric
    distance.
    """
    if not day_activities:
        return None

    for activity in day_activities:
        if is_compatible(external_type, activity.type):
            return activity

    if len(day_activities) == 1:
        return day_activities[0]

    if not distance_km:
        return None
    closest: Activity | None = None
    closest_diff = math.inf
    for activity in day_activities:
        planned = activity.distance_km
        if planned is None:
            continue
        diff = abs(planned - distance_km)
        if diff < closest_diff:
            closest, closest_diff = activity, diff
    return closest


def validate_plan_day_index(value: Any, plan_length: int | None = None) -> int | None:
    """Coerce a submitted plan-day index; None when absent or out of bounds."""
    if value is None or value == "" or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(number) or number < 0 or not number.is_integer():
        return None
    index = int(number)
    if plan_length is not None and index >= plan_length:
        return None
    return index
