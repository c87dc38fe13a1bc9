"""Utility helpers bridging the Streamlit UI and the training services.

Pure functions for formatting, colour maps and table rows; nothing here
touches Streamlit so it can be tested directly.
"""

from __future__ import annotations

from typing import Any, Iterable

import pandas as pd

from pace_engine.math.reference_tables import DEFAULT_TIMES, RACE_DISTANCES_KM
from pace_engine.models import (
    Activity,
    ActivityType,
    CustomPaceSettings,
    IntervalActivity,
    WorkoutLog,
)
from pace_engine.models.enums import ESSENTIAL_ZONES, RANGE_ZONES

# ---------------------------------------------------------------------------
# Formatting helpers
# ---------------------------------------------------------------------------


def format_pace(pace: str) -> str:
    """Display form of a pace string. e.g. '5:05' -> '5:05/km', 'N/A' -> '--'."""
    if not pace or pace == "N/A":
        return "--"
    return f"{pace}/km"


def format_duration(minutes: float) -> str:
    """Convert minutes to human string. e.g. 90.0 -> '1h 30m'."""
    if minutes <= 0:
        return "0m"
    h = int(minutes) // 60
    m = int(minutes) % 60
    if h > 0 and m > 0:
        return f"{h}h {m}m"
    if h > 0:
        return f"{h}h"
    return f"{m}m"


def format_distance(km: float) -> str:
    """e.g. 8.0 -> '8 km', 12.345 -> '12.35 km', 0 -> '--'."""
    if km <= 0:
        return "--"
    return f"{round(km, 2):g} km"


def describe_activity(activity: Activity) -> str:
    """One-line label. e.g. '8 km Easy', '6x 400m / 200m (I)'."""
    label = ACTIVITY_LABELS.get(activity.type, activity.type.value.title())
    if isinstance(activity, IntervalActivity) and activity.series:
        parts = []
        for series in activity.series:
            reps = series.sets.rstrip("xX ")
            text = f"{reps}x {series.work}" if reps else series.work
            if series.rest:
                text += f" / {series.rest}"
            parts.append(text)
        intensity = f" ({activity.descriptor})" if activity.descriptor else ""
        return f"{label}: {' + '.join(parts)}{intensity}"
    if activity.distance_label:
        return f"{activity.distance_label} {label}"
    if activity.amount:
        return f"{activity.amount:g} {activity.units.value} {label}"
    return label


# ---------------------------------------------------------------------------
# Colour maps
# ---------------------------------------------------------------------------

ACTIVITY_COLORS: dict[ActivityType, str] = {
    ActivityType.OFFDAY: "#D5DBDB",
    ActivityType.RECOVERY: "#AED6F1",
    ActivityType.EASY: "#82E0AA",
    ActivityType.LONG: "#F9E79F",
    ActivityType.MARATHON: "#3498DB",
    ActivityType.THRESHOLD: "#E74C3C",
    ActivityType.INTERVAL: "#8E44AD",
    ActivityType.REPETITION: "#F5B041",
    ActivityType.RACE: "#1ABC9C",
    ActivityType.WALK: "#D7BDE2",
    ActivityType.STRENGTH: "#FF8C00",
}

ACTIVITY_LABELS: dict[ActivityType, str] = {
    ActivityType.OFFDAY: "Rest",
    ActivityType.RECOVERY: "Recovery",
    ActivityType.EASY: "Easy",
    ActivityType.LONG: "Long run",
    ActivityType.MARATHON: "Marathon pace",
    ActivityType.THRESHOLD: "Threshold",
    ActivityType.INTERVAL: "Intervals",
    ActivityType.REPETITION: "Repetitions",
    ActivityType.RACE: "Race",
    ActivityType.WALK: "Walk",
    ActivityType.STRENGTH: "Strength",
    ActivityType.OTHER: "Other",
}

LEVEL_LABELS: dict[str, str] = {
    "iniciante": "Beginner",
    "intermediário": "Intermediate",
    "avançado": "Advanced",
    "elite": "Elite",
}

DISTANCE_OPTIONS: tuple[str, ...] = tuple(RACE_DISTANCES_KM)

WORKOUT_COLUMNS = [
    "Date",
    "Title",
    "Type",
    "Distance (km)",
    "Duration",
    "Pace",
    "Source",
    "Plan day",
]


# ---------------------------------------------------------------------------
# Table rows
# ---------------------------------------------------------------------------


def _type_label(value: Any) -> str:
    return ACTIVITY_LABELS[ActivityType.parse(value)]


def week_rows(week: dict[str, Any]) -> list[dict[str, Any]]:
    """Flatten one serialised week of a plan view into table rows."""
    rows = []
    for day in week["days"]:
        activities = day["activities"] or [{"type": "offday", "pace": "N/A"}]
        for act in activities:
            rows.append(
                {
                    "Day": day["index"] + 1,
                    "Date": day["displayDate"],
                    "Workout": act.get("activity") or _type_label(act.get("type")),
                    "Distance": act.get("distance", ""),
                    "Pace": format_pace(act.get("pace", "")),
                    "Predicted": act.get("predictedTime", ""),
                    "Today": "●" if day["isToday"] else "",
                }
            )
    return rows


def workouts_frame(logs: Iterable[WorkoutLog]) -> pd.DataFrame:
    """Workout logs as a display table, most recent first."""
    frame = pd.DataFrame(
        [
            {
                "Date": log.date,
                "Title": log.title,
                "Type": ACTIVITY_LABELS.get(log.activity_type, log.activity_type.value),
                "Distance (km)": log.distance,
                "Duration": format_duration(log.duration),
                "Pace": format_pace(log.pace),
                "Source": log.source.value,
                "Plan day": "" if log.plan_day_index is None else log.plan_day_index + 1,
            }
            for log in logs
        ],
        columns=WORKOUT_COLUMNS,
    )
    return frame.sort_values("Date", ascending=False, ignore_index=True)


# ---------------------------------------------------------------------------
# Pace settings form
# ---------------------------------------------------------------------------


def pace_form_defaults(settings: CustomPaceSettings) -> dict[str, Any]:
    """Initial widget values for the pace settings form."""
    return {
        "baseDistance": settings.base_distance,
        "baseTime": settings.base_time or DEFAULT_TIMES.get(settings.base_distance, ""),
        "startDate": settings.start_date,
        "adjustmentFactor": settings.adjustment_factor,
        "overrides": {zone: settings.custom_paces.get(zone, "") for zone in ESSENTIAL_ZONES},
    }


def pace_settings_body(
    base_distance: str,
    base_time: str,
    start_date: str | None,
    adjustment_factor: float,
    overrides: dict[str, str],
) -> dict[str, Any]:
    """Request body for the pace settings update; blank overrides are dropped."""
    body: dict[str, Any] = {
        "baseDistance": base_distance,
        "baseTime": base_time,
        "adjustmentFactor": adjustment_factor,
    }
    if start_date:
        body["startDate"] = start_date
    for zone, pace in overrides.items():
        if pace and pace.strip():
            body[f"custom_{zone}"] = pace.strip()
    return body


def zone_hint(zone: str) -> str:
    return "e.g. 5:30, shown as a range" if zone in RANGE_ZONES else "e.g. 4:15"


# ---------------------------------------------------------------------------
# Calculator
# ---------------------------------------------------------------------------

INTENSITY_COLUMNS = ["Zone", "Pace", "% threshold", "% VO2max", "% max HR"]


def intensity_frame(result: dict[str, Any]) -> pd.DataFrame:
    """Zone intensity table of a calculator result."""
    return pd.DataFrame(
        [
            {
                "Zone": row["zone"],
                "Pace": format_pace(row["pace"]),
                "% threshold": row["percentOfThreshold"],
                "% VO2max": row["percentOfVO2max"],
                "% max HR": row["percentOfMaxHR"],
            }
            for row in result["intensities"]
        ],
        columns=INTENSITY_COLUMNS,
    )


def prediction_rows(result: dict[str, Any]) -> list[dict[str, str]]:
    """Equivalent race times in distance order, the entered distance marked."""
    return [
        {
            "Distance": key,
            "Time": result["predictions"].get(key, ""),
            "Entered": "●" if key == result["distance"] else "",
        }
        for key in RACE_DISTANCES_KM
    ]
