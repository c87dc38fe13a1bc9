"""Race-time calculator: parameter, training paces and equivalent times."""

from __future__ import annotations

import logging
from typing import Any

from pace_engine.math.pace import seconds_to_pace, seconds_to_time, time_to_seconds
from pace_engine.math.pace_lookup import find_closest_parameter, find_pace_values
from pace_engine.math.reference_tables import MAX_PARAMETER, RACE_DISTANCES_KM

from training_api.errors import ValidationError
from training_api.services.context import ServiceContext

logger = logging.getLogger(__name__)

# zone -> (% of threshold pace, % of VO2max, % of max heart rate)
ZONE_INTENSITIES: dict[str, tuple[int, int, int]] = {
    "Recovery Km": (65, 60, 70),
    "Easy Km": (76, 75, 77),
    "M Km": (85, 80, 83),
    "T Km": (100, 88, 89),
    "I Km": (112, 98, 95),
    "R 1000m": (130, 100, 100),
}


def intensity_rows(paces: dict[str, str]) -> list[dict[str, Any]]:
    rows = []
    for zone, (threshold, vo2max, max_hr) in ZONE_INTENSITIES.items():
        rows.append(
            {
                "zone": zone,
                "pace": paces.get(zone, ""),
                "percentOfThreshold": threshold,
                "percentOfVO2max": vo2max,
                "percentOfMaxHR": max_hr,
            }
        )
    return rows


def calculate(ctx: ServiceContext, time: str | None, distance: str | None) -> dict[str, Any]:
    """Everything derived from one race result.

    *time* is ``HH:MM:SS`` or ``MM:SS``; *distance* one of the race
    distance keys (``"5km"``, ``"21km"``, ...).
    """
    if distance not in RACE_DISTANCES_KM:
        raise ValidationError(f"Invalid distance: {distance}")
    time_s = time_to_seconds(time)
    if time_s <= 0:
        raise ValidationError("Invalid time. Use HH:MM:SS")

    parameter = find_closest_parameter(time, distance, ctx.tables)
    paces = find_pace_values(parameter, ctx.tables)
    race_row = ctx.tables.race_row(parameter) if parameter else None
    if paces is None or race_row is None:
        raise ValidationError("No reference values for that result")

    logger.debug("%s over %s -> parameter %d", time, distance, parameter)
    return {
        "time": seconds_to_time(time_s),
        "distance": distance,
        "parameter": parameter,
        "percentage": round(parameter / MAX_PARAMETER * 100, 1),
        "averagePace": seconds_to_pace(time_s / RACE_DISTANCES_KM[distance]),
        "paces": paces,
        "predictions": dict(race_row.times),
        "intensities": intensity_rows(paces),
    }
