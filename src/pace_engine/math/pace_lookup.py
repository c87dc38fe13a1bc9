"""Pace table lookup: reference time -> parameter -> paces and predictions."""

from __future__ import annotations

import logging
from typing import Callable, Optional

import numpy as np

from pace_engine.math.pace import create_range_pace, time_to_seconds
from pace_engine.math.reference_tables import ReferenceTables, load_reference_tables
from pace_engine.models.enums import RANGE_ZONES
from pace_engine.models.plan import PredictedRaceTime

logger = logging.getLogger(__name__)

RacePredictor = Callable[[float], Optional[PredictedRaceTime]]


def find_closest_parameter(
    target_time: str | None,
    distance_key: str | None,
    tables: ReferenceTables | None = None,
) -> int | None:
    """Return the parameter whose time at *distance_key* is closest to *target_time*.

    Rows without a parseable time at that distance are skipped.  Ties
    resolve to the first row scanned (lowest parameter).  Returns None
    when either input is missing or unparseable, or no row qualifies.
    """
    if not target_time or not distance_key:
        return None
    target_s = time_to_seconds(target_time)
    if target_s <= 0:
        return None

    tables = tables or load_reference_tables()
    params: list[int] = []
    seconds: list[float] = []
    for row in tables.races:
        value = row.times.get(distance_key)
        if not isinstance(value, str):
            continue
        row_s = time_to_seconds(value)
        if row_s <= 0:
            continue
        params.append(row.parameter)
        seconds.append(row_s)

    if not params:
        logger.debug("No reference rows for distance %r", distance_key)
        return None

    diffs = np.abs(np.asarray(seconds, dtype=float) - target_s)
    # argmin returns the first index among equal minima
    return params[int(np.argmin(diffs))]


def find_pace_values(
    parameter: int | None,
    tables: ReferenceTables | None = None,
) -> dict[str, str] | None:
    """All named paces for *parameter*; recovery and easy zones as ranges."""
    if not parameter:
        return None
    tables = tables or load_reference_tables()
    row = tables.pace_row(parameter)
    if row is None:
        return None
    return {
        zone: create_range_pace(pace) if zone in RANGE_ZONES else pace
        for zone, pace in row.paces.items()
    }


def predict_race_time(
    parameter: int | None,
    distance_km: float,
    tables: ReferenceTables | None = None,
) -> PredictedRaceTime | None:
    """Predicted time and pace for the race keyed ``"<distance>km"``.

    Only distances that exist as table keys predict (5, 10, 15, 21, 42 and
    3); the pace divides the time by the numeric *distance_km* given.
    """
    if not parameter or not distance_km or distance_km <= 0:
        return None
    tables = tables or load_reference_tables()
    row = tables.race_row(parameter)
    if row is None:
        return None
    time_str = row.times.get(f"{distance_km:g}km")
    if time_str is None:
        return None

    pace_min = time_to_seconds(time_str) / 60 / distance_km
    minutes = int(pace_min)
    seconds = round((pace_min - minutes) * 60)
    if seconds == 60:
        minutes, seconds = minutes + 1, 0
    return PredictedRaceTime(time=time_str, pace=f"{minutes}:{seconds:02d}")


def make_race_predictor(
    parameter: int | None,
    tables: ReferenceTables | None = None,
) -> RacePredictor:
    """Bind *parameter* into a ``distance_km -> PredictedRaceTime | None`` callable."""
    tables = tables or load_reference_tables()

    def predictor(distance_km: float) -> PredictedRaceTime | None:
        return predict_race_time(parameter, distance_km, tables)

    return predictor
