"""Race-time and training-pace reference tables indexed by parameter.

The parameter is an integer performance level equivalent to Daniels'
VDOT.  Rows are derived from the Daniels & Gilbert oxygen-power
equations rather than stored as literal data:

    VO2(v)   = -4.60 + 0.182258 v + 0.000104 v^2          (v in m/min)
    %max(t)  = 0.8 + 0.1894393 e^(-0.012778 t)
                   + 0.2989558 e^(-0.1932605 t)           (t in min)

A race time for distance d solves VO2(d/t) / %max(t) = parameter.
Training paces are the velocities at which VO2(v) equals a fixed
fraction of the parameter.

Reference:
    Daniels, J. & Gilbert, J. (1979). Oxygen Power: Performance Tables
    for Distance Runners.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from functools import lru_cache
from types import MappingProxyType
from typing import Mapping

from pace_engine.math.pace import seconds_to_pace, seconds_to_time

MIN_PARAMETER = 30
MAX_PARAMETER = 85

# Race distance keys as stored in user settings, in km.
RACE_DISTANCES_KM: Mapping[str, float] = MappingProxyType(
    {
        "1500m": 1.5,
        "1600m": 1.6,
        "3km": 3.0,
        "3200m": 3.2,
        "5km": 5.0,
        "10km": 10.0,
        "15km": 15.0,
        "21km": 21.0975,
        "42km": 42.195,
    }
)

# Default reference time offered for each distance.
DEFAULT_TIMES: Mapping[str, str] = MappingProxyType(
    {
        "1500m": "00:05:24",
        "1600m": "00:05:50",
        "3km": "00:11:33",
        "3200m": "00:12:28",
        "5km": "00:19:57",
        "10km": "00:41:21",
        "15km": "01:03:36",
        "21km": "01:31:35",
        "42km": "03:10:49",
    }
)

# Fraction of VO2max sustained in each per-km training zone.
ZONE_INTENSITY: Mapping[str, float] = MappingProxyType(
    {
        "Recovery Km": 0.62,
        "Easy Km": 0.70,
        "T Km": 0.88,
        "I Km": 0.975,
        "R 1000m": 1.05,
    }
)

# Split-time zones: (per-km zone, split distance in metres).
SPLIT_ZONES: Mapping[str, tuple[str, int]] = MappingProxyType(
    {
        "T 400m": ("T Km", 400),
        "I 400m": ("I Km", 400),
        "I 800m": ("I Km", 800),
        "I 1200m": ("I Km", 1200),
        "R 200m": ("R 1000m", 200),
        "R 400m": ("R 1000m", 400),
        "R 600m": ("R 1000m", 600),
        "R 800m": ("R 1000m", 800),
    }
)

_MARATHON_KEY = "42km"
_BISECTION_STEPS = 60


@dataclass(frozen=True)
class RaceReference:
    """Predicted finish times (``HH:MM:SS``) per distance key for one parameter."""

    parameter: int
    times: Mapping[str, str]


@dataclass(frozen=True)
class PaceReference:
    """Named training paces (``M:SS``) for one parameter."""

    parameter: int
    paces: Mapping[str, str]


@dataclass(frozen=True)
class ReferenceTables:
    """Immutable race and pace tables, one row per parameter, ascending."""

    races: tuple[RaceReference, ...]
    paces: tuple[PaceReference, ...]

    def race_row(self, parameter: int) -> RaceReference | None:
        for row in self.races:
            if row.parameter == parameter:
                return row
        return None

    def pace_row(self, parameter: int) -> PaceReference | None:
        for row in self.paces:
            if row.parameter == parameter:
                return row
        return None


# ---------------------------------------------------------------------------
# Daniels & Gilbert equations
# ---------------------------------------------------------------------------


def oxygen_cost(velocity_m_per_min: float) -> float:
    """VO2 (ml/kg/min) required to run at *velocity_m_per_min*."""
    v = velocity_m_per_min
    return -4.60 + 0.182258 * v + 0.000104 * v * v


def fraction_of_vo2max(duration_min: float) -> float:
    """Fraction of VO2max sustainable for a race lasting *duration_min*."""
    t = duration_min
    return 0.8 + 0.1894393 * math.exp(-0.012778 * t) + 0.2989558 * math.exp(-0.1932605 * t)


def velocity_at_vo2(vo2: float) -> float:
    """Inverse of :func:`oxygen_cost` (positive root), in m/min."""
    a, b, c = 0.000104, 0.182258, -4.60 - vo2
    return (-b + math.sqrt(b * b - 4 * a * c)) / (2 * a)


def predict_race_seconds(parameter: float, distance_km: float) -> float:
    """Race time in seconds for *distance_km* at performance *parameter*.

    Bisection on the race duration; the implied VDOT decreases
    monotonically as the duration grows.
    """
    distance_m = distance_km * 1000
    low, high = 1.0, 1000.0
    for _ in range(_BISECTION_STEPS):
        mid = (low + high) / 2
        implied = oxygen_cost(distance_m / mid) / fraction_of_vo2max(mid)
        if implied > parameter:
            low = mid
        else:
            high = mid
    return (low + high) / 2 * 60


def zone_pace_seconds(parameter: float, intensity: float) -> float:
    """Seconds per km at *intensity* times the parameter's VO2."""
    return 60_000 / velocity_at_vo2(parameter * intensity)


# ---------------------------------------------------------------------------
# Table construction
# ---------------------------------------------------------------------------


def _race_row(parameter: int) -> RaceReference:
    times = {
        key: seconds_to_time(predict_race_seconds(parameter, km))
        for key, km in RACE_DISTANCES_KM.items()
    }
    return RaceReference(parameter=parameter, times=MappingProxyType(times))


def _pace_row(parameter: int, marathon_time: str) -> PaceReference:
    per_km = {zone: zone_pace_seconds(parameter, k) for zone, k in ZONE_INTENSITY.items()}
    h, m, s = (int(p) for p in marathon_time.split(":"))
    per_km["M Km"] = (h * 3600 + m * 60 + s) / RACE_DISTANCES_KM[_MARATHON_KEY]

    paces = {zone: seconds_to_pace(sec) for zone, sec in per_km.items()}
    for split, (zone, metres) in SPLIT_ZONES.items():
        paces[split] = seconds_to_pace(per_km[zone] * metres / 1000)
    return PaceReference(parameter=parameter, paces=MappingProxyType(paces))


def build_reference_tables(
    min_parameter: int = MIN_PARAMETER,
    max_parameter: int = MAX_PARAMETER,
) -> ReferenceTables:
    """Compute the tables for every integer parameter in the inclusive range."""
    races: list[RaceReference] = []
    paces: list[PaceReference] = []
    for parameter in range(min_parameter, max_parameter + 1):
        race = _race_row(parameter)
        races.append(race)
        paces.append(_pace_row(parameter, race.times[_MARATHON_KEY]))
    return ReferenceTables(races=tuple(races), paces=tuple(paces))


@lru_cache(maxsize=1)
def load_reference_tables() -> ReferenceTables:
    """Process-wide tables, built on first use."""
    return build_reference_tables()
