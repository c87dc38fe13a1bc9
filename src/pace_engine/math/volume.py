"""Daily and weekly volume (distance and time) of planned activities.

Distance and time are cross-converted with the activity's resolved pace
whenever only one of the two is given.  Malformed work strings and
unresolvable paces contribute zero; nothing here raises.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, replace
from typing import Callable, Iterable, Protocol, Sequence

from pace_engine.math.pace import pace_to_minutes
from pace_engine.models.activity import Activity, IntervalActivity, Series
from pace_engine.models.enums import ActivityType, Units

PaceFn = Callable[[Activity], str]

NO_PACE = "N/A"

_WORK = re.compile(r"^(\d+(?:\.\d+)?)\s*([a-z]+)(?:\s.*)?$")
_REPS = re.compile(r"^(\d+)x")

_KM_UNITS = frozenset({"km", "kms"})
_METRE_UNITS = frozenset({"m", "metros"})
_MINUTE_UNITS = frozenset({"min", "mins", "minutos"})
_SECOND_UNITS = frozenset({"s", "seg", "segundos"})

_WARMUP_TOKENS = ("aquecimento", "desaquecimento")
_STANDING_REST_TOKENS = ("descanso", "entre", "standing")


@dataclass(frozen=True)
class Volume:
    """Distance in km and time in minutes."""

    km: float = 0.0
    minutes: float = 0.0

    def __add__(self, other: Volume) -> Volume:
        return Volume(self.km + other.km, self.minutes + other.minutes)


@dataclass(frozen=True)
class WeeklyStats:
    volume: Volume
    total_workouts: int


class _HasActivities(Protocol):
    activities: Sequence[Activity]


class _HasDays(Protocol):
    days: Sequence[_HasActivities]


# ---------------------------------------------------------------------------
# Parsing helpers
# ---------------------------------------------------------------------------


def parse_work(work: str | None) -> Volume:
    """Parse ``"400 m"``, ``"20min"``, ``"2 km aquecimento"`` into a Volume.

    Exactly one of ``km``/``minutes`` is non-zero for a valid string.
    """
    if not work or not isinstance(work, str):
        return Volume()
    match = _WORK.match(work.lower().strip())
    if not match:
        return Volume()
    value, unit = float(match.group(1)), match.group(2)
    if unit in _KM_UNITS:
        return Volume(km=value)
    if unit in _METRE_UNITS:
        return Volume(km=value / 1000)
    if unit in _MINUTE_UNITS:
        return Volume(minutes=value)
    if unit in _SECOND_UNITS:
        return Volume(minutes=value / 60)
    return Volume()


def extract_repetitions(sets: str | None) -> int:
    """``"5x"`` -> 5; missing or unparseable -> 1."""
    if not sets:
        return 1
    match = _REPS.match(sets.strip().lower())
    return int(match.group(1)) if match else 1


def _is_warmup(series: Series) -> bool:
    work = series.work.lower()
    return any(token in work for token in _WARMUP_TOKENS)


def _is_standing_rest(rest: str) -> bool:
    rest = rest.lower()
    return any(token in rest for token in _STANDING_REST_TOKENS)


def _pace_minutes(get_pace: PaceFn, activity: Activity) -> float:
    return pace_to_minutes(get_pace(activity))


# ---------------------------------------------------------------------------
# Aggregation
# ---------------------------------------------------------------------------


def _series_volume(activity: IntervalActivity, series: Series, get_pace: PaceFn) -> Volume:
    work = parse_work(series.work)
    reps = extract_repetitions(series.sets)

    if activity.type == ActivityType.RACE:
        paced = replace(activity, type=ActivityType.THRESHOLD, descriptor=None)
    elif series.distance:
        paced = replace(activity, descriptor=series.distance)
    elif _is_warmup(series):
        paced = replace(activity, type=ActivityType.EASY, descriptor=None)
    else:
        paced = activity
    pace_min = _pace_minutes(get_pace, paced)

    km, minutes = work.km, work.minutes
    if km > 0 and minutes == 0 and pace_min > 0:
        minutes = km * pace_min
    elif minutes > 0 and km == 0 and pace_min > 0:
        km = minutes / pace_min
    total = Volume(km * reps, minutes * reps)

    if not series.rest or _is_standing_rest(series.rest):
        return total

    rest = parse_work(series.rest)
    rest_km, rest_min = 0.0, 0.0
    if rest.km > 0:
        rest_km = rest.km
        if pace_min > 0:
            rest_min = rest.km * pace_min
    elif rest.minutes > 0:
        rest_min = rest.minutes
        as_recovery = replace(activity, type=ActivityType.RECOVERY, descriptor=None)
        recovery_min = _pace_minutes(get_pace, as_recovery)
        if recovery_min > 0:
            rest_km = rest.minutes / recovery_min

    rest_reps = max(0, reps - 1)
    return total + Volume(rest_km * rest_reps, rest_min * rest_reps)


def _simple_volume(activity: Activity, get_pace: PaceFn) -> Volume:
    amount = activity.amount or 0.0
    if amount <= 0:
        return Volume()

    if activity.type == ActivityType.RACE:
        pace = get_pace(replace(activity, type=ActivityType.THRESHOLD, descriptor=None))
    else:
        pace = get_pace(activity)

    if activity.units == Units.KM:
        if pace == NO_PACE:
            return Volume(km=amount)
        return Volume(km=amount, minutes=amount * pace_to_minutes(pace))

    if pace == NO_PACE:
        return Volume(minutes=amount)
    pace_min = pace_to_minutes(pace)
    return Volume(km=amount / pace_min if pace_min > 0 else 0.0, minutes=amount)


def calculate_day_volume(activities: Iterable[Activity], get_pace: PaceFn) -> Volume:
    """Sum the distance and time of one day's activities."""
    total = Volume()
    for activity in activities:
        if isinstance(activity, IntervalActivity):
            for series in activity.series:
                total = total + _series_volume(activity, series, get_pace)
        else:
            total = total + _simple_volume(activity, get_pace)
    return total


def calculate_weekly_stats(days: Iterable[_HasActivities], get_pace: PaceFn) -> WeeklyStats:
    """Volume of a run of days plus the number of non-rest activities."""
    volume = Volume()
    workouts = 0
    for day in days:
        volume = volume + calculate_day_volume(day.activities, get_pace)
        workouts += sum(1 for a in day.activities if not a.is_rest)
    return WeeklyStats(volume=volume, total_workouts=workouts)


def calculate_plan_volume(blocks: Iterable[_HasDays], get_pace: PaceFn) -> list[WeeklyStats]:
    """One :class:`WeeklyStats` per weekly block."""
    return [calculate_weekly_stats(block.days, get_pace) for block in blocks]
