"""Planned activities: a tagged union of simple and interval-series shapes.

Plan documents store activities as loosely-typed dicts (``distance`` may
be a number or a string, ``workouts`` may or may not carry ``series``).
:func:`parse_activity` validates that shape once, at the loading
boundary, and returns either a :class:`SimpleActivity` or an
:class:`IntervalActivity`.  Calculation code dispatches on the class.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Mapping, Union

from pace_engine.models.enums import REST_TYPES, ActivityType, Units

_LEADING_NUMBER = re.compile(r"^\s*(\d+(?:[.,]\d+)?)")


@dataclass(frozen=True)
class Series:
    """One repeated block of an interval workout, e.g. ``5x`` of ``1 km``."""

    sets: str = ""
    work: str = ""
    rest: str | None = None
    distance: str | None = None

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"sets": self.sets, "work": self.work}
        if self.rest is not None:
            out["rest"] = self.rest
        if self.distance is not None:
            out["distance"] = self.distance
        return out


@dataclass(frozen=True)
class Workout:
    """A structured workout attached to an activity (note, link, series)."""

    note: str | None = None
    link: str | None = None
    series: tuple[Series, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {}
        if self.note is not None:
            out["note"] = self.note
        if self.link is not None:
            out["link"] = self.link
        if self.series:
            out["series"] = [s.to_dict() for s in self.series]
        return out


class _ActivityMixin:
    """Behaviour shared by both activity shapes."""

    type: ActivityType
    amount: float | None
    units: Units
    distance_label: str | None
    descriptor: str | None
    note: str | None
    workouts: tuple[Workout, ...]

    @property
    def is_rest(self) -> bool:
        return self.type in REST_TYPES

    @property
    def distance_km(self) -> float | None:
        """Numeric distance in km, or None for time-based activities."""
        if self.units == Units.KM:
            return self.amount
        return None

    @property
    def duration_min(self) -> float | None:
        if self.units == Units.MIN:
            return self.amount
        return None

    def to_dict(self) -> dict[str, Any]:
        distance: Any
        if self.distance_label is not None:
            distance = self.distance_label
        elif self.amount is not None and float(self.amount).is_integer():
            distance = int(self.amount)
        else:
            distance = self.amount
        out: dict[str, Any] = {
            "type": self.type.value,
            "distance": distance,
            "units": self.units.value,
        }
        if self.descriptor is not None:
            out["activity"] = self.descriptor
        if self.note is not None:
            out["note"] = self.note
        if self.workouts:
            out["workouts"] = [w.to_dict() for w in self.workouts]
        return out


@dataclass(frozen=True)
class SimpleActivity(_ActivityMixin):
    """A single continuous effort measured in km or minutes.

    ``workouts`` may hold notes and links but never series.
    """

    type: ActivityType
    amount: float | None = None
    units: Units = Units.KM
    distance_label: str | None = None
    descriptor: str | None = None
    note: str | None = None
    workouts: tuple[Workout, ...] = ()


@dataclass(frozen=True)
class IntervalActivity(_ActivityMixin):
    """An activity with at least one workout carrying interval series."""

    type: ActivityType
    workouts: tuple[Workout, ...]
    amount: float | None = None
    units: Units = Units.KM
    distance_label: str | None = None
    descriptor: str | None = None
    note: str | None = None

    @property
    def series(self) -> tuple[Series, ...]:
        """All series across every workout, in order."""
        return tuple(s for w in self.workouts for s in w.series)


Activity = Union[SimpleActivity, IntervalActivity]


@dataclass(frozen=True)
class DayRecord:
    """One calendar day of a plan: ordered activities and an optional note."""

    activities: tuple[Activity, ...] = ()
    note: str | None = None

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"activities": [a.to_dict() for a in self.activities]}
        if self.note is not None:
            out["note"] = self.note
        return out


# ---------------------------------------------------------------------------
# Parsing (document dict -> model)
# ---------------------------------------------------------------------------


def parse_amount(value: Any) -> float | None:
    """Parse a distance/duration the way ``parseFloat`` reads a prefix.

    ``8`` -> 8.0, ``"10"`` -> 10.0, ``"12 km"`` -> 12.0, ``"livre"`` -> None.
    """
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        match = _LEADING_NUMBER.match(value)
        if match:
            return float(match.group(1).replace(",", "."))
    return None


def _optional_str(value: Any) -> str | None:
    if value is None:
        return None
    return str(value)


def parse_series(raw: Mapping[str, Any]) -> Series:
    return Series(
        sets=str(raw.get("sets") or ""),
        work=str(raw.get("work") or ""),
        rest=_optional_str(raw.get("rest")),
        distance=_optional_str(raw.get("distance")),
    )


def parse_workout(raw: Mapping[str, Any]) -> Workout:
    series = tuple(
        parse_series(s) for s in (raw.get("series") or ()) if isinstance(s, Mapping)
    )
    return Workout(
        note=_optional_str(raw.get("note")),
        link=_optional_str(raw.get("link")),
        series=series,
    )


def parse_activity(raw: Mapping[str, Any]) -> Activity:
    """Validate one activity dict and return the matching union member."""
    distance = raw.get("distance")
    workouts = tuple(
        parse_workout(w) for w in (raw.get("workouts") or ()) if isinstance(w, Mapping)
    )
    common = dict(
        type=ActivityType.parse(raw.get("type")),
        amount=parse_amount(distance),
        units=Units.parse(raw.get("units")),
        distance_label=distance if isinstance(distance, str) else None,
        descriptor=_optional_str(raw.get("activity")),
        note=_optional_str(raw.get("note")),
    )
    if any(w.series for w in workouts):
        return IntervalActivity(workouts=workouts, **common)
    return SimpleActivity(workouts=workouts, **common)


def parse_day_record(raw: Mapping[str, Any]) -> DayRecord:
    activities = tuple(
        parse_activity(a) for a in (raw.get("activities") or ()) if isinstance(a, Mapping)
    )
    return DayRecord(activities=activities, note=_optional_str(raw.get("note")))
