"""Training plan documents and the derived calendar structures."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Any, Mapping

from pace_engine.models.activity import Activity, DayRecord, parse_day_record

_SUMMARY_FIELDS = (
    "path",
    "name",
    "coach",
    "nivel",
    "duration",
    "volume",
    "info",
    "distances",
    "activities",
)


@dataclass(frozen=True)
class Plan:
    """A named training program: metadata plus an ordered list of days."""

    path: str
    name: str
    coach: str = ""
    nivel: str = ""
    duration: str = ""
    volume: str = ""
    info: str = ""
    distances: tuple[str, ...] = ()
    activities: tuple[str, ...] = ()
    daily_workouts: tuple[DayRecord, ...] = ()

    @property
    def days_count(self) -> int:
        return len(self.daily_workouts)

    @classmethod
    def from_document(cls, doc: Mapping[str, Any]) -> Plan:
        """Build a Plan from a stored document, parsing every activity."""
        days = tuple(
            parse_day_record(d)
            for d in (doc.get("dailyWorkouts") or ())
            if isinstance(d, Mapping)
        )
        return cls(
            path=str(doc.get("path", "")),
            name=str(doc.get("name", "")),
            coach=str(doc.get("coach") or ""),
            nivel=str(doc.get("nivel") or ""),
            duration=str(doc.get("duration") or ""),
            volume=str(doc.get("volume") or ""),
            info=str(doc.get("info") or ""),
            distances=tuple(str(d) for d in (doc.get("distances") or ())),
            activities=tuple(str(a) for a in (doc.get("activities") or ())),
            daily_workouts=days,
        )

    def summary(self) -> dict[str, Any]:
        """Plan metadata without the daily workouts."""
        doc = self.to_document()
        return {k: doc[k] for k in _SUMMARY_FIELDS}

    def to_document(self) -> dict[str, Any]:
        return {
            "path": self.path,
            "name": self.name,
            "coach": self.coach,
            "nivel": self.nivel,
            "duration": self.duration,
            "volume": self.volume,
            "info": self.info,
            "distances": list(self.distances),
            "activities": list(self.activities),
            "dailyWorkouts": [d.to_dict() for d in self.daily_workouts],
        }


@dataclass(frozen=True)
class ScheduledDay:
    """A plan day placed on the calendar.

    ``index`` is the day's position in the whole plan, not in its week.
    """

    index: int
    date: date
    display_date: str
    activities: tuple[Activity, ...] = ()
    note: str | None = None
    is_today: bool = False
    is_past: bool = False


@dataclass(frozen=True)
class WeeklyBlock:
    """Seven consecutive scheduled days (the last block may be shorter)."""

    week_start: date
    days: tuple[ScheduledDay, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class PlanDay:
    """Flattened (index, date, activities) triple used by the matcher."""

    index: int
    date: date
    activities: tuple[Activity, ...] = ()


@dataclass(frozen=True)
class PredictedRaceTime:
    """Predicted finish time (``HH:MM:SS``) and the implied ``M:SS`` pace."""

    time: str
    pace: str
