"""User-side documents: pace settings, workout logs and the user profile.

Document keys keep the camelCase spelling used by stored JSON
(``baseTime``, ``planDayIndex``); attributes are snake_case.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import date, datetime
from typing import Any, Mapping

from pace_engine.models.enums import CUSTOM_PREFIX, ActivityType, WorkoutSource

DEFAULT_BASE_TIME = "00:19:57"
DEFAULT_BASE_DISTANCE = "5km"
DEFAULT_ADJUSTMENT_FACTOR = 100.0


@dataclass(frozen=True)
class CustomPaceSettings:
    """Per-user, per-plan pace configuration.

    ``custom_paces`` maps a zone name (``"Easy Km"``) to an override pace;
    it is stored flat as ``custom_<zone>`` keys.
    """

    base_time: str = DEFAULT_BASE_TIME
    base_distance: str = DEFAULT_BASE_DISTANCE
    start_date: str | None = None
    adjustment_factor: float = DEFAULT_ADJUSTMENT_FACTOR
    custom_paces: dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any] | None) -> CustomPaceSettings:
        if not raw:
            return cls()
        custom = {
            key[len(CUSTOM_PREFIX):]: str(value)
            for key, value in raw.items()
            if key.startswith(CUSTOM_PREFIX) and value not in (None, "")
        }
        try:
            factor = float(raw.get("adjustmentFactor", DEFAULT_ADJUSTMENT_FACTOR))
        except (TypeError, ValueError):
            factor = DEFAULT_ADJUSTMENT_FACTOR
        return cls(
            base_time=str(raw.get("baseTime") or DEFAULT_BASE_TIME),
            base_distance=str(raw.get("baseDistance") or DEFAULT_BASE_DISTANCE),
            start_date=raw.get("startDate") or None,
            adjustment_factor=factor,
            custom_paces=custom,
        )

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "baseTime": self.base_time,
            "baseDistance": self.base_distance,
        }
        if self.start_date:
            out["startDate"] = self.start_date
        if self.adjustment_factor != DEFAULT_ADJUSTMENT_FACTOR:
            out["adjustmentFactor"] = self.adjustment_factor
        for zone, pace in self.custom_paces.items():
            out[f"{CUSTOM_PREFIX}{zone}"] = pace
        return out


@dataclass(frozen=True)
class CompletedWorkout:
    """Summary entry kept in the user profile for each logged workout."""

    date: str
    workout_id: str
    distance: float = 0.0
    plan_path: str | None = None
    plan_day_index: int | None = None

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> CompletedWorkout:
        index = raw.get("planDayIndex")
        return cls(
            date=str(raw.get("date", "")),
            workout_id=str(raw.get("workoutId", "")),
            distance=float(raw.get("distance") or 0.0),
            plan_path=raw.get("planPath"),
            plan_day_index=int(index) if isinstance(index, (int, float)) else None,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "date": self.date,
            "workoutId": self.workout_id,
            "distance": self.distance,
            "planPath": self.plan_path,
            "planDayIndex": self.plan_day_index,
        }


@dataclass(frozen=True)
class ImportedActivity:
    """A real activity pulled from a third-party service, already in km/min."""

    external_id: str
    date: date
    sport_type: str
    name: str = ""
    distance_km: float = 0.0
    duration_min: float = 0.0
    elevation_gain: float | None = None
    average_heartrate: float | None = None
    max_heartrate: float | None = None
    average_cadence: float | None = None


@dataclass(frozen=True)
class WorkoutLog:
    """A completed workout, logged by hand or imported."""

    id: str
    user_id: str
    date: str
    title: str
    distance: float
    duration: float
    pace: str = ""
    notes: str = ""
    activity_type: ActivityType = ActivityType.EASY
    source: WorkoutSource = WorkoutSource.MANUAL
    plan_path: str | None = None
    plan_day_index: int | None = None
    strava_activity_id: str | None = None
    elevation_gain: float | None = None
    average_heartrate: float | None = None
    max_heartrate: float | None = None
    average_cadence: float | None = None
    created_at: str | None = None
    updated_at: str | None = None

    _OPTIONAL_KEYS = (
        ("planPath", "plan_path"),
        ("planDayIndex", "plan_day_index"),
        ("stravaActivityId", "strava_activity_id"),
        ("elevationGain", "elevation_gain"),
        ("averageHeartrate", "average_heartrate"),
        ("maxHeartrate", "max_heartrate"),
        ("averageCadence", "average_cadence"),
        ("createdAt", "created_at"),
        ("updatedAt", "updated_at"),
    )

    @classmethod
    def from_document(cls, doc: Mapping[str, Any]) -> WorkoutLog:
        try:
            source = WorkoutSource(doc.get("source") or WorkoutSource.MANUAL.value)
        except ValueError:
            source = WorkoutSource.MANUAL
        kwargs = {attr: doc.get(key) for key, attr in cls._OPTIONAL_KEYS}
        return cls(
            id=str(doc.get("id", "")),
            user_id=str(doc.get("userId", "")),
            date=str(doc.get("date", "")),
            title=str(doc.get("title", "")),
            distance=float(doc.get("distance") or 0.0),
            duration=float(doc.get("duration") or 0.0),
            pace=str(doc.get("pace") or ""),
            notes=str(doc.get("notes") or ""),
            activity_type=ActivityType.parse(doc.get("activityType")),
            source=source,
            **kwargs,
        )

    def to_document(self) -> dict[str, Any]:
        doc: dict[str, Any] = {
            "id": self.id,
            "userId": self.user_id,
            "date": self.date,
            "title": self.title,
            "distance": self.distance,
            "duration": self.duration,
            "pace": self.pace,
            "notes": self.notes,
            "activityType": self.activity_type.value,
            "source": self.source.value,
        }
        for key, attr in self._OPTIONAL_KEYS:
            value = getattr(self, attr)
            if value is not None:
                doc[key] = value
        return doc

    def summary_entry(self) -> CompletedWorkout:
        return CompletedWorkout(
            date=self.date,
            workout_id=self.id,
            distance=self.distance,
            plan_path=self.plan_path,
            plan_day_index=self.plan_day_index,
        )


@dataclass(frozen=True)
class UserProfile:
    """Per-user document: plans, pace settings, totals and Strava link."""

    user_id: str
    active_plan: str | None = None
    saved_plans: tuple[str, ...] = ()
    custom_paces: dict[str, CustomPaceSettings] = field(default_factory=dict)
    total_distance: float = 0.0
    completed_workouts: tuple[CompletedWorkout, ...] = ()
    streak_days: int = 0
    last_active: str | None = None
    strava: dict[str, Any] | None = None

    @classmethod
    def from_document(cls, doc: Mapping[str, Any]) -> UserProfile:
        paces = {
            path: CustomPaceSettings.from_dict(raw)
            for path, raw in (doc.get("customPaces") or {}).items()
            if isinstance(raw, Mapping)
        }
        return cls(
            user_id=str(doc.get("userId", "")),
            active_plan=doc.get("activePlan") or None,
            saved_plans=tuple(doc.get("savedPlans") or ()),
            custom_paces=paces,
            total_distance=float(doc.get("totalDistance") or 0.0),
            completed_workouts=tuple(
                CompletedWorkout.from_dict(c)
                for c in (doc.get("completedWorkouts") or ())
                if isinstance(c, Mapping)
            ),
            streak_days=int(doc.get("streakDays") or 0),
            last_active=doc.get("lastActive"),
            strava=doc.get("strava") or None,
        )

    def to_document(self) -> dict[str, Any]:
        doc: dict[str, Any] = {
            "userId": self.user_id,
            "activePlan": self.active_plan,
            "savedPlans": list(self.saved_plans),
            "customPaces": {p: s.to_dict() for p, s in self.custom_paces.items()},
            "totalDistance": round(self.total_distance, 2),
            "completedWorkouts": [c.to_dict() for c in self.completed_workouts],
            "streakDays": self.streak_days,
            "lastActive": self.last_active,
        }
        if self.strava:
            doc["strava"] = dict(self.strava)
        return doc

    def settings_for(self, plan_path: str) -> CustomPaceSettings:
        return self.custom_paces.get(plan_path) or CustomPaceSettings()

    def touched(self, now: datetime) -> UserProfile:
        return replace(self, last_active=now.isoformat(timespec="seconds"))
