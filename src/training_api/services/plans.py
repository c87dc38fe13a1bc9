"""Plan catalogue and the rendered plan schedule."""

from __future__ import annotations

import logging
import unicodedata
from dataclasses import dataclass
from datetime import date
from typing import Any

from pace_engine.math.pace import convert_minutes_to_hours
from pace_engine.math.reference_tables import RACE_DISTANCES_KM, ReferenceTables
from pace_engine.math.volume import (
    Volume,
    WeeklyStats,
    calculate_day_volume,
    calculate_weekly_stats,
)
from pace_engine.models import (
    Activity,
    ActivityType,
    CustomPaceSettings,
    Plan,
    PredictedRaceTime,
    ScheduledDay,
)
from pace_engine.pace_resolver import PaceContext, resolve_paces
from pace_engine.schedule import organize_weekly_blocks, parse_iso_date, plan_end_date

from training_api.errors import NotFoundError
from training_api.services.context import ServiceContext

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ActivityView:
    activity: Activity
    pace: str
    prediction: PredictedRaceTime | None = None

    def to_dict(self) -> dict[str, Any]:
        out = {**self.activity.to_dict(), "pace": self.pace}
        if self.prediction is not None:
            out["predictedTime"] = self.prediction.time
        return out


@dataclass(frozen=True)
class DayView:
    day: ScheduledDay
    activities: tuple[ActivityView, ...]
    volume: Volume

    def to_dict(self) -> dict[str, Any]:
        return {
            "index": self.day.index,
            "date": self.day.date.isoformat(),
            "displayDate": self.day.display_date,
            "note": self.day.note,
            "isToday": self.day.is_today,
            "isPast": self.day.is_past,
            "activities": [a.to_dict() for a in self.activities],
            "volume": _volume_dict(self.volume),
        }


@dataclass(frozen=True)
class WeekView:
    week_start: date
    days: tuple[DayView, ...]
    stats: WeeklyStats

    def to_dict(self) -> dict[str, Any]:
        return {
            "weekStart": self.week_start.isoformat(),
            "days": [d.to_dict() for d in self.days],
            "weeklyVolume": _volume_dict(self.stats.volume),
            "totalWorkouts": self.stats.total_workouts,
        }


@dataclass(frozen=True)
class PlanView:
    """A plan laid out on the calendar with paces and volumes for one user."""

    plan: Plan
    settings: CustomPaceSettings
    context: PaceContext
    start_date: date
    end_date: date
    weeks: tuple[WeekView, ...]
    predictions: dict[str, str]

    def to_dict(self) -> dict[str, Any]:
        return {
            "plan": self.plan.summary(),
            "parameter": self.context.parameter,
            "paces": dict(self.context.paces),
            "predictions": self.predictions,
            "settings": self.settings.to_dict(),
            "startDate": self.start_date.isoformat(),
            "endDate": self.end_date.isoformat(),
            "weeks": [w.to_dict() for w in self.weeks],
        }


def _volume_dict(volume: Volume) -> dict[str, Any]:
    return {
        "km": round(volume.km, 2),
        "minutes": round(volume.minutes, 1),
        "duration": convert_minutes_to_hours(volume.minutes),
    }


def _fold(text: str) -> str:
    """Lower-case and strip accents for search matching."""
    normalized = unicodedata.normalize("NFKD", text or "")
    return "".join(c for c in normalized if not unicodedata.combining(c)).lower()


# ---------------------------------------------------------------------------
# Catalogue
# ---------------------------------------------------------------------------


def list_plan_summaries(
    ctx: ServiceContext,
    nivel: str | None = None,
    coach: str | None = None,
    distance: str | None = None,
    search: str | None = None,
) -> list[dict[str, Any]]:
    """Plan metadata filtered by level, coach, target distance and free text."""
    summaries = ctx.plans.list_summaries()
    if nivel:
        summaries = [s for s in summaries if _fold(s["nivel"]) == _fold(nivel)]
    if coach:
        summaries = [s for s in summaries if _fold(coach) in _fold(s["coach"])]
    if distance:
        summaries = [s for s in summaries if distance in s["distances"]]
    if search:
        needle = _fold(search)
        summaries = [
            s
            for s in summaries
            if any(needle in _fold(s[key]) for key in ("name", "coach", "info"))
        ]
    return summaries


def get_plan(ctx: ServiceContext, path: str) -> Plan:
    plan = ctx.plans.get(path)
    if plan is None:
        raise NotFoundError("Plan not found")
    return plan


# ---------------------------------------------------------------------------
# Schedule
# ---------------------------------------------------------------------------


def race_predictions(context: PaceContext, tables: ReferenceTables) -> dict[str, str]:
    """Predicted time for every race distance at the context's parameter."""
    if context.parameter is None:
        return {}
    row = tables.race_row(context.parameter)
    if row is None:
        return {}
    return {key: row.times[key] for key in RACE_DISTANCES_KM if key in row.times}


def _activity_view(activity: Activity, context: PaceContext) -> ActivityView:
    prediction = None
    if activity.type == ActivityType.RACE and activity.distance_km and context.predictor:
        prediction = context.predictor(activity.distance_km)
    return ActivityView(activity=activity, pace=context.pace_for(activity), prediction=prediction)


def build_plan_view(
    plan: Plan,
    settings: CustomPaceSettings | None,
    today: date,
    tables: ReferenceTables,
    start_date: str | date | None = None,
    locale: str = "en",
) -> PlanView:
    """Lay *plan* out from the chosen start date with the user's paces.

    The start date is *start_date*, else the settings' start date, else
    *today*.
    """
    settings = settings or CustomPaceSettings()
    start = parse_iso_date(start_date) or parse_iso_date(settings.start_date) or today
    context = resolve_paces(settings, tables)

    blocks = organize_weekly_blocks(plan.daily_workouts, start, today=today, locale=locale)
    weeks = []
    for block in blocks:
        days = tuple(
            DayView(
                day=day,
                activities=tuple(_activity_view(a, context) for a in day.activities),
                volume=calculate_day_volume(day.activities, context.pace_for),
            )
            for day in block.days
        )
        weeks.append(
            WeekView(
                week_start=block.week_start,
                days=days,
                stats=calculate_weekly_stats(block.days, context.pace_for),
            )
        )
    logger.debug("Built view of %s from %s (%d weeks)", plan.path, start, len(weeks))
    return PlanView(
        plan=plan,
        settings=settings,
        context=context,
        start_date=start,
        end_date=plan_end_date(start, plan.days_count),
        weeks=tuple(weeks),
        predictions=race_predictions(context, tables),
    )


def get_plan_view(
    ctx: ServiceContext,
    path: str,
    user_id: str | None = None,
    start_date: str | None = None,
) -> PlanView:
    """Plan view using the user's saved settings for *path* when known."""
    plan = get_plan(ctx, path)
    settings = None
    if user_id:
        profile = ctx.profiles.get(user_id)
        if profile is not None:
            settings = profile.settings_for(path)
    return build_plan_view(
        plan,
        settings,
        ctx.today(),
        ctx.tables,
        start_date=start_date,
        locale=ctx.locale,
    )
