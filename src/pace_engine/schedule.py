"""Weekly block organiser: place plan days on the calendar.

Day ``i`` falls on ``start + i`` days; a new block starts at every
index divisible by 7.  The current date is a parameter so results are
deterministic under test.
"""

from __future__ import annotations

import logging
from datetime import date, datetime, timedelta
from typing import Iterable, Sequence

from pace_engine.models.activity import DayRecord
from pace_engine.models.plan import PlanDay, ScheduledDay, WeeklyBlock

logger = logging.getLogger(__name__)

DAYS_PER_WEEK = 7
DEFAULT_LOCALE = "en"

_WEEKDAYS: dict[str, tuple[str, ...]] = {
    "en": ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"),
    "pt-BR": (
        "segunda-feira",
        "terça-feira",
        "quarta-feira",
        "quinta-feira",
        "sexta-feira",
        "sábado",
        "domingo",
    ),
}

_MONTHS: dict[str, tuple[str, ...]] = {
    "en": (
        "January", "February", "March", "April", "May", "June",
        "July", "August", "September", "October", "November", "December",
    ),
    "pt-BR": (
        "janeiro", "fevereiro", "março", "abril", "maio", "junho",
        "julho", "agosto", "setembro", "outubro", "novembro", "dezembro",
    ),
}


def parse_iso_date(value: str | date | None) -> date | None:
    """``"2024-06-10"`` (or an ISO timestamp) -> date; None if unparseable."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value).strip()
    try:
        return date.fromisoformat(text[:10])
    except ValueError:
        return None


def format_display_date(day: date, locale: str = DEFAULT_LOCALE) -> str:
    """``"Monday, 10 June"`` (en) or ``"segunda-feira, 10 de junho"`` (pt-BR)."""
    if locale not in _WEEKDAYS:
        locale = DEFAULT_LOCALE
    weekday = _WEEKDAYS[locale][day.weekday()]
    month = _MONTHS[locale][day.month - 1]
    if locale == "pt-BR":
        return f"{weekday}, {day.day} de {month}"
    return f"{weekday}, {day.day} {month}"


def organize_weekly_blocks(
    days: Sequence[DayRecord],
    start_date: str | date,
    today: date | None = None,
    locale: str = DEFAULT_LOCALE,
) -> list[WeeklyBlock]:
    """Group *days* into 7-day :class:`WeeklyBlock`s starting on *start_date*.

    Produces ``ceil(len(days) / 7)`` blocks; an empty plan gives ``[]``.
    An unparseable start date falls back to *today*.
    """
    today = today or date.today()
    start = parse_iso_date(start_date)
    if start is None:
        logger.warning("Invalid plan start date %r, using %s", start_date, today)
        start = today

    blocks: list[WeeklyBlock] = []
    current: list[ScheduledDay] = []
    week_start = start
    for index, record in enumerate(days):
        day_date = start + timedelta(days=index)
        if index and index % DAYS_PER_WEEK == 0:
            blocks.append(WeeklyBlock(week_start=week_start, days=tuple(current)))
            current, week_start = [], day_date
        current.append(
            ScheduledDay(
                index=index,
                date=day_date,
                display_date=format_display_date(day_date, locale),
                activities=record.activities,
                note=record.note,
                is_today=day_date == today,
                is_past=day_date < today,
            )
        )
    if current:
        blocks.append(WeeklyBlock(week_start=week_start, days=tuple(current)))
    return blocks


def prepare_plan_days(blocks: Iterable[WeeklyBlock]) -> list[PlanDay]:
    """Flatten blocks into plan days carrying their global index."""
    return [
        PlanDay(index=day.index, date=day.date, activities=day.activities)
        for block in blocks
        for day in block.days
    ]


def plan_end_date(start: date, days_count: int) -> date:
    return start + timedelta(days=days_count)


def plan_start_date(end: date, days_count: int) -> date:
    """Start date that makes a plan of *days_count* days end on *end*."""
    return end - timedelta(days=days_count)


def find_day_for_date(plan_days: Iterable[PlanDay], on_date: date) -> PlanDay | None:
    for day in plan_days:
        if day.date == on_date:
            return day
    return None
