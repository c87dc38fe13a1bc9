"""Per-activity target paces.

:func:`resolve_paces` turns a user's :class:`CustomPaceSettings` into a
:class:`PaceContext` (parameter, named paces, race predictor).
:func:`resolve_activity_pace` picks the display pace for one activity.
``"N/A"`` is a normal result meaning "no pace applies".
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping

from pace_engine.math.pace import (
    adjust_pace,
    create_range_pace,
    is_range_pace,
    normalize_range_pace,
    offset_pace,
)
from pace_engine.math.pace_lookup import (
    RacePredictor,
    find_closest_parameter,
    find_pace_values,
    make_race_predictor,
)
from pace_engine.math.reference_tables import ReferenceTables, load_reference_tables
from pace_engine.math.volume import NO_PACE
from pace_engine.models.activity import Activity
from pace_engine.models.enums import CUSTOM_PREFIX, RACE_PACE_ZONE, RANGE_ZONES, ActivityType
from pace_engine.models.profile import (
    DEFAULT_BASE_DISTANCE,
    DEFAULT_BASE_TIME,
    CustomPaceSettings,
)

logger = logging.getLogger(__name__)

WALK_OFFSET_S = 120

ACTIVITY_TYPE_TO_ZONE: Mapping[ActivityType, str] = MappingProxyType(
    {
        ActivityType.EASY: "Easy Km",
        ActivityType.RECOVERY: "Recovery Km",
        ActivityType.THRESHOLD: "T Km",
        ActivityType.INTERVAL: "I Km",
        ActivityType.REPETITION: "R 1000m",
        ActivityType.LONG: "M Km",
        ActivityType.MARATHON: "M Km",
        ActivityType.RACE: RACE_PACE_ZONE,
    }
)

# Intensity descriptors written in plans (letters, English, Portuguese).
DESCRIPTOR_TO_ZONE: Mapping[str, str] = MappingProxyType(
    {
        "e": "Easy Km",
        "easy": "Easy Km",
        "fácil": "Easy Km",
        "facil": "Easy Km",
        "rodagem": "Easy Km",
        "recovery": "Recovery Km",
        "recuperação": "Recovery Km",
        "recuperacao": "Recovery Km",
        "m": "M Km",
        "marathon": "M Km",
        "maratona": "M Km",
        "long": "M Km",
        "longo": "M Km",
        "t": "T Km",
        "threshold": "T Km",
        "limiar": "T Km",
        "tempo": "T Km",
        "i": "I Km",
        "interval": "I Km",
        "intervalo": "I Km",
        "r": "R 1000m",
        "repetition": "R 1000m",
        "repetição": "R 1000m",
        "repeticao": "R 1000m",
    }
)


@dataclass(frozen=True)
class PaceContext:
    """Everything needed to price activities for one user and plan."""

    parameter: int | None
    paces: Mapping[str, str] = field(default_factory=dict)
    predictor: RacePredictor | None = None

    def pace_for(self, activity: Activity) -> str:
        return resolve_activity_pace(activity, self.paces, self.predictor)


# ---------------------------------------------------------------------------
# Context construction
# ---------------------------------------------------------------------------


def resolve_paces(
    settings: CustomPaceSettings | None = None,
    tables: ReferenceTables | None = None,
) -> PaceContext:
    """Build the pace context for *settings* (defaults when None).

    Base paces come from the closest parameter to the reference time,
    are scaled by ``adjustment_factor`` and then overlaid with the
    user's overrides.  A single override for a range zone is widened.
    """
    settings = settings or CustomPaceSettings()
    tables = tables or load_reference_tables()

    parameter = find_closest_parameter(
        settings.base_time or DEFAULT_BASE_TIME,
        settings.base_distance or DEFAULT_BASE_DISTANCE,
        tables,
    )
    if parameter is None:
        logger.warning(
            "Unresolvable reference %r over %r, using defaults",
            settings.base_time,
            settings.base_distance,
        )
        parameter = find_closest_parameter(DEFAULT_BASE_TIME, DEFAULT_BASE_DISTANCE, tables)

    paces = dict(find_pace_values(parameter, tables) or {})
    if settings.adjustment_factor != 100:
        paces = {
            zone: adjust_pace(pace, settings.adjustment_factor) or pace
            for zone, pace in paces.items()
        }

    for zone, raw in settings.custom_paces.items():
        pace = normalize_range_pace(raw)
        if not pace:
            continue
        if zone in RANGE_ZONES and not is_range_pace(pace):
            pace = create_range_pace(pace)
        paces[zone] = pace

    return PaceContext(
        parameter=parameter,
        paces=MappingProxyType(paces),
        predictor=make_race_predictor(parameter, tables),
    )


# ---------------------------------------------------------------------------
# Activity pace
# ---------------------------------------------------------------------------


def zone_pace(paces: Mapping[str, str], zone: str) -> str:
    """Pace for *zone*, preferring a ``custom_<zone>`` entry; ``""`` if none."""
    for key in (f"{CUSTOM_PREFIX}{zone}", zone):
        pace = normalize_range_pace(paces.get(key))
        if pace:
            return pace
    return ""


def descriptor_zone(descriptor: str | None) -> str | None:
    """Zone named by an intensity descriptor (``"T"``, ``"limiar"``, ``"I Km"``)."""
    if not descriptor:
        return None
    key = descriptor.strip().lower()
    if key in DESCRIPTOR_TO_ZONE:
        return DESCRIPTOR_TO_ZONE[key]
    for zone in ACTIVITY_TYPE_TO_ZONE.values():
        if zone.lower() == key:
            return zone
    return None


def resolve_activity_pace(
    activity: Activity,
    paces: Mapping[str, str],
    predictor: RacePredictor | None = None,
) -> str:
    """Display pace for *activity*, or ``"N/A"``.

    Decision order: race prediction for a numeric race distance, walk
    (recovery plus two minutes on each bound), explicit intensity
    descriptor, then the activity's own type.
    """
    if (
        activity.type == ActivityType.RACE
        and activity.distance_km
        and predictor is not None
    ):
        prediction = predictor(activity.distance_km)
        if prediction is not None and prediction.pace:
            return prediction.pace

    if activity.type == ActivityType.WALK:
        recovery = zone_pace(paces, "Recovery Km")
        walk = offset_pace(recovery, WALK_OFFSET_S) if recovery else ""
        return walk or NO_PACE

    zone = descriptor_zone(activity.descriptor)
    if zone is not None:
        pace = zone_pace(paces, zone)
        if pace:
            return pace

    zone = ACTIVITY_TYPE_TO_ZONE.get(activity.type)
    if zone is not None:
        pace = zone_pace(paces, zone)
        if pace:
            return pace

    return NO_PACE
