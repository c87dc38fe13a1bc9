"""Enumerations shared by plan documents, workout logs and imports.

Values are the literal strings stored in plan and profile documents, so
every enum derives from ``str`` and compares equal to its raw value.
"""

from enum import Enum


class ActivityType(str, Enum):
    """Semantic type of a planned or logged activity."""

    RECOVERY = "recovery"
    EASY = "easy"
    THRESHOLD = "threshold"
    INTERVAL = "interval"
    REPETITION = "repetition"
    LONG = "long"
    MARATHON = "marathon"
    RACE = "race"
    WALK = "walk"
    OFFDAY = "offday"
    STRENGTH = "strength"
    OTHER = "other"

    @classmethod
    def parse(cls, value: object) -> "ActivityType":
        """Parse a stored type string, resolving the aliases in ``_ALIASES``.

        Unknown values map to OTHER instead of raising.
        """
        if isinstance(value, ActivityType):
            return value
        raw = str(value or "").strip().lower()
        if raw in _ALIASES:
            return cls(_ALIASES[raw])
        try:
            return cls(raw)
        except ValueError:
            return cls.OTHER


_ALIASES = {"off": "offday", "força": "strength", "forca": "strength"}


class Units(str, Enum):
    """Unit of a simple activity's amount."""

    KM = "km"
    MIN = "min"

    @classmethod
    def parse(cls, value: object) -> "Units":
        raw = str(value or "").strip().lower()
        if raw in ("min", "mins", "minutes", "minutos"):
            return cls.MIN
        return cls.KM


class WorkoutSource(str, Enum):
    """Origin of a workout log entry."""

    MANUAL = "manual"
    STRAVA = "strava"
    SYSTEM = "system"


class PlanLevel(str, Enum):
    """Plan difficulty level (``nivel`` in plan documents), easiest first."""

    BEGINNER = "iniciante"
    INTERMEDIATE = "intermediário"
    ADVANCED = "avançado"
    ELITE = "elite"


# Activity types that count as rest days in weekly statistics.
REST_TYPES: frozenset[ActivityType] = frozenset({ActivityType.OFFDAY})

# Pace zones always displayed as "fast-slow" ranges.
RANGE_ZONES: tuple[str, ...] = ("Recovery Km", "Easy Km")

# Zones persisted per user and shown in the pace settings form.
ESSENTIAL_ZONES: tuple[str, ...] = (
    "Easy Km",
    "Recovery Km",
    "T Km",
    "I Km",
    "R 1000m",
    "M Km",
)

RACE_PACE_ZONE = "Race Pace"
CUSTOM_PREFIX = "custom_"
