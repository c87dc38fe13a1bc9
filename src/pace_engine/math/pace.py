"""Pace and time string handling.

A pace is the time per kilometre written ``"M:SS"``.  Easy and recovery
paces may be ranges ``"fast-slow"`` (e.g. ``"5:07-5:44"``).  Every
function here degrades silently: unparseable input gives ``""`` or ``0``
and nothing raises.
"""

from __future__ import annotations

import math
import re

_SUFFIX = re.compile(r"(/km|/mi|min/km|min/mi)$")
_MIN_SEC = re.compile(r"^(\d{1,2}):(\d{1,2})$")
_NUMERIC = re.compile(r"^\d+(\.\d+)?$")
_ZERO_PACES = ("0:00", "00:00")

DEFAULT_RANGE_PCT = 12.0


def _strip_suffix(pace: str) -> str:
    return _SUFFIX.sub("", pace.strip()).strip()


# ---------------------------------------------------------------------------
# Single paces
# ---------------------------------------------------------------------------


def normalize_pace(pace: str | float | None) -> str:
    """Return *pace* in canonical ``"M:SS"`` form, or ``""`` if invalid.

    Accepts ``"4:5"`` (-> ``"4:05"``), ``"05:30/km"``, ``"5:30 min/km"`` and
    fractional minutes (``"5.5"`` or ``5.5`` -> ``"5:30"``).  Zero paces are
    invalid.
    """
    if pace is None or isinstance(pace, bool):
        return ""
    if isinstance(pace, (int, float)):
        pace = repr(float(pace)) if pace >= 0 else ""
    clean = _strip_suffix(str(pace))
    if not clean or clean in _ZERO_PACES:
        return ""

    match = _MIN_SEC.match(clean)
    if match:
        minutes, seconds = int(match.group(1)), int(match.group(2))
        if seconds >= 60 or minutes == seconds == 0:
            return ""
        return f"{minutes}:{seconds:02d}"

    if _NUMERIC.match(clean):
        value = float(clean)
        minutes = math.floor(value)
        seconds = round((value - minutes) * 60)
        if seconds == 60:
            minutes, seconds = minutes + 1, 0
        if minutes == seconds == 0:
            return ""
        return f"{minutes}:{seconds:02d}"

    return ""


def seconds_to_pace(seconds: float) -> str:
    """Format seconds per km as ``"M:SS"``; ``""`` when not positive."""
    if seconds is None or seconds <= 0:
        return ""
    total = int(round(seconds))
    if total <= 0:
        return ""
    minutes, secs = divmod(total, 60)
    return f"{minutes}:{secs:02d}"


def derive_pace(distance_km: float, duration_min: float) -> str:
    """``"M:SS"`` pace from a distance and a duration; ``""`` if undefined."""
    if distance_km <= 0 or duration_min <= 0:
        return ""
    return seconds_to_pace(duration_min * 60 / distance_km)


# ---------------------------------------------------------------------------
# Ranges
# ---------------------------------------------------------------------------


def is_range_pace(pace: str | None) -> bool:
    return bool(pace) and "-" in _strip_suffix(str(pace))


def _split_range(pace: str) -> tuple[str, str]:
    low, _, high = _strip_suffix(pace).partition("-")
    return low.strip(), high.strip()


def normalize_range_pace(pace: str | None) -> str:
    """Normalise ``"5:00 - 5:40"`` to ``"5:00-5:40"``; single paces pass
    through :func:`normalize_pace`."""
    if not pace:
        return ""
    if is_range_pace(pace):
        low, high = (normalize_pace(p) for p in _split_range(pace))
        if low and high:
            return f"{low}-{high}"
        return ""
    return normalize_pace(pace)


def is_valid_pace(pace: str | None) -> bool:
    return normalize_range_pace(pace) != ""


def get_min_pace(pace: str) -> str:
    """Fast bound of a range (the pace itself when not a range)."""
    if not is_range_pace(pace):
        return pace
    return _split_range(pace)[0]


def get_max_pace(pace: str) -> str:
    """Slow bound of a range (the pace itself when not a range)."""
    if not is_range_pace(pace):
        return pace
    return _split_range(pace)[1]


def pace_to_seconds(pace: str | None) -> float:
    """Seconds per km; the average of both bounds for a range, 0 if invalid."""
    if not is_valid_pace(pace):
        return 0.0
    if is_range_pace(pace):
        low, high = _split_range(pace)  # type: ignore[arg-type]
        return (pace_to_seconds(low) + pace_to_seconds(high)) / 2
    minutes, seconds = normalize_pace(pace).split(":")
    return float(int(minutes) * 60 + int(seconds))


def get_midpoint_pace(pace: str) -> str:
    if not is_range_pace(pace):
        return pace
    return seconds_to_pace(pace_to_seconds(pace))


def create_range_pace(pace: str, range_pct: float = DEFAULT_RANGE_PCT) -> str:
    """Widen a single pace into ``"pace-slower"``, *range_pct* percent slower.

    Ranges and invalid paces are returned unchanged.
    """
    if not is_valid_pace(pace) or is_range_pace(pace):
        return pace
    seconds = pace_to_seconds(pace)
    return f"{seconds_to_pace(seconds)}-{seconds_to_pace(seconds * (1 + range_pct / 100))}"


def adjust_pace(pace: str, factor: float) -> str:
    """Scale a pace by ``factor`` percent (below 100 is faster).

    ``adjust_pace(p, 100)`` returns ``normalize_range_pace(p)``.  Ranges are
    scaled bound by bound.
    """
    if not is_valid_pace(pace) or factor is None or factor <= 0:
        return ""
    if is_range_pace(pace):
        low, high = _split_range(pace)
        return f"{adjust_pace(low, factor)}-{adjust_pace(high, factor)}"
    return seconds_to_pace(pace_to_seconds(pace) * factor / 100)


def offset_pace(pace: str, seconds: float) -> str:
    """Shift a pace (each bound of a range) by *seconds*; positive is slower."""
    if not is_valid_pace(pace):
        return ""
    if is_range_pace(pace):
        low, high = _split_range(pace)
        low_s, high_s = offset_pace(low, seconds), offset_pace(high, seconds)
        if low_s and high_s:
            return f"{low_s}-{high_s}"
        return ""
    return seconds_to_pace(pace_to_seconds(pace) + seconds)


def pace_to_minutes(pace: str | None) -> float:
    """Minutes per km as a float (range average); 0 for ``"N/A"`` or invalid."""
    return pace_to_seconds(pace) / 60


# ---------------------------------------------------------------------------
# Race times and durations
# ---------------------------------------------------------------------------


def time_to_seconds(time: str | None) -> float:
    """Seconds in ``"HH:MM:SS"`` or ``"MM:SS"``; 0 when unparseable."""
    if not time:
        return 0.0
    try:
        parts = [float(p) for p in str(time).strip().split(":")]
    except ValueError:
        return 0.0
    if len(parts) == 3:
        hours, minutes, seconds = parts
        return hours * 3600 + minutes * 60 + seconds
    if len(parts) == 2:
        minutes, seconds = parts
        return minutes * 60 + seconds
    return 0.0


def seconds_to_time(seconds: float) -> str:
    """Format a duration as zero-padded ``"HH:MM:SS"``."""
    total = max(0, int(round(seconds)))
    hours, rest = divmod(total, 3600)
    minutes, secs = divmod(rest, 60)
    return f"{hours:02d}:{minutes:02d}:{secs:02d}"


def format_time_input(value: str) -> str:
    """Mask digits typed into a time box: ``"011957"`` -> ``"01:19:57"``."""
    digits = re.sub(r"[^0-9]", "", value or "")
    if len(digits) > 4:
        return f"{digits[:2]}:{digits[2:4]}:{digits[4:6]}"
    if len(digits) > 2:
        return f"{digits[:2]}:{digits[2:]}"
    return digits


def convert_minutes_to_hours(minutes: float) -> str:
    """``45`` -> ``"45min"``, ``75`` -> ``"1h15"``."""
    if minutes <= 59:
        return f"{round(minutes)}min"
    hours = math.floor(minutes / 60)
    remaining = round(minutes % 60)
    if remaining == 60:
        hours, remaining = hours + 1, 0
    return f"{hours}h{remaining:02d}"
