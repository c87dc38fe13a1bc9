"""Strava API client: all Strava network I/O lives here."""

from strava_client.activity_mapper import (
    classify_activity_type,
    map_activity,
    to_workout_log,
)
from strava_client.auth import StravaTokens, ensure_fresh_tokens, refresh_tokens
from strava_client.client import StravaClient
from strava_client.exceptions import (
    StravaAPIError,
    StravaAuthError,
    StravaClientError,
    StravaRateLimitError,
)

__all__ = [
    "StravaAPIError",
    "StravaAuthError",
    "StravaClient",
    "StravaClientError",
    "StravaRateLimitError",
    "StravaTokens",
    "classify_activity_type",
    "ensure_fresh_tokens",
    "map_activity",
    "refresh_tokens",
    "to_workout_log",
]
