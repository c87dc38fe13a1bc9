"""Custom exception hierarchy for the Strava client."""

from __future__ import annotations


class StravaClientError(Exception):
    """Base exception for all strava_client errors."""


class StravaAuthError(StravaClientError):
    """Token missing, expired beyond refresh, or refresh rejected."""


class StravaAPIError(StravaClientError):
    """A Strava API call returned an error response."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class StravaRateLimitError(StravaAPIError):
    """HTTP 429, too many requests."""

    def __init__(self, message: str = "Rate limited by Strava") -> None:
        super().__init__(message, status_code=429)
