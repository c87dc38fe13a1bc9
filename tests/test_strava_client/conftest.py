"""Fixtures with realistic Strava API response dicts for testing."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest


@pytest.fixture
def strava_run() -> dict:
    """Summary activity as returned by /athlete/activities."""
    return {
        "id": 11234567890,
        "name": "Morning Run",
        "type": "Run",
        "sport_type": "Run",
        "distance": 10020.5,
        "moving_time": 2700,
        "elapsed_time": 2815,
        "total_elevation_gain": 42.0,
        "start_date": "2024-06-12T09:05:11Z",
        "start_date_local": "2024-06-12T06:05:11Z",
        "timezone": "(GMT-03:00) America/Sao_Paulo",
        "average_speed": 3.711,
        "max_speed": 4.9,
        "average_heartrate": 152.3,
        "max_heartrate": 171.0,
        "average_cadence": 86.5,
    }


@pytest.fixture
def strava_strength() -> dict:
    return {
        "id": 11234567999,
        "name": "Gym",
        "type": "WeightTraining",
        "sport_type": "WeightTraining",
        "distance": 0.0,
        "moving_time": 2400,
        "start_date_local": "2024-06-11T18:00:00Z",
    }


@pytest.fixture
def token_response() -> dict:
    """Strava /oauth/token refresh response."""
    return {
        "token_type": "Bearer",
        "access_token": "new-access",
        "expires_at": 1718200000,
        "expires_in": 21600,
        "refresh_token": "new-refresh",
    }


@pytest.fixture
def make_response():
    """Factory for mocked requests responses."""

    def _make(status_code: int = 200, payload=None) -> MagicMock:
        resp = MagicMock()
        resp.status_code = status_code
        resp.json.return_value = payload
        return resp

    return _make
