"""Environment-variable-based configuration for the API and services."""

from __future__ import annotations

import os
from pathlib import Path

DATA_DIR: Path = Path(os.environ.get("TRAINING_DATA_DIR", "data")).expanduser()
STRAVA_CLIENT_ID: str = os.environ.get("STRAVA_CLIENT_ID", "")
STRAVA_CLIENT_SECRET: str = os.environ.get("STRAVA_CLIENT_SECRET", "")
ADMIN_EMAILS: frozenset[str] = frozenset(
    e.strip().lower() for e in os.environ.get("ADMIN_EMAILS", "").split(",") if e.strip()
)
DISPLAY_LOCALE: str = os.environ.get("DISPLAY_LOCALE", "en")
API_HOST: str = os.environ.get("API_HOST", "127.0.0.1")
API_PORT: int = int(os.environ.get("API_PORT", "8000"))
