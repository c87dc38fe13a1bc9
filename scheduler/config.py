"""Environment-variable-based configuration for the nightly Strava import."""

from __future__ import annotations

import os
from pathlib import Path

TRAINING_DATA_DIR: Path = Path(os.environ.get("TRAINING_DATA_DIR", "data")).expanduser()
NIGHTLY_HOUR: int = int(os.environ.get("SCHEDULER_HOUR", "3"))
NIGHTLY_MINUTE: int = int(os.environ.get("SCHEDULER_MINUTE", "0"))
STRAVA_IMPORT_DAYS: int = int(os.environ.get("STRAVA_IMPORT_DAYS", "2"))
STRAVA_IMPORT_PER_PAGE: int = int(os.environ.get("STRAVA_IMPORT_PER_PAGE", "50"))
