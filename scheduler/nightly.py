"""Nightly scheduler: imports recent Strava activities for every linked user.

Usage:
    python -m scheduler.nightly --once      # single run (for cron)
    python -m scheduler.nightly --daemon    # APScheduler loop
"""

from __future__ import annotations

import argparse
import logging

from training_api.errors import ServiceError
from training_api.services.context import Caller, ServiceContext
from training_api.services.strava import import_strava_activities

from scheduler.config import (
    NIGHTLY_HOUR,
    NIGHTLY_MINUTE,
    STRAVA_IMPORT_DAYS,
    STRAVA_IMPORT_PER_PAGE,
    TRAINING_DATA_DIR,
)

logger = logging.getLogger(__name__)


def nightly_job(ctx: ServiceContext | None = None) -> dict[str, int]:
    """Run one import cycle; returns new workouts per user id.

    A failing user is logged and skipped so the others still import.
    """
    ctx = ctx or ServiceContext.from_config(TRAINING_DATA_DIR)
    profiles = ctx.profiles.linked_to_strava()
    logger.info("Starting nightly import for %d linked users", len(profiles))

    imported: dict[str, int] = {}
    for profile in profiles:
        try:
            result = import_strava_activities(
                ctx,
                Caller(user_id=profile.user_id),
                days=STRAVA_IMPORT_DAYS,
                per_page=STRAVA_IMPORT_PER_PAGE,
            )
        except ServiceError as exc:
            logger.error("Import failed for %s: %s", profile.user_id, exc.message)
            continue
        imported[profile.user_id] = result["imported"]

    logger.info(
        "Nightly import complete: %d workouts for %d users",
        sum(imported.values()),
        len(imported),
    )
    return imported


def main() -> None:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    parser = argparse.ArgumentParser(description="Nightly Strava import")
    group = parser.add_mutually_exclusive_group(required=True)
    group.add_argument("--once", action="store_true", help="Run once and exit")
    group.add_argument("--daemon", action="store_true", help="Run as APScheduler daemon")
    args = parser.parse_args()

    if args.once:
        nightly_job()
    else:
        from apscheduler.schedulers.blocking import BlockingScheduler

        scheduler = BlockingScheduler()
        scheduler.add_job(
            nightly_job,
            "cron",
            hour=NIGHTLY_HOUR,
            minute=NIGHTLY_MINUTE,
            id="nightly_import",
        )
        logger.info("Scheduler started, nightly import at %02d:%02d", NIGHTLY_HOUR, NIGHTLY_MINUTE)
        try:
            scheduler.start()
        except (KeyboardInterrupt, SystemExit):
            logger.info("Scheduler stopped")


if __name__ == "__main__":
    main()
