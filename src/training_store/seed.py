"""Load plan files into the ``plans`` collection.

Usage:
    python -m training_store.seed sample_plans
    python -m training_store.seed sample_plans --data-dir data --drop

The source directory holds ``index.json`` (a list of plan metadata
objects, each with a ``path``) and one ``<path>.json`` per plan with
its list of daily workouts.
"""

from __future__ import annotations

import argparse
import json
import logging
import os
from pathlib import Path

from pace_engine.models import Plan

from training_store.document_store import JsonDocumentStore
from training_store.repositories import PLANS, PlanRepository

logger = logging.getLogger(__name__)

INDEX_FILE = "index.json"


def load_plans(source_dir: Path | str) -> list[Plan]:
    """Read the index and each plan's daily workouts from *source_dir*.

    A plan whose workouts file is missing is loaded with no days.
    """
    source_dir = Path(source_dir)
    with open(source_dir / INDEX_FILE, encoding="utf-8") as f:
        index = json.load(f)

    plans: list[Plan] = []
    for meta in index:
        path = meta.get("path")
        if not path:
            logger.warning("Skipping index entry without path: %r", meta.get("name"))
            continue
        workouts_file = source_dir / f"{path}.json"
        daily: list = []
        if workouts_file.exists():
            with open(workouts_file, encoding="utf-8") as f:
                daily = json.load(f)
        else:
            logger.warning("Workouts file not found for %s", path)
        plans.append(Plan.from_document({**meta, "dailyWorkouts": daily}))
    return plans


def seed_plans(store: JsonDocumentStore, source_dir: Path | str, drop: bool = False) -> int:
    """Write every plan from *source_dir* into *store*; returns the count."""
    if drop:
        store.drop(PLANS)
    repo = PlanRepository(store)
    plans = load_plans(source_dir)
    for plan in plans:
        repo.save(plan)
    logger.info("Seeded %d plans from %s", len(plans), source_dir)
    return len(plans)


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Load training plans into the document store")
    parser.add_argument("source", help="Directory with index.json and <path>.json files")
    parser.add_argument(
        "--data-dir",
        default=os.environ.get("TRAINING_DATA_DIR", "data"),
        help="Document store root (default: $TRAINING_DATA_DIR or ./data)",
    )
    parser.add_argument("--drop", action="store_true", help="Remove existing plans first")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    seed_plans(JsonDocumentStore(args.data_dir), args.source, drop=args.drop)


if __name__ == "__main__":
    main()
