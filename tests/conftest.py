"""Shared test fixtures: reference tables, flat paces, a sample plan and a
service context over a temporary document store."""

from __future__ import annotations

from datetime import datetime
from typing import Callable

import pytest

from pace_engine.math.reference_tables import ReferenceTables, load_reference_tables
from pace_engine.models import Activity, Plan
from pace_engine.pace_resolver import resolve_activity_pace
from training_api.services.context import Caller, ServiceContext
from training_store import JsonDocumentStore, PlanRepository

# Wednesday of the sample plan's first week.
FIXED_NOW = datetime(2024, 6, 12, 8, 30)


@pytest.fixture(scope="session")
def tables() -> ReferenceTables:
    return load_reference_tables()


@pytest.fixture
def flat_paces() -> dict[str, str]:
    """Single-value paces, so volumes are easy to check by hand."""
    return {
        "Easy Km": "5:30",
        "Recovery Km": "6:00",
        "M Km": "5:00",
        "T Km": "4:30",
        "I Km": "4:00",
        "R 1000m": "3:45",
    }


@pytest.fixture
def pace_fn(flat_paces) -> Callable[[Activity], str]:
    return lambda activity: resolve_activity_pace(activity, flat_paces)


@pytest.fixture
def plan_doc() -> dict:
    """Nine days: a full first week and two days of a second."""
    return {
        "path": "10km-test",
        "name": "10 km Test Plan",
        "coach": "Carlos Mota",
        "nivel": "intermediário",
        "duration": "2 semanas",
        "volume": "40 km/semana",
        "info": "Plano de teste com intervalados",
        "distances": ["10km"],
        "activities": ["easy", "interval", "long"],
        "dailyWorkouts": [
            {"activities": [{"type": "easy", "distance": 8, "units": "km"}]},
            {"activities": [{"type": "offday"}], "note": "Descanso"},
            {
                "activities": [
                    {
                        "type": "interval",
                        "units": "km",
                        "activity": "I",
                        "workouts": [
                            {"series": [{"sets": "5x", "work": "1 km", "rest": "2 min"}]}
                        ],
                    }
                ]
            },
            {"activities": [{"type": "threshold", "distance": 20, "units": "min", "activity": "T"}]},
            {"activities": [{"type": "walk", "distance": 30, "units": "min"}]},
            {"activities": [{"type": "recovery", "distance": 5, "units": "km"}]},
            {"activities": [{"type": "long", "distance": 16, "units": "km"}]},
            {"activities": [{"type": "easy", "distance": 6, "units": "km"}]},
            {"activities": [{"type": "race", "distance": 10, "units": "km"}]},
        ],
    }


@pytest.fixture
def plan(plan_doc) -> Plan:
    return Plan.from_document(plan_doc)


@pytest.fixture
def store(tmp_path) -> JsonDocumentStore:
    return JsonDocumentStore(tmp_path / "data")


@pytest.fixture
def ctx(store, tables, plan) -> ServiceContext:
    """Context with the sample plan stored and the clock frozen at FIXED_NOW."""
    PlanRepository(store).save(plan)
    return ServiceContext.from_store(
        store,
        tables=tables,
        clock=lambda: FIXED_NOW,
        strava_client_id="client-id",
        strava_client_secret="client-secret",
        admin_emails=frozenset({"coach@example.com"}),
    )


@pytest.fixture
def runner() -> Caller:
    return Caller(user_id="runner-1", email="runner@example.com")


@pytest.fixture
def admin() -> Caller:
    return Caller(user_id="admin-1", email="Coach@Example.com")
