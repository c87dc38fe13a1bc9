"""Repositories translating stored documents to pace_engine models.

Plan documents are parsed into :class:`Plan` here, so activity shapes
are validated once when loaded.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import replace
from typing import Any, Iterable, Optional

from pace_engine.models import Plan, UserProfile, WorkoutLog

from training_store.document_store import ID_FIELD, JsonDocumentStore

logger = logging.getLogger(__name__)

PLANS = "plans"
PROFILES = "userProfiles"
WORKOUTS = "workouts"


def _strip_id(doc: dict[str, Any]) -> dict[str, Any]:
    return {k: v for k, v in doc.items() if k != ID_FIELD}


class PlanRepository:
    """Plans keyed by their path."""

    def __init__(self, store: JsonDocumentStore) -> None:
        self._store = store

    def get(self, path: str) -> Optional[Plan]:
        doc = self._store.get(PLANS, path)
        if doc is None:
            return None
        return Plan.from_document(doc)

    def exists(self, path: str) -> bool:
        return self._store.get(PLANS, path) is not None

    def list_summaries(self) -> list[dict[str, Any]]:
        """Every plan's metadata plus ``days`` (the number of plan days)."""
        summaries = []
        for doc in self._store.find(PLANS):
            plan = Plan.from_document(doc)
            summaries.append({**plan.summary(), "days": plan.days_count})
        return summaries

    def save(self, plan: Plan) -> None:
        self._store.replace(PLANS, plan.path, plan.to_document(), upsert=True)
        logger.info("Saved plan %s (%d days)", plan.path, plan.days_count)


class ProfileRepository:
    """User profiles keyed by user id."""

    def __init__(self, store: JsonDocumentStore) -> None:
        self._store = store

    def get(self, user_id: str) -> Optional[UserProfile]:
        doc = self._store.get(PROFILES, user_id)
        if doc is None:
            return None
        return UserProfile.from_document(doc)

    def get_or_new(self, user_id: str) -> UserProfile:
        """Stored profile, or an unsaved empty one."""
        return self.get(user_id) or UserProfile(user_id=user_id)

    def save(self, profile: UserProfile) -> None:
        self._store.replace(PROFILES, profile.user_id, profile.to_document(), upsert=True)

    def all(self) -> list[UserProfile]:
        return [UserProfile.from_document(d) for d in self._store.find(PROFILES)]

    def linked_to_strava(self) -> list[UserProfile]:
        return [p for p in self.all() if p.strava]


class WorkoutRepository:
    """Workout logs keyed by a generated id."""

    def __init__(self, store: JsonDocumentStore) -> None:
        self._store = store

    @staticmethod
    def new_id() -> str:
        return uuid.uuid4().hex

    def insert(self, log: WorkoutLog) -> WorkoutLog:
        if not log.id:
            log = replace(log, id=self.new_id())
        self._store.insert(WORKOUTS, log.to_document(), doc_id=log.id)
        return log

    def insert_many(self, logs: Iterable[WorkoutLog]) -> list[WorkoutLog]:
        return [self.insert(log) for log in logs]

    def get(self, workout_id: str) -> Optional[WorkoutLog]:
        doc = self._store.get(WORKOUTS, workout_id)
        if doc is None:
            return None
        return WorkoutLog.from_document(_strip_id(doc))

    def replace(self, log: WorkoutLog) -> None:
        self._store.replace(WORKOUTS, log.id, log.to_document())

    def delete(self, workout_id: str) -> bool:
        return self._store.delete(WORKOUTS, workout_id)

    def list_for_user(self, user_id: str, limit: int | None = None) -> list[WorkoutLog]:
        """The user's workouts, most recent date first."""
        docs = self._store.find(WORKOUTS, lambda d: d.get("userId") == user_id)
        logs = [WorkoutLog.from_document(_strip_id(d)) for d in docs]
        logs.sort(key=lambda w: (w.date, w.created_at or ""), reverse=True)
        return logs[:limit] if limit else logs

    def existing_strava_ids(self, user_id: str, candidate_ids: Iterable[str]) -> set[str]:
        wanted = set(candidate_ids)
        docs = self._store.find(
            WORKOUTS,
            lambda d: d.get("userId") == user_id and d.get("stravaActivityId") in wanted,
        )
        return {str(d["stravaActivityId"]) for d in docs}
