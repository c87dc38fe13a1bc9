"""File-backed document store for plans, user profiles and workouts."""

from training_store.document_store import JsonDocumentStore
from training_store.exceptions import DocumentNotFound, DuplicateDocument, StoreError
from training_store.repositories import (
    PlanRepository,
    ProfileRepository,
    WorkoutRepository,
)

__all__ = [
    "DocumentNotFound",
    "DuplicateDocument",
    "JsonDocumentStore",
    "PlanRepository",
    "ProfileRepository",
    "StoreError",
    "WorkoutRepository",
]
