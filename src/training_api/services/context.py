"""Dependencies shared by every service function."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from pathlib import Path
from typing import Callable

from pace_engine.math.reference_tables import ReferenceTables, load_reference_tables
from strava_client import StravaClient
from training_store import (
    JsonDocumentStore,
    PlanRepository,
    ProfileRepository,
    WorkoutRepository,
)

from training_api import config
from training_api.errors import UnauthorizedError


@dataclass(frozen=True)
class Caller:
    """The user a request acts for."""

    user_id: str
    email: str | None = None


@dataclass
class ServiceContext:
    """Repositories, settings and collaborators used by the services.

    ``clock`` and ``strava_factory`` are injectable for tests.
    """

    store: JsonDocumentStore
    plans: PlanRepository
    profiles: ProfileRepository
    workouts: WorkoutRepository
    tables: ReferenceTables
    admin_emails: frozenset[str] = frozenset()
    strava_client_id: str = ""
    strava_client_secret: str = ""
    locale: str = "en"
    clock: Callable[[], datetime] = datetime.now
    strava_factory: Callable[[str], StravaClient] = field(default=StravaClient)

    @classmethod
    def from_store(cls, store: JsonDocumentStore, **kwargs) -> ServiceContext:
        return cls(
            store=store,
            plans=PlanRepository(store),
            profiles=ProfileRepository(store),
            workouts=WorkoutRepository(store),
            tables=kwargs.pop("tables", None) or load_reference_tables(),
            **kwargs,
        )

    @classmethod
    def from_config(cls, data_dir: Path | str | None = None) -> ServiceContext:
        return cls.from_store(
            JsonDocumentStore(data_dir or config.DATA_DIR),
            admin_emails=config.ADMIN_EMAILS,
            strava_client_id=config.STRAVA_CLIENT_ID,
            strava_client_secret=config.STRAVA_CLIENT_SECRET,
            locale=config.DISPLAY_LOCALE,
        )

    def now(self) -> datetime:
        return self.clock()

    def today(self) -> date:
        return self.clock().date()

    def timestamp(self) -> str:
        return self.clock().isoformat(timespec="seconds")

    def is_admin(self, caller: Caller) -> bool:
        return bool(caller.email) and caller.email.lower() in self.admin_emails


def require_caller(user_id: str | None, email: str | None = None) -> Caller:
    """Caller for an authenticated request; ``UnauthorizedError`` otherwise."""
    if not user_id:
        raise UnauthorizedError("Unauthorized")
    return Caller(user_id=user_id, email=email)
