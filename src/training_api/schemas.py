"""Request bodies for workout logs and pace settings.

FastAPI validates these on the way in; other callers (the Streamlit app,
service tests) go through :func:`parse_request`, which turns pydantic
errors into a :class:`~training_api.errors.ValidationError`.
"""

from __future__ import annotations

import re
from datetime import date
from typing import Annotated, Any, Mapping, TypeVar

import pydantic
from pydantic import (
    AfterValidator,
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
    model_validator,
)

from pace_engine.matching import validate_plan_day_index
from pace_engine.math.pace import derive_pace, normalize_pace
from pace_engine.math.reference_tables import RACE_DISTANCES_KM
from pace_engine.models import ActivityType, WorkoutSource
from pace_engine.models.enums import CUSTOM_PREFIX

from training_api.errors import ValidationError, format_validation_errors

DATE_PATTERN = r"^\d{4}-\d{2}-\d{2}$"
BASE_TIME_PATTERN = r"^\d{2}:\d{2}:\d{2}$"
CUSTOM_PACE_PATTERN = r"^\d{1,2}:\d{2}$"

_PACE_SUFFIX = re.compile(r"\s*(min/km|/km)$")
_CUSTOM_PACE = re.compile(CUSTOM_PACE_PATTERN)

RequestModel = TypeVar("RequestModel", bound=BaseModel)


def _calendar_date(value: str) -> str:
    date.fromisoformat(value)
    return value


CalendarDate = Annotated[str, Field(pattern=DATE_PATTERN), AfterValidator(_calendar_date)]


def _clean_pace(value: Any) -> str:
    return _PACE_SUFFIX.sub("", str(value).strip())


# ---------------------------------------------------------------------------
# Workout logs
# ---------------------------------------------------------------------------


class WorkoutLogRequest(BaseModel):
    """A manually logged workout; distance in km, duration in minutes.

    ``planDayIndex`` is only coerced to a non-negative int here; the
    service checks it against the plan named by ``planPath``.
    """

    model_config = ConfigDict(str_strip_whitespace=True)

    date: CalendarDate
    title: str = Field(min_length=1)
    distance: float = Field(gt=0)
    duration: float = Field(gt=0)
    pace: str | None = None
    notes: str = ""
    activityType: ActivityType | None = None
    source: WorkoutSource = WorkoutSource.MANUAL
    planPath: str | None = None
    planDayIndex: int | None = None

    @field_validator("pace", mode="before")
    @classmethod
    def _normalize_pace(cls, value: Any) -> str | None:
        if value in (None, ""):
            return None
        pace = normalize_pace(_clean_pace(value))
        if not pace:
            raise ValueError("Invalid pace format. Use MM:SS")
        return pace

    @field_validator("activityType", mode="before")
    @classmethod
    def _parse_type(cls, value: Any) -> ActivityType | None:
        return ActivityType.parse(value) if value not in (None, "") else None

    @field_validator("planPath", mode="before")
    @classmethod
    def _blank_path(cls, value: Any) -> Any:
        return value or None

    @field_validator("planDayIndex", mode="before")
    @classmethod
    def _coerce_index(cls, value: Any) -> int | None:
        return validate_plan_day_index(value)

    @model_validator(mode="after")
    def _derive_pace(self) -> WorkoutLogRequest:
        if self.pace is None:
            self.pace = derive_pace(self.distance, self.duration)
        return self


# ---------------------------------------------------------------------------
# Pace settings
# ---------------------------------------------------------------------------


class PaceSettingsRequest(BaseModel):
    """Flat pace settings for one plan.

    Besides the named fields, ``custom_<zone>`` keys carry per-zone
    overrides (``M:SS``, optional ``/km`` suffix). Blank values count as
    absent and other unknown keys are dropped.
    """

    model_config = ConfigDict(extra="allow", str_strip_whitespace=True)

    startDate: CalendarDate | None = None
    baseTime: str | None = Field(default=None, pattern=BASE_TIME_PATTERN)
    baseDistance: str | None = None
    adjustmentFactor: float | None = Field(default=None, gt=0)

    @model_validator(mode="before")
    @classmethod
    def _custom_paces(cls, data: Any) -> Any:
        if not isinstance(data, Mapping):
            return data
        known = {k: v for k, v in data.items() if k in cls.model_fields and v != ""}
        errors = []
        for key, pace in data.items():
            if not str(key).startswith(CUSTOM_PREFIX) or pace in (None, ""):
                continue
            clean = _clean_pace(pace)
            if _CUSTOM_PACE.match(clean) and normalize_pace(clean):
                known[key] = normalize_pace(clean)
            else:
                errors.append(f"Invalid pace format for {key[len(CUSTOM_PREFIX):]}. Use MM:SS")
        if errors:
            raise ValueError("; ".join(errors))
        return known

    @field_validator("baseDistance")
    @classmethod
    def _known_distance(cls, value: str | None) -> str | None:
        if value is not None and value not in RACE_DISTANCES_KM:
            raise ValueError(f"Invalid baseDistance: {value}")
        return value

    def to_settings(self) -> dict[str, Any]:
        """Stored form: only the keys that were given."""
        return self.model_dump(exclude_none=True)


def parse_request(
    model: type[RequestModel],
    body: RequestModel | Mapping[str, Any] | Any,
    message: str,
) -> RequestModel:
    """*body* as *model*; ``ValidationError(message)`` with details when invalid."""
    if isinstance(body, model):
        return body
    try:
        return model.model_validate(body)
    except pydantic.ValidationError as exc:
        raise ValidationError(message, format_validation_errors(exc.errors())) from exc
