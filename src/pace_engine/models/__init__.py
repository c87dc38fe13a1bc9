"""Data models for plans, activities and user documents."""

from pace_engine.models.activity import (
    Activity,
    DayRecord,
    IntervalActivity,
    Series,
    SimpleActivity,
    Workout,
    parse_activity,
    parse_day_record,
)
from pace_engine.models.enums import (
    ActivityType,
    PlanLevel,
    Units,
    WorkoutSource,
)
from pace_engine.models.plan import (
    Plan,
    PlanDay,
    PredictedRaceTime,
    ScheduledDay,
    WeeklyBlock,
)
from pace_engine.models.profile import (
    CompletedWorkout,
    CustomPaceSettings,
    ImportedActivity,
    UserProfile,
    WorkoutLog,
)

__all__ = [
    "Activity",
    "ActivityType",
    "CompletedWorkout",
    "CustomPaceSettings",
    "DayRecord",
    "ImportedActivity",
    "IntervalActivity",
    "Plan",
    "PlanDay",
    "PlanLevel",
    "PredictedRaceTime",
    "ScheduledDay",
    "Series",
    "SimpleActivity",
    "Units",
    "Workout",
    "WorkoutLog",
    "WorkoutSource",
    "UserProfile",
    "parse_activity",
    "parse_day_record",
]
