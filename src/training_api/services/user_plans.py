"""Active, saved and recommended plans of a user."""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Any

from pace_engine.models import PlanLevel, WorkoutLog

from training_api.errors import NotFoundError
from training_api.services.context import Caller, ServiceContext

logger = logging.getLogger(__name__)

RECENT_WORKOUTS = 20
MAX_RECOMMENDATIONS = 5
MAX_FALLBACK_PLANS = 6

# A level also matches plans one step harder.
_NEXT_LEVEL = {
    PlanLevel.BEGINNER.value: PlanLevel.INTERMEDIATE.value,
    PlanLevel.INTERMEDIATE.value: PlanLevel.ADVANCED.value,
    PlanLevel.ADVANCED.value: PlanLevel.ELITE.value,
}


def _require_plan(ctx: ServiceContext, plan_path: str) -> None:
    if not plan_path or not ctx.plans.exists(plan_path):
        raise NotFoundError("Plan not found")


def activate_plan(ctx: ServiceContext, caller: Caller, plan_path: str) -> dict[str, Any]:
    """Make *plan_path* the active plan; it is also added to the saved plans."""
    _require_plan(ctx, plan_path)
    profile = ctx.profiles.get_or_new(caller.user_id)
    saved = profile.saved_plans
    if plan_path not in saved:
        saved = (*saved, plan_path)
    profile = replace(profile, active_plan=plan_path, saved_plans=saved).touched(ctx.now())
    ctx.profiles.save(profile)
    logger.info("User %s activated plan %s", caller.user_id, plan_path)
    return {"activePlan": profile.active_plan, "savedPlans": list(profile.saved_plans)}


def save_plan(
    ctx: ServiceContext,
    caller: Caller,
    plan_path: str,
    save: bool = True,
) -> dict[str, Any]:
    """Add or remove *plan_path* from the saved plans.

    Removing the active plan also clears it.
    """
    _require_plan(ctx, plan_path)
    profile = ctx.profiles.get_or_new(caller.user_id)
    if save:
        saved = profile.saved_plans
        if plan_path not in saved:
            saved = (*saved, plan_path)
        profile = replace(profile, saved_plans=saved)
    else:
        profile = replace(
            profile,
            saved_plans=tuple(p for p in profile.saved_plans if p != plan_path),
            active_plan=None if profile.active_plan == plan_path else profile.active_plan,
        )
    profile = profile.touched(ctx.now())
    ctx.profiles.save(profile)
    return {"activePlan": profile.active_plan, "savedPlans": list(profile.saved_plans)}


# ---------------------------------------------------------------------------
# Recommendations
# ---------------------------------------------------------------------------


def level_and_distance(workouts: list[WorkoutLog]) -> tuple[str, str]:
    """Estimated (level, target distance) from the longest recent workout."""
    longest = max((w.distance for w in workouts), default=0.0)
    if longest > 30:
        return PlanLevel.ADVANCED.value, "42km"
    if longest > 15:
        return PlanLevel.INTERMEDIATE.value, "21km"
    if longest > 8:
        return PlanLevel.BEGINNER.value, "10km"
    return PlanLevel.BEGINNER.value, "5km"


def recommend_plans(
    summaries: list[dict[str, Any]],
    level: str,
    target_distance: str,
    limit: int = MAX_RECOMMENDATIONS,
) -> list[dict[str, Any]]:
    levels = {level, _NEXT_LEVEL.get(level, level)}
    matches = [
        s
        for s in summaries
        if s.get("nivel") in levels
        and (not s.get("distances") or target_distance in s["distances"])
    ]
    return matches[:limit]


def get_user_plans(ctx: ServiceContext, caller: Caller) -> dict[str, Any]:
    """Active plan summary, saved plan summaries and recommendations.

    Recommendations come from the user's recent workouts; without any,
    or when nothing matches, the first plans not already saved are
    offered.
    """
    profile = ctx.profiles.get_or_new(caller.user_id)
    summaries = ctx.plans.list_summaries()
    by_path = {s["path"]: s for s in summaries}

    active = by_path.get(profile.active_plan) if profile.active_plan else None
    saved = [by_path[p] for p in profile.saved_plans if p in by_path]

    recent = ctx.workouts.list_for_user(caller.user_id, limit=RECENT_WORKOUTS)
    recommended: list[dict[str, Any]] = []
    if recent:
        level, distance = level_and_distance(recent)
        recommended = recommend_plans(summaries, level, distance)
    if not recommended:
        saved_paths = set(profile.saved_plans)
        recommended = [s for s in summaries if s["path"] not in saved_paths][:MAX_FALLBACK_PLANS]

    return {"activePlan": active, "savedPlans": saved, "recommendedPlans": recommended}
