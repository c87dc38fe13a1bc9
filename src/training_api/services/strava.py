"""Strava account link and activity import."""

from __future__ import annotations

import logging
from dataclasses import replace
from datetime import timedelta
from typing import Any, Mapping

from pace_engine.matching import find_matching_plan_day
from pace_engine.models import PlanDay, UserProfile
from pace_engine.schedule import organize_weekly_blocks, parse_iso_date, prepare_plan_days
from strava_client import (
    StravaAuthError,
    StravaClientError,
    StravaTokens,
    ensure_fresh_tokens,
    map_activity,
    to_workout_log,
)

from training_api.errors import ServiceError, UnauthorizedError, ValidationError
from training_api.services.context import Caller, ServiceContext
from training_api.services.workouts import record_logged_workouts

logger = logging.getLogger(__name__)

DEFAULT_IMPORT_DAYS = 30


def link_strava_account(
    ctx: ServiceContext,
    caller: Caller,
    tokens: Mapping[str, Any],
) -> dict[str, Any]:
    """Store already-issued Strava tokens on the caller's profile."""
    try:
        parsed = StravaTokens.from_dict(tokens)
    except StravaAuthError as exc:
        raise ValidationError(str(exc)) from exc
    profile = ctx.profiles.get_or_new(caller.user_id)
    profile = replace(
        profile,
        strava={**parsed.to_dict(), "connectedAt": ctx.timestamp()},
    ).touched(ctx.now())
    ctx.profiles.save(profile)
    logger.info("Linked Strava athlete %s to %s", parsed.athlete_id, caller.user_id)
    return strava_status(ctx, caller)


def strava_status(ctx: ServiceContext, caller: Caller) -> dict[str, Any]:
    profile = ctx.profiles.get(caller.user_id)
    link = (profile.strava if profile else None) or {}
    return {
        "connected": bool(link.get("accessToken")),
        "athleteId": link.get("athleteId"),
        "connectedAt": link.get("connectedAt"),
        "lastImport": link.get("lastImport"),
    }


def _active_plan_days(ctx: ServiceContext, profile: UserProfile) -> list[PlanDay]:
    """Active plan days on the calendar from the user's own start date."""
    if not profile.active_plan:
        return []
    plan = ctx.plans.get(profile.active_plan)
    if plan is None:
        return []
    today = ctx.today()
    start = parse_iso_date(profile.settings_for(plan.path).start_date) or today
    return prepare_plan_days(organize_weekly_blocks(plan.daily_workouts, start, today=today))


def _fresh_tokens(ctx: ServiceContext, profile: UserProfile) -> tuple[StravaTokens, UserProfile]:
    if not profile.strava:
        raise UnauthorizedError("Strava account not connected")
    try:
        tokens, refreshed = ensure_fresh_tokens(
            StravaTokens.from_dict(profile.strava),
            ctx.strava_client_id,
            ctx.strava_client_secret,
            now=ctx.now().timestamp(),
        )
    except StravaAuthError as exc:
        raise UnauthorizedError(f"Strava authorization failed: {exc}") from exc
    if refreshed:
        profile = replace(profile, strava={**profile.strava, **tokens.to_dict()})
        ctx.profiles.save(profile)
    return tokens, profile


def import_strava_activities(
    ctx: ServiceContext,
    caller: Caller,
    days: int = DEFAULT_IMPORT_DAYS,
    page: int = 1,
    per_page: int = 30,
) -> dict[str, Any]:
    """Import the caller's Strava activities of the last *days* days.

    Tokens are refreshed (and stored) first when close to expiry.
    Activities already imported are skipped; new ones are linked to a
    day of the active plan when the date and type match.
    """
    profile = ctx.profiles.get(caller.user_id)
    if profile is None:
        raise UnauthorizedError("Strava account not connected")
    tokens, profile = _fresh_tokens(ctx, profile)

    after = int((ctx.now() - timedelta(days=max(1, days))).timestamp())
    try:
        client = ctx.strava_factory(tokens.access_token)
        raw_activities = client.get_activities(page=page, per_page=per_page, after=after)
    except StravaAuthError as exc:
        raise UnauthorizedError(f"Strava authorization failed: {exc}") from exc
    except StravaClientError as exc:
        raise ServiceError(f"Strava request failed: {exc}", status_code=502) from exc

    mapped = [a for a in (map_activity(raw) for raw in raw_activities) if a is not None]
    existing = ctx.workouts.existing_strava_ids(caller.user_id, (a.external_id for a in mapped))
    fresh = [a for a in mapped if a.external_id not in existing]

    plan_days = _active_plan_days(ctx, profile)
    now = ctx.timestamp()
    logs = []
    for activity in fresh:
        log = to_workout_log(activity, caller.user_id, ctx.workouts.new_id(), created_at=now)
        index = find_matching_plan_day(activity.date, activity.sport_type, plan_days)
        if index is not None:
            log = replace(log, plan_path=profile.active_plan, plan_day_index=index)
        logs.append(log)
    logs = ctx.workouts.insert_many(logs)

    profile = record_logged_workouts(ctx, profile, logs) if logs else profile
    profile = replace(profile, strava={**(profile.strava or {}), "lastImport": now})
    ctx.profiles.save(profile)

    linked = sum(1 for log in logs if log.plan_day_index is not None)
    logger.info(
        "Strava import for %s: %d fetched, %d new, %d linked to plan",
        caller.user_id,
        len(raw_activities),
        len(logs),
        linked,
    )
    return {
        "fetched": len(raw_activities),
        "imported": len(logs),
        "skipped": len(mapped) - len(logs),
        "linkedToPlan": linked,
        "workouts": [log.to_document() for log in logs],
    }
