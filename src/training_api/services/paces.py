"""Per-plan custom pace settings."""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Any, Mapping

from pace_engine.models import CustomPaceSettings

from training_api.errors import NotFoundError
from training_api.schemas import PaceSettingsRequest, parse_request
from training_api.services.context import Caller, ServiceContext

logger = logging.getLogger(__name__)


def _require_plan(ctx: ServiceContext, plan_path: str) -> None:
    if not ctx.plans.exists(plan_path):
        raise NotFoundError("Plan not found")


def get_custom_paces(ctx: ServiceContext, caller: Caller, plan_path: str) -> dict[str, Any]:
    """The caller's saved settings for *plan_path*; defaults when none are stored."""
    _require_plan(ctx, plan_path)
    profile = ctx.profiles.get(caller.user_id)
    settings = profile.settings_for(plan_path) if profile else CustomPaceSettings()
    return settings.to_dict()


def update_custom_paces(
    ctx: ServiceContext,
    caller: Caller,
    plan_path: str,
    body: PaceSettingsRequest | Mapping[str, Any],
) -> dict[str, Any]:
    """Validate *body* and store it as the whole settings object for *plan_path*.

    The profile is created on first save.
    """
    _require_plan(ctx, plan_path)
    request = parse_request(PaceSettingsRequest, body, "Invalid pace settings")
    settings = CustomPaceSettings.from_dict(request.to_settings())
    profile = ctx.profiles.get_or_new(caller.user_id)
    profile = replace(
        profile,
        custom_paces={**profile.custom_paces, plan_path: settings},
    ).touched(ctx.now())
    ctx.profiles.save(profile)
    logger.info("Updated pace settings of %s for %s", caller.user_id, plan_path)
    return settings.to_dict()
