"""Dashboard summary and distance history."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, Query

from training_api.routers.deps import get_caller, get_context
from training_api.services import profile as profile_service
from training_api.services.context import Caller, ServiceContext

router = APIRouter(prefix="/api/user/profile", tags=["profile"])


@router.get("")
def get_profile(
    ctx: ServiceContext = Depends(get_context),
    caller: Caller = Depends(get_caller),
) -> dict[str, Any]:
    return profile_service.get_user_summary(ctx, caller)


@router.get("/history")
def get_history(
    weeks: int = Query(default=12, ge=1, le=104),
    ctx: ServiceContext = Depends(get_context),
    caller: Caller = Depends(get_caller),
) -> list[dict[str, Any]]:
    return profile_service.get_distance_history(ctx, caller, weeks=weeks)
