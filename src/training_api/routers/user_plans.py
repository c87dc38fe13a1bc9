"""Active/saved plans and per-plan pace settings of the caller."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from training_api.routers.deps import get_caller, get_context
from training_api.schemas import PaceSettingsRequest
from training_api.services import paces as pace_service
from training_api.services import user_plans as user_plan_service
from training_api.services.context import Caller, ServiceContext

router = APIRouter(prefix="/api/user/plans", tags=["user-plans"])


class ActivatePlanRequest(BaseModel):
    planPath: str = Field(min_length=1)


class SavePlanRequest(BaseModel):
    planPath: str = Field(min_length=1)
    save: bool = True


@router.get("")
def get_user_plans(
    ctx: ServiceContext = Depends(get_context),
    caller: Caller = Depends(get_caller),
) -> dict[str, Any]:
    return user_plan_service.get_user_plans(ctx, caller)


@router.post("/activate")
def activate_plan(
    body: ActivatePlanRequest,
    ctx: ServiceContext = Depends(get_context),
    caller: Caller = Depends(get_caller),
) -> dict[str, Any]:
    return {"success": True, **user_plan_service.activate_plan(ctx, caller, body.planPath)}


@router.post("/save")
def save_plan(
    body: SavePlanRequest,
    ctx: ServiceContext = Depends(get_context),
    caller: Caller = Depends(get_caller),
) -> dict[str, Any]:
    result = user_plan_service.save_plan(ctx, caller, body.planPath, save=body.save)
    return {"success": True, **result}


@router.get("/{plan_path:path}/paces")
def get_paces(
    plan_path: str,
    ctx: ServiceContext = Depends(get_context),
    caller: Caller = Depends(get_caller),
) -> dict[str, Any]:
    return pace_service.get_custom_paces(ctx, caller, plan_path)


@router.post("/{plan_path:path}/paces")
def update_paces(
    plan_path: str,
    body: PaceSettingsRequest,
    ctx: ServiceContext = Depends(get_context),
    caller: Caller = Depends(get_caller),
) -> dict[str, Any]:
    settings = pace_service.update_custom_paces(ctx, caller, plan_path, body)
    return {"success": True, "settings": settings}
