"""Plan catalogue and rendered plan views."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, Query

from training_api.routers.deps import get_context, get_optional_caller
from training_api.services import plans as plan_service
from training_api.services.context import Caller, ServiceContext

router = APIRouter(prefix="/api", tags=["plans"])


@router.get("/plans")
def list_plans(
    nivel: str | None = None,
    coach: str | None = None,
    distance: str | None = None,
    search: str | None = None,
    ctx: ServiceContext = Depends(get_context),
) -> list[dict[str, Any]]:
    return plan_service.list_plan_summaries(
        ctx, nivel=nivel, coach=coach, distance=distance, search=search
    )


@router.get("/plans/{plan_path:path}")
def get_plan(plan_path: str, ctx: ServiceContext = Depends(get_context)) -> dict[str, Any]:
    return plan_service.get_plan(ctx, plan_path).to_document()


@router.get("/plan-views/{plan_path:path}")
def get_plan_view(
    plan_path: str,
    start_date: str | None = Query(default=None, alias="startDate"),
    ctx: ServiceContext = Depends(get_context),
    caller: Caller | None = Depends(get_optional_caller),
) -> dict[str, Any]:
    """Weekly schedule with paces; uses the caller's saved settings when known."""
    view = plan_service.get_plan_view(
        ctx,
        plan_path,
        user_id=caller.user_id if caller else None,
        start_date=start_date,
    )
    return view.to_dict()
