"""Workout log endpoints."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, Query

from training_api.routers.deps import get_caller, get_context
from training_api.schemas import WorkoutLogRequest
from training_api.services import workouts as workout_service
from training_api.services.context import Caller, ServiceContext

router = APIRouter(prefix="/api/user/workouts", tags=["workouts"])


@router.post("/log", status_code=201)
def log_workout(
    body: WorkoutLogRequest,
    ctx: ServiceContext = Depends(get_context),
    caller: Caller = Depends(get_caller),
) -> dict[str, Any]:
    log = workout_service.log_workout(ctx, caller, body)
    return {"success": True, "id": log.id, "workout": log.to_document()}


@router.get("")
def list_workouts(
    user_id: str | None = Query(default=None, alias="userId"),
    limit: int | None = Query(default=None, ge=1),
    ctx: ServiceContext = Depends(get_context),
    caller: Caller = Depends(get_caller),
) -> list[dict[str, Any]]:
    logs = workout_service.list_workouts(ctx, caller, user_id=user_id, limit=limit)
    return [log.to_document() for log in logs]


@router.get("/{workout_id}")
def get_workout(
    workout_id: str,
    ctx: ServiceContext = Depends(get_context),
    caller: Caller = Depends(get_caller),
) -> dict[str, Any]:
    return workout_service.get_workout(ctx, caller, workout_id).to_document()


@router.put("/{workout_id}")
def update_workout(
    workout_id: str,
    body: WorkoutLogRequest,
    ctx: ServiceContext = Depends(get_context),
    caller: Caller = Depends(get_caller),
) -> dict[str, Any]:
    log = workout_service.update_workout(ctx, caller, workout_id, body)
    return {"success": True, "workout": log.to_document()}


@router.delete("/{workout_id}")
def delete_workout(
    workout_id: str,
    ctx: ServiceContext = Depends(get_context),
    caller: Caller = Depends(get_caller),
) -> dict[str, Any]:
    workout_service.delete_workout(ctx, caller, workout_id)
    return {"success": True}
