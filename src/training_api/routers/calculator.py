"""Race-time calculator."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends

from training_api.routers.deps import get_context
from training_api.services import calculator as calculator_service
from training_api.services.context import ServiceContext

router = APIRouter(prefix="/api", tags=["calculator"])


@router.get("/calculator")
def calculate(
    time: str | None = None,
    distance: str | None = None,
    ctx: ServiceContext = Depends(get_context),
) -> dict[str, Any]:
    return calculator_service.calculate(ctx, time, distance)
