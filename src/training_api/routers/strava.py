"""Strava link status, token hand-off and activity import."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from training_api.routers.deps import get_caller, get_context
from training_api.services import strava as strava_service
from training_api.services.context import Caller, ServiceContext

router = APIRouter(prefix="/api/strava", tags=["strava"])


class StravaConnectRequest(BaseModel):
    """Tokens issued by Strava's authorization-code exchange."""

    accessToken: str = Field(min_length=1)
    refreshToken: str = Field(min_length=1)
    expiresAt: int
    athleteId: str | int | None = None


class StravaImportRequest(BaseModel):
    days: int = Field(default=30, ge=1, le=365)
    page: int = Field(default=1, ge=1)
    perPage: int = Field(default=30, ge=1, le=200)


@router.post("/connect")
def connect(
    body: StravaConnectRequest,
    ctx: ServiceContext = Depends(get_context),
    caller: Caller = Depends(get_caller),
) -> dict[str, Any]:
    return strava_service.link_strava_account(ctx, caller, body.model_dump())


@router.get("/status")
def status(
    ctx: ServiceContext = Depends(get_context),
    caller: Caller = Depends(get_caller),
) -> dict[str, Any]:
    return strava_service.strava_status(ctx, caller)


@router.post("/import")
def import_activities(
    body: StravaImportRequest | None = None,
    ctx: ServiceContext = Depends(get_context),
    caller: Caller = Depends(get_caller),
) -> dict[str, Any]:
    body = body or StravaImportRequest()
    result = strava_service.import_strava_activities(
        ctx,
        caller,
        days=body.days,
        page=body.page,
        per_page=body.perPage,
    )
    return {"success": True, **result}
