"""Request dependencies: the service context and the calling user."""

from __future__ import annotations

from fastapi import Header, Request

from training_api.services.context import Caller, ServiceContext, require_caller


def get_context(request: Request) -> ServiceContext:
    return request.app.state.ctx


def get_caller(
    x_user_id: str | None = Header(default=None),
    x_user_email: str | None = Header(default=None),
) -> Caller:
    """The authenticated caller; 401 without an ``X-User-Id`` header."""
    return require_caller(x_user_id, x_user_email)


def get_optional_caller(
    x_user_id: str | None = Header(default=None),
    x_user_email: str | None = Header(default=None),
) -> Caller | None:
    if not x_user_id:
        return None
    return Caller(user_id=x_user_id, email=x_user_email)
