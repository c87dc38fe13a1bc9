"""FastAPI application factory and the ``training-api`` entry point.

Usage:
    python -m training_api.main
"""

from __future__ import annotations

import logging

import uvicorn
from fastapi import FastAPI

from training_api import config
from training_api.errors import register_error_handlers
from training_api.routers import calculator, plans, profile, strava, user_plans, workouts
from training_api.services.context import ServiceContext

logger = logging.getLogger(__name__)


def create_app(ctx: ServiceContext | None = None) -> FastAPI:
    """Build the app around *ctx* (read from the environment when None)."""
    app = FastAPI(title="Magic Training", version="0.1.0")
    app.state.ctx = ctx or ServiceContext.from_config()
    register_error_handlers(app)
    for module in (plans, user_plans, workouts, profile, strava, calculator):
        app.include_router(module.router)
    return app


def main() -> None:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    logger.info(
        "Serving on %s:%d with data in %s", config.API_HOST, config.API_PORT, config.DATA_DIR
    )
    uvicorn.run(create_app(), host=config.API_HOST, port=config.API_PORT)


if __name__ == "__main__":
    main()
