"""
FastAPI app entry point aggregating per-domain routers under backend/routes.
Keep as `uvicorn backend.api:app`.
"""
from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from . import settings
from .db import init_engine
from .errors import install_error_handlers

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # 连接失败或建表失败直接抛出，服务不启动
    app.state.engine = init_engine()
    try:
        yield
    finally:
        app.state.engine.dispose()
        logger.info("database pool closed")


app = FastAPI(title=settings.APP_NAME, version=settings.APP_VERSION, lifespan=lifespan)
install_error_handlers(app)


# Include routers (split by business domain)
from .routes import base as base_routes
from .routes import users as users_routes

app.include_router(base_routes.router)
app.include_router(users_routes.router)
