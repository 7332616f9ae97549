"""FastAPI application factory.

Assembles CORS and all API routers.
This module is the authoritative app object — app/main.py re-exports it.
"""
from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api.routes.deliverymen import router as deliverymen_router
from app.api.routes.delivery_problems import router as delivery_problems_router
from app.api.routes.health import router as health_router
from app.api.routes.notifications import router as notifications_router
from app.core.logging import setup_logging
from app.core.settings import get_settings


@asynccontextmanager
async def lifespan(_: FastAPI):
    setup_logging()
    yield


settings = get_settings()

app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    lifespan=lifespan,
)

# CORS — restrict origins in production
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health_router)
app.include_router(deliverymen_router)
app.include_router(delivery_problems_router)
app.include_router(notifications_router)
