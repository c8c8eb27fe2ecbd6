"""Main API v1 router combining all endpoint routers."""

from fastapi import APIRouter

from app.api.v1 import health, progress, sessions

api_router = APIRouter()

# Health check (no auth required)
api_router.include_router(health.router, tags=["Health"])

# Reading progress endpoints
api_router.include_router(progress.router, tags=["Progress"])

# Reading session endpoints
api_router.include_router(sessions.router, tags=["Sessions"])
