"""Root API router for the application."""

from fastapi import APIRouter

from taskdesk.api.routes import export, health, stats, tasks

api_router = APIRouter()
api_router.include_router(health.router, prefix="/health", tags=["health"])
api_router.include_router(tasks.router, tags=["tasks"])
api_router.include_router(stats.router, tags=["stats"])
api_router.include_router(export.router, tags=["export"])
