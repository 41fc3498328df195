"""API router aggregation."""

from fastapi import APIRouter

from src.api.calendar import router as calendar_router
from src.api.decisions import router as decisions_router
from src.api.health import router as health_router
from src.api.tools import router as tools_router

api_router = APIRouter()
api_router.include_router(health_router)
# Calendar intelligence endpoints
api_router.include_router(calendar_router)
# Tool discovery and dispatch endpoints
api_router.include_router(tools_router)
# Decision engine endpoints
api_router.include_router(decisions_router)
