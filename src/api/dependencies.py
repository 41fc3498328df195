"""Dependency functions resolving services from app state."""

from fastapi import HTTPException, Request

from src.decisions.engine import DecisionEngine
from src.tools.calendar_server import CalendarToolServer
from src.tools.client import ToolClient


def get_calendar_server(request: Request) -> CalendarToolServer:
    """Get CalendarToolServer from app state."""
    if not hasattr(request.app.state, "calendar_server"):
        raise HTTPException(status_code=500, detail="CalendarToolServer not initialized")
    return request.app.state.calendar_server


def get_tool_client(request: Request) -> ToolClient:
    """Get ToolClient from app state."""
    if not hasattr(request.app.state, "tool_client"):
        raise HTTPException(status_code=500, detail="ToolClient not initialized")
    return request.app.state.tool_client


def get_decision_engine(request: Request) -> DecisionEngine:
    """Get DecisionEngine from app state."""
    if not hasattr(request.app.state, "decision_engine"):
        raise HTTPException(status_code=500, detail="DecisionEngine not initialized")
    return request.app.state.decision_engine
