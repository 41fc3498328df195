"""API endpoints for tool discovery and dispatch."""

from typing import Annotated, Any

from fastapi import APIRouter, Body, Depends, HTTPException, Query
from fastapi.encoders import jsonable_encoder
from pydantic import ValidationError

from src.api.dependencies import get_tool_client
from src.tools.base import ResourceInfo, ResourceNotFoundError, ToolInfo, ToolNotFoundError
from src.tools.calendar_server import EventNotFoundError
from src.tools.client import ToolClient

router = APIRouter(prefix="/tools", tags=["tools"])


@router.get("", response_model=list[ToolInfo])
async def list_tools(
    client: Annotated[ToolClient, Depends(get_tool_client)],
) -> list[ToolInfo]:
    """List every tool of every registered server."""
    return client.list_tools()


@router.get("/resources", response_model=list[ResourceInfo])
async def list_resources(
    client: Annotated[ToolClient, Depends(get_tool_client)],
) -> list[ResourceInfo]:
    """List every resource of every registered server."""
    return client.list_resources()


@router.get("/resources/read")
async def read_resource(
    client: Annotated[ToolClient, Depends(get_tool_client)],
    uri: str = Query(description="Resource URI, e.g. calendar://events/upcoming"),
) -> dict[str, Any]:
    """Read a resource by URI.

    Raises:
        HTTPException: 404 if no resource matches the URI
    """
    try:
        content = await client.read_resource(uri)
    except ResourceNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return {"uri": uri, "content": jsonable_encoder(content)}


@router.post("/{name}")
async def execute_tool(
    name: str,
    client: Annotated[ToolClient, Depends(get_tool_client)],
    params: Annotated[dict[str, Any] | None, Body()] = None,
) -> dict[str, Any]:
    """Execute a tool with a parameter object.

    Raises:
        HTTPException: 404 for an unknown tool or event, 422 for invalid
            parameters
    """
    try:
        result = await client.execute_tool(name, params or {})
    except (ToolNotFoundError, EventNotFoundError) as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValidationError as e:
        raise HTTPException(
            status_code=422,
            detail=jsonable_encoder(
                e.errors(include_url=False, include_context=False)
            ),
        )
    return {"tool": name, "result": jsonable_encoder(result)}
