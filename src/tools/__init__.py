"""Named tools and resources with server/client dispatch.

- Tool, Resource: a named operation and a readable (optionally templated) URI
- ToolServer: protocol for providers of tools and resources
- ToolClient: dispatch registry over many servers
- CalendarToolServer: calendar lookups and schedule intelligence
"""

from src.tools.base import (
    Resource,
    ResourceInfo,
    ResourceNotFoundError,
    Tool,
    ToolInfo,
    ToolNotFoundError,
    ToolServer,
)
from src.tools.calendar_server import CalendarToolServer, EventNotFoundError
from src.tools.client import ToolClient

__all__ = [
    "CalendarToolServer",
    "EventNotFoundError",
    "Resource",
    "ResourceInfo",
    "ResourceNotFoundError",
    "Tool",
    "ToolClient",
    "ToolInfo",
    "ToolNotFoundError",
    "ToolServer",
]
