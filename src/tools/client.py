"""Tool client: one dispatch table over many tool servers.

Registering a server indexes its tools by name and its resources by URI.
Callers execute tools and read resources through the client without
knowing which server provides them.
"""

from typing import Any

import structlog

from src.tools.base import (
    Resource,
    ResourceInfo,
    ResourceNotFoundError,
    Tool,
    ToolInfo,
    ToolNotFoundError,
    ToolServer,
)

logger = structlog.get_logger()


class ToolClient:
    """Registry of tool servers with name/URI dispatch."""

    def __init__(self):
        self._servers: dict[str, ToolServer] = {}
        self._tools: dict[str, tuple[ToolServer, Tool]] = {}
        self._resources: dict[str, tuple[ToolServer, Resource]] = {}

    def register_server(self, server: ToolServer) -> bool:
        """Register a server, replacing any server with the same id.

        Returns:
            True if the server was new, False if it replaced an existing one
        """
        is_new = server.id not in self._servers
        if not is_new:
            logger.warning("server already registered, updating", server_id=server.id)
            self.unregister_server(server.id)

        self._servers[server.id] = server
        tools = server.list_tools()
        resources = server.list_resources()
        for tool in tools:
            self._tools[tool.name] = (server, tool)
        for resource in resources:
            self._resources[resource.uri] = (server, resource)

        logger.info(
            "registered tool server",
            server_id=server.id,
            tools=len(tools),
            resources=len(resources),
        )
        return is_new

    def unregister_server(self, server_id: str) -> bool:
        """Unregister a server and drop its tools and resources.

        Returns:
            False if no server has this id
        """
        if self._servers.pop(server_id, None) is None:
            return False

        self._tools = {
            name: entry for name, entry in self._tools.items() if entry[0].id != server_id
        }
        self._resources = {
            uri: entry for uri, entry in self._resources.items() if entry[0].id != server_id
        }
        return True

    def get_server(self, server_id: str) -> ToolServer | None:
        return self._servers.get(server_id)

    def list_servers(self) -> list[ToolServer]:
        return list(self._servers.values())

    def list_tools(self) -> list[ToolInfo]:
        """Descriptions of every registered tool."""
        return [tool.info() for _, tool in self._tools.values()]

    def list_resources(self) -> list[ResourceInfo]:
        """Descriptions of every registered resource."""
        return [resource.info() for _, resource in self._resources.values()]

    async def execute_tool(self, name: str, params: dict[str, Any] | None = None) -> Any:
        """Execute a tool by name.

        Raises:
            ToolNotFoundError: If no registered server provides the tool
        """
        entry = self._tools.get(name)
        if entry is None:
            raise ToolNotFoundError(f"Tool {name} not found")

        server, _ = entry
        try:
            return await server.execute_tool(name, params or {})
        except Exception as e:
            logger.error("error executing tool", tool=name, error=str(e))
            raise

    async def read_resource(self, uri: str) -> Any:
        """Read a resource by URI, matching templates when no exact URI exists.

        Raises:
            ResourceNotFoundError: If no registered resource matches
        """
        entry = self._resources.get(uri)
        if entry is None:
            entry = next(
                (e for e in self._resources.values() if e[1].match(uri) is not None),
                None,
            )
        if entry is None:
            raise ResourceNotFoundError(f"Resource {uri} not found")

        server, _ = entry
        try:
            return await server.read_resource(uri)
        except Exception as e:
            logger.error("error reading resource", uri=uri, error=str(e))
            raise
