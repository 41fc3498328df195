"""Base types for named tools and resources.

A tool server exposes tools (named operations taking a parameter object)
and resources (readable URIs, optionally templated like
``calendar://events/{eventId}``).
"""

import re
from collections.abc import Awaitable, Callable
from typing import Any, Protocol, runtime_checkable

from pydantic import Field

from src.models.base import ApiModel

ToolHandler = Callable[[dict[str, Any]], Awaitable[Any]]
ResourceReader = Callable[[dict[str, str]], Awaitable[Any]]

_TEMPLATE_PARAM = re.compile(r"\{(\w+)\}")


def _compile_template(uri: str) -> re.Pattern:
    parts = []
    last = 0
    for match in _TEMPLATE_PARAM.finditer(uri):
        parts.append(re.escape(uri[last : match.start()]))
        parts.append(f"(?P<{match.group(1)}>[^/]+)")
        last = match.end()
    parts.append(re.escape(uri[last:]))
    return re.compile("^" + "".join(parts) + "$")


class ToolNotFoundError(LookupError):
    """Raised when no tool has the requested name."""


class ResourceNotFoundError(LookupError):
    """Raised when no resource matches the requested URI."""


class ToolInfo(ApiModel):
    """Public description of a tool."""

    name: str
    description: str
    parameters: dict[str, Any] = Field(default_factory=dict)


class ResourceInfo(ApiModel):
    """Public description of a resource."""

    uri: str
    content_type: str
    description: str


class Tool:
    """A named operation with a JSON-schema parameter description."""

    def __init__(
        self,
        name: str,
        description: str,
        parameters: dict[str, Any],
        handler: ToolHandler,
    ):
        self.name = name
        self.description = description
        self.parameters = parameters
        self._handler = handler

    async def execute(self, params: dict[str, Any]) -> Any:
        """Run the tool."""
        return await self._handler(params)

    def info(self) -> ToolInfo:
        return ToolInfo(
            name=self.name,
            description=self.description,
            parameters=self.parameters,
        )


class Resource:
    """A readable URI. ``{name}`` segments match any path segment."""

    def __init__(
        self,
        uri: str,
        content_type: str,
        description: str,
        reader: ResourceReader,
    ):
        self.uri = uri
        self.content_type = content_type
        self.description = description
        self._reader = reader
        self._pattern = _compile_template(uri)

    @property
    def is_template(self) -> bool:
        return bool(_TEMPLATE_PARAM.search(self.uri))

    def match(self, uri: str) -> dict[str, str] | None:
        """Return template parameters if the URI matches, else None."""
        found = self._pattern.match(uri)
        return found.groupdict() if found else None

    async def read(self, params: dict[str, str] | None = None) -> Any:
        """Read the resource."""
        return await self._reader(params or {})

    def info(self) -> ResourceInfo:
        return ResourceInfo(
            uri=self.uri,
            content_type=self.content_type,
            description=self.description,
        )


@runtime_checkable
class ToolServer(Protocol):
    """A provider of tools and resources."""

    id: str
    name: str
    description: str

    def list_tools(self) -> list[Tool]: ...

    def list_resources(self) -> list[Resource]: ...

    async def execute_tool(self, name: str, params: dict[str, Any]) -> Any: ...

    async def read_resource(self, uri: str) -> Any: ...
