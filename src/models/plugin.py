"""Plugin models and capability interfaces.

A plugin is any object carrying a ``metadata`` record. The record lists the
capabilities the plugin implements; each capability is a protocol the
registry checks structurally, so plugins never need to inherit from a base
class.
"""

from enum import Enum
from typing import Any, Protocol, runtime_checkable

from pydantic import BaseModel, ConfigDict, Field

from src.models.decision import DecisionContext, DecisionOption


class PluginCategory(str, Enum):
    """Dashboard area a plugin belongs to."""

    INTEGRATION = "integration"
    AUTOMATION = "automation"
    MONITORING = "monitoring"
    ORGANIZATION = "organization"
    DECISION = "decision"


class PluginCapability(str, Enum):
    """Capability interfaces a plugin can implement."""

    LIFECYCLE = "lifecycle"
    INTEGRATION = "integration"
    AUTOMATION = "automation"
    DECISION = "decision"


class PluginMetadata(BaseModel):
    """Identity and state of a plugin. ``enabled`` is toggled by the registry."""

    model_config = ConfigDict(str_strip_whitespace=True)

    id: str = Field(min_length=1)
    name: str
    description: str = ""
    version: str = "0.1.0"
    author: str = ""
    icon: str | None = None
    category: PluginCategory
    enabled: bool = True
    capabilities: set[PluginCapability] = Field(default_factory=set)


class DecisionEvaluation(BaseModel):
    """Outcome proposed by a decision plugin."""

    decision: str = Field(description="Id of the proposed option")
    confidence: float = Field(ge=0.0, le=1.0)
    reasoning: str = ""


@runtime_checkable
class Plugin(Protocol):
    """Anything registrable: just identity and metadata."""

    metadata: PluginMetadata


@runtime_checkable
class LifecyclePlugin(Protocol):
    """Plugins that need setup and teardown."""

    async def initialize(self) -> bool: ...

    async def terminate(self) -> None: ...


@runtime_checkable
class IntegrationPlugin(Protocol):
    """Plugins that connect to an external system."""

    async def connect(self) -> bool: ...

    async def disconnect(self) -> None: ...

    def is_connected(self) -> bool: ...

    async def get_data(self, params: dict[str, Any]) -> Any: ...

    async def send_data(self, data: Any) -> Any: ...


@runtime_checkable
class AutomationPlugin(Protocol):
    """Plugins that run or schedule tasks."""

    async def execute_task(self, task_id: str, params: dict[str, Any]) -> Any: ...

    async def schedule_task(self, task_definition: dict[str, Any], schedule: str) -> str: ...

    async def cancel_task(self, task_id: str) -> bool: ...


@runtime_checkable
class DecisionPlugin(Protocol):
    """Plugins that score decisions on behalf of the engine."""

    async def evaluate_decision(
        self,
        context: DecisionContext,
        options: list[DecisionOption],
    ) -> DecisionEvaluation: ...

    async def record_outcome(self, decision_id: str, outcome: dict[str, Any]) -> None: ...


CAPABILITY_PROTOCOLS: dict[PluginCapability, type] = {
    PluginCapability.LIFECYCLE: LifecyclePlugin,
    PluginCapability.INTEGRATION: IntegrationPlugin,
    PluginCapability.AUTOMATION: AutomationPlugin,
    PluginCapability.DECISION: DecisionPlugin,
}
