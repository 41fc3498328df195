"""Plugin registry.

Owns the mapping from plugin id to plugin object. Consumers (the decision
engine) get the registry injected rather than reaching for shared state.
"""

from typing import Any

import structlog

from src.models.plugin import (
    CAPABILITY_PROTOCOLS,
    Plugin,
    PluginCapability,
    PluginCategory,
)

logger = structlog.get_logger()


class PluginRegistry:
    """Registry of capability-tagged plugins.

    Features:
    - Registration order is preserved
    - Declared capabilities are checked against their protocols
    - Lookup by id, category or capability
    """

    def __init__(self, plugins: list[Any] | None = None):
        """Initialize registry.

        Args:
            plugins: Plugins to register up front
        """
        self._plugins: dict[str, Any] = {}
        for plugin in plugins or []:
            self.register(plugin)

    def register(self, plugin: Any) -> bool:
        """Register a plugin.

        Args:
            plugin: Object with a ``metadata`` PluginMetadata record

        Returns:
            False if the id is taken or a declared capability is missing
        """
        if not isinstance(plugin, Plugin):
            logger.warning("rejected plugin without metadata")
            return False

        plugin_id = plugin.metadata.id
        if plugin_id in self._plugins:
            logger.warning("plugin already registered", plugin_id=plugin_id)
            return False

        for capability in plugin.metadata.capabilities:
            protocol = CAPABILITY_PROTOCOLS[capability]
            if not isinstance(plugin, protocol):
                logger.warning(
                    "plugin does not implement declared capability",
                    plugin_id=plugin_id,
                    capability=capability.value,
                )
                return False

        self._plugins[plugin_id] = plugin
        logger.info(
            "registered plugin",
            plugin_id=plugin_id,
            capabilities=sorted(c.value for c in plugin.metadata.capabilities),
        )
        return True

    async def unregister(self, plugin_id: str) -> bool:
        """Unregister a plugin, terminating it if it has a lifecycle.

        Returns:
            False if no plugin has this id
        """
        plugin = self._plugins.pop(plugin_id, None)
        if plugin is None:
            logger.warning("plugin not registered", plugin_id=plugin_id)
            return False

        if PluginCapability.LIFECYCLE in plugin.metadata.capabilities:
            try:
                await plugin.terminate()
            except Exception as e:
                logger.error(
                    "error terminating plugin",
                    plugin_id=plugin_id,
                    error=str(e),
                )
        return True

    def get(self, plugin_id: str) -> Any | None:
        """Get a plugin by id."""
        return self._plugins.get(plugin_id)

    def all(self) -> list[Any]:
        """All plugins in registration order."""
        return list(self._plugins.values())

    def by_category(self, category: PluginCategory) -> list[Any]:
        """Plugins of a category, in registration order."""
        return [p for p in self._plugins.values() if p.metadata.category == category]

    def with_capability(self, capability: PluginCapability) -> list[Any]:
        """Plugins declaring a capability, in registration order."""
        return [
            p for p in self._plugins.values() if capability in p.metadata.capabilities
        ]

    def decision_plugins(self) -> list[Any]:
        """Plugins that can evaluate decisions."""
        return self.with_capability(PluginCapability.DECISION)

    def enable(self, plugin_id: str) -> bool:
        """Enable a plugin. Returns False if unknown."""
        return self._set_enabled(plugin_id, True)

    def disable(self, plugin_id: str) -> bool:
        """Disable a plugin. Returns False if unknown."""
        return self._set_enabled(plugin_id, False)

    def is_enabled(self, plugin_id: str) -> bool:
        """Check if a plugin is registered and enabled."""
        plugin = self._plugins.get(plugin_id)
        return bool(plugin and plugin.metadata.enabled)

    def _set_enabled(self, plugin_id: str, enabled: bool) -> bool:
        plugin = self._plugins.get(plugin_id)
        if plugin is None:
            return False
        plugin.metadata.enabled = enabled
        return True

    def __len__(self) -> int:
        return len(self._plugins)
