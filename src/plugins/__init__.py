"""Plugin registry.

Holds capability-tagged plugins (decision, integration, automation) and
hands them to the components that consume them.
"""

from src.plugins.registry import PluginRegistry

__all__ = ["PluginRegistry"]
