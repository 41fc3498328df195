"""Canonical data models for the management dashboard.

This module exports the domain models shared across the application:
- ApiModel / ImmutableModel / BaseEntity: camelCase wire bases
- Decision and friends: approval requests, rules, history
- PluginMetadata and capability protocols
"""

from src.models.base import ApiModel, BaseEntity, ImmutableModel, local_now
from src.models.decision import (
    ConditionOperator,
    Decision,
    DecisionCategory,
    DecisionContext,
    DecisionCreate,
    DecisionFeedback,
    DecisionHistory,
    DecisionOption,
    DecisionOutcome,
    DecisionPriority,
    DecisionRule,
    DecisionStatus,
    ImpactScope,
    OptionImpact,
    RuleAction,
    RuleCondition,
    RuleCreate,
)
from src.models.plugin import (
    AutomationPlugin,
    DecisionEvaluation,
    DecisionPlugin,
    IntegrationPlugin,
    LifecyclePlugin,
    Plugin,
    PluginCapability,
    PluginCategory,
    PluginMetadata,
)

__all__ = [
    # Base
    "ApiModel",
    "BaseEntity",
    "ImmutableModel",
    "local_now",
    # Decisions
    "ConditionOperator",
    "Decision",
    "DecisionCategory",
    "DecisionContext",
    "DecisionCreate",
    "DecisionFeedback",
    "DecisionHistory",
    "DecisionOption",
    "DecisionOutcome",
    "DecisionPriority",
    "DecisionRule",
    "DecisionStatus",
    "ImpactScope",
    "OptionImpact",
    "RuleAction",
    "RuleCondition",
    "RuleCreate",
    # Plugins
    "AutomationPlugin",
    "DecisionEvaluation",
    "DecisionPlugin",
    "IntegrationPlugin",
    "LifecyclePlugin",
    "Plugin",
    "PluginCapability",
    "PluginCategory",
    "PluginMetadata",
]
