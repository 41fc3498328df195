"""Rule condition matching."""

from typing import Any

import structlog

from src.decisions.fields import UnknownFieldError, resolve_field
from src.models.decision import ConditionOperator, Decision, DecisionRule, RuleCondition

logger = structlog.get_logger()


def _contains(container: Any, value: Any) -> bool:
    if container is None:
        return False
    if isinstance(container, list | tuple | set):
        return value in container
    return str(value) in str(container)


def compare(operator: ConditionOperator, actual: Any, expected: Any) -> bool:
    """Apply a condition operator.

    Ordering comparisons between incomparable values (including a missing
    value) never match. ``contains`` tests membership for lists and
    substrings for scalars.
    """
    if operator == ConditionOperator.EQUALS:
        return actual == expected
    if operator == ConditionOperator.NOT_EQUALS:
        return actual != expected
    if operator in (ConditionOperator.GREATER_THAN, ConditionOperator.LESS_THAN):
        if actual is None or expected is None:
            return False
        try:
            if operator == ConditionOperator.GREATER_THAN:
                return actual > expected
            return actual < expected
        except TypeError:
            return False
    if operator == ConditionOperator.CONTAINS:
        return _contains(actual, expected)
    if operator == ConditionOperator.NOT_CONTAINS:
        return not _contains(actual, expected)
    return False


def condition_matches(decision: Decision, condition: RuleCondition) -> bool:
    """Evaluate one condition against a decision."""
    try:
        actual = resolve_field(decision, condition.field)
    except UnknownFieldError:
        logger.warning(
            "unknown rule condition field",
            field=condition.field,
            decision_id=decision.id,
        )
        return False
    return compare(condition.operator, actual, condition.value)


def rule_matches(decision: Decision, rule: DecisionRule) -> bool:
    """Check if a rule fires for a decision.

    The rule must be enabled, match the decision's category (or be tagged
    ``other``), and every condition must hold.
    """
    if not rule.enabled:
        return False
    if not rule.applies_to(decision.category):
        return False
    return all(condition_matches(decision, c) for c in rule.conditions)
