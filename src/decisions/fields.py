"""Field lookup for rule conditions.

Rule conditions name a decision field by dot path. Only a closed set of
paths is understood; each maps to explicit extraction logic. Both the
camelCase wire spelling and the snake_case attribute spelling are accepted.
"""

from collections.abc import Callable
from enum import Enum
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from src.models.decision import Decision


class UnknownFieldError(KeyError):
    """Raised for a rule condition path outside the known set."""


def _plain(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    return value


_TOP_LEVEL: dict[str, Callable[["Decision"], Any]] = {
    "title": lambda d: d.title,
    "description": lambda d: d.description,
    "category": lambda d: d.category,
    "priority": lambda d: d.priority,
    "status": lambda d: d.status,
    "dueBy": lambda d: d.due_by,
    "autoDecisionThreshold": lambda d: d.auto_decision_threshold,
    "notifyUsers": lambda d: d.notify_users,
    "context.userId": lambda d: d.context.user_id,
    "context.teamId": lambda d: d.context.team_id,
    "context.departmentId": lambda d: d.context.department_id,
    "context.projectId": lambda d: d.context.project_id,
    "context.relatedEntities": lambda d: d.context.related_entities,
}

_SNAKE_ALIASES = {
    "due_by": "dueBy",
    "auto_decision_threshold": "autoDecisionThreshold",
    "notify_users": "notifyUsers",
    "context.user_id": "context.userId",
    "context.team_id": "context.teamId",
    "context.department_id": "context.departmentId",
    "context.project_id": "context.projectId",
    "context.related_entities": "context.relatedEntities",
}

_OPTION_FIELDS: dict[tuple[str, ...], Callable[[Any], Any]] = {
    ("id",): lambda o: o.id,
    ("description",): lambda o: o.description,
    ("confidence",): lambda o: o.confidence,
    ("impact", "scope"): lambda o: o.impact.scope,
    ("impact", "description"): lambda o: o.impact.description,
}

METADATA_PREFIX = ("context", "metadata")


def _canonical(path: str) -> str:
    return _SNAKE_ALIASES.get(path, path)


def _parse_option_path(parts: list[str]) -> tuple[int, tuple[str, ...]] | None:
    if len(parts) < 3 or parts[0] != "options" or not parts[1].isdigit():
        return None
    rest = tuple(parts[2:])
    if rest not in _OPTION_FIELDS:
        return None
    return int(parts[1]), rest


def is_known_field(path: str) -> bool:
    """Check if a rule condition path is understood.

    Known paths: top-level decision fields, context fields,
    ``context.metadata.<key>[.<key>...]`` and
    ``options.<index>.<id|description|confidence|impact.scope|impact.description>``.
    """
    path = _canonical(path)
    if path in _TOP_LEVEL:
        return True

    parts = path.split(".")
    if tuple(parts[:2]) == METADATA_PREFIX:
        return len(parts) > 2 and all(parts[2:])

    return _parse_option_path(parts) is not None


def resolve_field(decision: "Decision", path: str) -> Any:
    """Read a rule condition field from a decision.

    Args:
        decision: Decision to read from
        path: Known rule condition path

    Returns:
        The value, or None when the decision lacks the data
        (missing metadata key, option index out of range)

    Raises:
        UnknownFieldError: If path is not a known rule condition path
    """
    path = _canonical(path)
    if path in _TOP_LEVEL:
        return _plain(_TOP_LEVEL[path](decision))

    parts = path.split(".")
    if tuple(parts[:2]) == METADATA_PREFIX and len(parts) > 2 and all(parts[2:]):
        value: Any = decision.context.metadata
        for key in parts[2:]:
            if not isinstance(value, dict):
                return None
            value = value.get(key)
        return value

    option_path = _parse_option_path(parts)
    if option_path is not None:
        index, rest = option_path
        if index >= len(decision.options):
            return None
        return _plain(_OPTION_FIELDS[rest](decision.options[index]))

    raise UnknownFieldError(path)
