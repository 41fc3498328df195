"""In-memory store for decisions, rules and decision history.

Records are frozen pydantic models. Updates replace the stored record, so
everything handed out is an immutable snapshot.
"""

import time
from uuid import uuid4

from src.models.decision import (
    Decision,
    DecisionHistory,
    DecisionRule,
    DecisionStatus,
)


def generate_id(prefix: str) -> str:
    """Generate an id of the form ``<prefix>-<epoch ms>-<random>``."""
    return f"{prefix}-{int(time.time() * 1000)}-{uuid4().hex[:9]}"


class DecisionStore:
    """Owns all decision state.

    - Decisions keyed by id, in creation order, never deleted
    - Rules kept sorted by ascending priority
    - History append-only (feedback replaces an entry in place)
    """

    def __init__(self):
        self._decisions: dict[str, Decision] = {}
        self._rules: list[DecisionRule] = []
        self._history: list[DecisionHistory] = []

    # Decisions

    def save_decision(self, decision: Decision) -> Decision:
        """Insert or replace a decision."""
        self._decisions[decision.id] = decision
        return decision

    def get_decision(self, decision_id: str) -> Decision | None:
        """Get a decision by id."""
        return self._decisions.get(decision_id)

    def list_decisions(self, status: DecisionStatus | None = None) -> list[Decision]:
        """All decisions in creation order, optionally filtered by status."""
        decisions = list(self._decisions.values())
        if status is not None:
            decisions = [d for d in decisions if d.status == status]
        return decisions

    # Rules

    def add_rule(self, rule: DecisionRule) -> DecisionRule:
        """Add a rule and re-sort by priority (stable for equal priorities)."""
        self._rules.append(rule)
        self._rules.sort(key=lambda r: r.priority)
        return rule

    def remove_rule(self, rule_id: str) -> bool:
        """Remove a rule. Returns False if no rule has this id."""
        before = len(self._rules)
        self._rules = [r for r in self._rules if r.id != rule_id]
        return len(self._rules) != before

    def list_rules(self) -> list[DecisionRule]:
        """Rules in evaluation order."""
        return list(self._rules)

    # History

    def append_history(self, entry: DecisionHistory) -> DecisionHistory:
        """Append a history entry."""
        self._history.append(entry)
        return entry

    def list_history(self, decision_id: str | None = None) -> list[DecisionHistory]:
        """History in append order, optionally for one decision."""
        if decision_id is None:
            return list(self._history)
        return [h for h in self._history if h.decision_id == decision_id]

    def find_history_index(self, decision_id: str) -> int | None:
        """Index of the first history entry for a decision."""
        for index, entry in enumerate(self._history):
            if entry.decision_id == decision_id:
                return index
        return None

    def replace_history(self, index: int, entry: DecisionHistory) -> None:
        """Replace the history entry at an index."""
        self._history[index] = entry
