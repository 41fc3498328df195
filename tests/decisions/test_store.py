"""Tests for DecisionStore."""

import re

import pytest
from pydantic import ValidationError

from src.decisions.store import DecisionStore, generate_id
from src.models.decision import (
    DecisionHistory,
    DecisionOutcome,
    DecisionRule,
    DecisionStatus,
)


def _rule(rule_id: str, priority: int) -> DecisionRule:
    return DecisionRule(
        id=rule_id,
        name=rule_id,
        category="budget",
        action="notify",
        priority=priority,
    )


class TestGenerateId:
    """Tests for generate_id."""

    def test_format(self):
        assert re.fullmatch(r"decision-\d+-[0-9a-f]{9}", generate_id("decision"))

    def test_unique(self):
        assert len({generate_id("rule") for _ in range(100)}) == 100


class TestDecisions:
    """Tests for decision storage."""

    def test_save_and_get(self, make_decision):
        store = DecisionStore()
        decision = make_decision("d1")
        store.save_decision(decision)
        assert store.get_decision("d1") == decision
        assert store.get_decision("missing") is None

    def test_replace_keeps_creation_order(self, make_decision):
        """Replacing a decision does not move it."""
        store = DecisionStore()
        first = store.save_decision(make_decision("d1"))
        store.save_decision(make_decision("d2"))
        store.save_decision(first.touched(status=DecisionStatus.REJECTED))

        assert [d.id for d in store.list_decisions()] == ["d1", "d2"]
        assert [d.id for d in store.list_decisions(DecisionStatus.PENDING)] == ["d2"]

    def test_snapshots_are_immutable(self, make_decision):
        """Stored decisions cannot be changed through a returned reference."""
        store = DecisionStore()
        store.save_decision(make_decision("d1"))
        snapshot = store.get_decision("d1")

        with pytest.raises(ValidationError):
            snapshot.status = DecisionStatus.APPROVED

        assert store.get_decision("d1").status == DecisionStatus.PENDING


class TestRules:
    """Tests for rule storage."""

    def test_sorted_by_priority(self):
        store = DecisionStore()
        store.add_rule(_rule("low", 20))
        store.add_rule(_rule("high", 5))
        store.add_rule(_rule("mid", 10))
        assert [r.id for r in store.list_rules()] == ["high", "mid", "low"]

    def test_equal_priorities_keep_insertion_order(self):
        store = DecisionStore()
        for rule_id in ("a", "b", "c"):
            store.add_rule(_rule(rule_id, 10))
        assert [r.id for r in store.list_rules()] == ["a", "b", "c"]

    def test_remove(self):
        store = DecisionStore()
        store.add_rule(_rule("a", 10))
        assert store.remove_rule("a") is True
        assert store.remove_rule("a") is False
        assert store.list_rules() == []

    def test_list_is_a_copy(self):
        store = DecisionStore()
        store.add_rule(_rule("a", 10))
        store.list_rules().clear()
        assert len(store.list_rules()) == 1


class TestHistory:
    """Tests for history storage."""

    def test_append_and_filter(self):
        store = DecisionStore()
        store.append_history(
            DecisionHistory(decision_id="d1", outcome=DecisionOutcome.APPROVED)
        )
        store.append_history(
            DecisionHistory(decision_id="d2", outcome=DecisionOutcome.REJECTED)
        )
        store.append_history(
            DecisionHistory(decision_id="d1", outcome=DecisionOutcome.REJECTED)
        )

        assert len(store.list_history()) == 3
        assert [h.outcome for h in store.list_history("d1")] == [
            DecisionOutcome.APPROVED,
            DecisionOutcome.REJECTED,
        ]
        assert store.find_history_index("d2") == 1
        assert store.find_history_index("d3") is None
