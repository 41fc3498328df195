"""Fixtures for decision engine tests."""

from collections.abc import Callable
from typing import Any

import pytest

from src.models.decision import Decision, DecisionCreate, RuleCreate


@pytest.fixture
def make_request() -> Callable[..., DecisionCreate]:
    """Factory for decision requests.

    Defaults to a budget request with approve (0.9) and reject (0.1)
    options and no auto-decision threshold.
    """

    def _make(
        amount: Any = 250,
        confidences: tuple[float, ...] = (0.9, 0.1),
        **fields,
    ) -> DecisionCreate:
        option_ids = ["approve", "reject", "alternative"]
        fields.setdefault("title", "Budget request")
        fields.setdefault("category", "budget")
        fields.setdefault(
            "context",
            {"user_id": "user", "metadata": {"amount": amount, "currency": "USD"}},
        )
        fields.setdefault(
            "options",
            [
                {
                    "id": option_ids[i],
                    "description": f"Option {option_ids[i]}",
                    "impact": {"description": "Team impact", "scope": "team"},
                    "confidence": confidence,
                }
                for i, confidence in enumerate(confidences)
            ],
        )
        return DecisionCreate(**fields)

    return _make


@pytest.fixture
def make_decision(make_request) -> Callable[..., Decision]:
    """Factory for stored-looking decisions (pending, fixed id)."""

    def _make(decision_id: str = "decision-1", **fields) -> Decision:
        request = make_request(**fields)
        return Decision(**request.model_dump(), id=decision_id)

    return _make


@pytest.fixture
def make_rule() -> Callable[..., RuleCreate]:
    """Factory for rule requests on the budget category."""

    def _make(
        action: str = "auto_approve",
        conditions: list[dict[str, Any]] | None = None,
        priority: int = 10,
        **fields,
    ) -> RuleCreate:
        fields.setdefault("name", f"{action} rule")
        fields.setdefault("category", "budget")
        return RuleCreate(
            action=action,
            conditions=conditions or [],
            priority=priority,
            **fields,
        )

    return _make
