"""Tests for domain models."""

from datetime import datetime

import pytest
from pydantic import ValidationError

from src.models.base import BaseEntity
from src.models.decision import (
    Decision,
    DecisionCategory,
    DecisionCreate,
    DecisionFeedback,
    DecisionRule,
    DecisionStatus,
    RuleCondition,
)
from src.schedule.schemas import CalendarEvent, CalendarInsight

DECISION_PAYLOAD = {
    "title": "Office Supplies Budget Approval",
    "category": "budget",
    "context": {"userId": "user", "metadata": {"amount": 250}},
    "options": [
        {
            "id": "approve",
            "description": "Approve",
            "impact": {"description": "Supplies bought", "scope": "team"},
            "confidence": 0.9,
        }
    ],
    "autoDecisionThreshold": 0.8,
}


class TestBaseEntity:
    """Tests for BaseEntity."""

    def test_auto_generates_timestamps(self):
        """BaseEntity should fill created_at and updated_at with aware times."""

        class TestEntity(BaseEntity):
            pass

        entity = TestEntity(id="e1")
        assert entity.created_at.tzinfo is not None
        assert entity.created_at <= entity.updated_at

    def test_touched_returns_updated_copy(self):
        """touched() returns a copy with a fresh updated_at."""

        class TestEntity(BaseEntity):
            name: str = ""

        entity = TestEntity(id="e1", name="before")
        updated = entity.touched(name="after")

        assert entity.name == "before"
        assert updated.name == "after"
        assert updated.updated_at >= entity.updated_at
        assert updated.created_at == entity.created_at

    def test_is_frozen(self):
        class TestEntity(BaseEntity):
            pass

        entity = TestEntity(id="e1")
        with pytest.raises(ValidationError):
            entity.id = "e2"


class TestDecisionModels:
    """Tests for decision models."""

    def test_accepts_camel_case_payload(self):
        request = DecisionCreate.model_validate(DECISION_PAYLOAD)
        assert request.context.user_id == "user"
        assert request.auto_decision_threshold == 0.8
        assert request.priority == "medium"

    def test_dumps_camel_case(self):
        decision = Decision(
            **DecisionCreate.model_validate(DECISION_PAYLOAD).model_dump(), id="d1"
        )
        data = decision.model_dump(by_alias=True, mode="json")

        assert data["status"] == "pending"
        assert data["autoDecisionThreshold"] == 0.8
        assert data["context"]["userId"] == "user"
        assert "createdAt" in data

    def test_confidence_must_be_a_probability(self):
        payload = {**DECISION_PAYLOAD}
        payload["options"] = [{**DECISION_PAYLOAD["options"][0], "confidence": 1.5}]
        with pytest.raises(ValidationError):
            DecisionCreate.model_validate(payload)

    def test_selected_option_must_exist(self):
        with pytest.raises(ValidationError):
            DecisionCreate.model_validate({**DECISION_PAYLOAD, "selectedOption": "nope"})

    def test_decision_is_frozen(self):
        decision = Decision(
            **DecisionCreate.model_validate(DECISION_PAYLOAD).model_dump(), id="d1"
        )
        assert decision.is_pending
        with pytest.raises(ValidationError):
            decision.status = DecisionStatus.APPROVED

    def test_auto_approved_wire_value(self):
        assert DecisionStatus.AUTO_APPROVED.value == "auto-approved"

    def test_rule_condition_field_is_checked(self):
        RuleCondition(field="context.metadata.amount", operator="less_than", value=500)
        with pytest.raises(ValidationError):
            RuleCondition(field="context.metadata", operator="less_than", value=500)

    def test_other_rule_applies_everywhere(self):
        rule = DecisionRule(
            id="r1", name="Any", category="other", action="notify", priority=1
        )
        assert rule.applies_to(DecisionCategory.BUDGET)
        assert rule.applies_to(DecisionCategory.SCHEDULING)

    def test_feedback_rating_range(self):
        with pytest.raises(ValidationError):
            DecisionFeedback(rating=6)


class TestCalendarModels:
    """Tests for calendar event and insight models."""

    def test_naive_times_become_local(self):
        event = CalendarEvent(
            id="e1",
            start_time=datetime(2025, 6, 10, 10, 0),
            end_time=datetime(2025, 6, 10, 11, 0),
        )
        assert event.start_time.tzinfo is not None
        assert event.duration_minutes == 60

    def test_insight_needs_related_event(self):
        with pytest.raises(ValidationError):
            CalendarInsight(
                id="x",
                type="conflict",
                title="Conflict",
                description="",
                priority="high",
                related_event_ids=[],
                created_at=datetime(2025, 6, 10, 10, 0),
            )
