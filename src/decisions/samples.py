"""Sample rules and decisions loaded into a fresh engine for demos."""

import structlog

from src.decisions.engine import DecisionEngine
from src.models.decision import DecisionCreate, RuleCreate

logger = structlog.get_logger()


def sample_rules() -> list[RuleCreate]:
    """Budget thresholds and a high-confidence reschedule rule."""
    return [
        RuleCreate(
            name="Auto-approve small budget requests",
            description="Automatically approve budget requests under $500",
            category="budget",
            conditions=[
                {"field": "context.metadata.amount", "operator": "less_than", "value": 500}
            ],
            action="auto_approve",
            action_params={
                "optionId": "approve",
                "reasoning": "Auto-approved as amount is under $500 threshold",
            },
            priority=10,
        ),
        RuleCreate(
            name="Escalate large budget requests",
            description="Escalate budget requests over $1000 to department head",
            category="budget",
            conditions=[
                {"field": "context.metadata.amount", "operator": "greater_than", "value": 1000}
            ],
            action="escalate",
            action_params={
                "escalateTo": "user",
                "reasoning": "Escalated as amount exceeds $1000 threshold",
            },
            priority=5,
        ),
        RuleCreate(
            name="Auto-approve meeting reschedules with high confidence",
            description="Automatically approve meeting reschedules if confidence is high",
            category="scheduling",
            conditions=[
                {"field": "options.0.confidence", "operator": "greater_than", "value": 0.8}
            ],
            action="auto_approve",
            action_params={
                "optionId": "reschedule",
                "reasoning": "Auto-approved as confidence in reschedule option is high",
            },
            priority=20,
        ),
    ]


def sample_decisions() -> list[DecisionCreate]:
    """Routine budget and scheduling requests."""
    return [
        DecisionCreate(
            title="Office Supplies Budget Approval",
            description="Request for $250 to purchase office supplies for the engineering team",
            category="budget",
            priority="medium",
            context={
                "user_id": "user",
                "department_id": "d1",
                "metadata": {
                    "amount": 250,
                    "currency": "USD",
                    "purpose": "Office supplies",
                    "requestedBy": "Alex Johnson",
                },
            },
            options=[
                {
                    "id": "approve",
                    "description": "Approve the budget request",
                    "impact": {
                        "description": "Will allow the team to purchase necessary supplies",
                        "scope": "team",
                        "metrics": {"budget": -250},
                    },
                    "confidence": 0.9,
                },
                {
                    "id": "reject",
                    "description": "Reject the budget request",
                    "impact": {
                        "description": "Team will need to wait for supplies or find alternatives",
                        "scope": "team",
                    },
                    "confidence": 0.1,
                },
            ],
            auto_decision_threshold=0.8,
        ),
        DecisionCreate(
            title="Team Meeting Rescheduling",
            description="Weekly team sync needs to be rescheduled due to conflicts",
            category="scheduling",
            priority="medium",
            context={
                "user_id": "user",
                "team_id": "engineering",
                "metadata": {
                    "currentTime": "Wednesday 10:00 AM",
                    "proposedTime": "Thursday 2:00 PM",
                    "attendees": ["m1", "dev1", "dev2", "dev3", "ic1"],
                },
            },
            options=[
                {
                    "id": "reschedule",
                    "description": "Reschedule to Thursday 2:00 PM",
                    "impact": {
                        "description": "All team members can attend",
                        "scope": "team",
                    },
                    "confidence": 0.85,
                },
                {
                    "id": "keep",
                    "description": "Keep the current schedule",
                    "impact": {
                        "description": "Some team members will miss the meeting",
                        "scope": "team",
                    },
                    "confidence": 0.15,
                },
            ],
            auto_decision_threshold=0.8,
        ),
        DecisionCreate(
            title="New Hire Equipment Purchase",
            description="Request to purchase a laptop for new team member",
            category="budget",
            priority="high",
            context={
                "user_id": "user",
                "department_id": "d1",
                "metadata": {
                    "amount": 1800,
                    "currency": "USD",
                    "purpose": "New hire laptop",
                    "requestedBy": "Emily Rodriguez",
                    "forEmployee": "New Designer",
                },
            },
            options=[
                {
                    "id": "approve",
                    "description": "Approve the equipment purchase",
                    "impact": {
                        "description": "New hire will have necessary equipment",
                        "scope": "individual",
                        "metrics": {"budget": -1800},
                    },
                    "confidence": 0.7,
                },
                {
                    "id": "alternative",
                    "description": "Provide a refurbished laptop",
                    "impact": {
                        "description": "Save budget but may not meet all requirements",
                        "scope": "individual",
                        "metrics": {"budget": -800},
                    },
                    "confidence": 0.2,
                },
                {
                    "id": "reject",
                    "description": "Reject the purchase request",
                    "impact": {
                        "description": "New hire will not have necessary equipment",
                        "scope": "individual",
                    },
                    "confidence": 0.1,
                },
            ],
            auto_decision_threshold=0.8,
        ),
    ]


async def seed_engine(engine: DecisionEngine) -> None:
    """Load sample rules, then sample decisions, into an engine.

    Rules go in first so the sample decisions are evaluated against them.
    """
    for rule in sample_rules():
        engine.add_rule(rule)
    for decision in sample_decisions():
        await engine.create_decision(decision)
    logger.info(
        "seeded decision engine",
        rules=len(engine.list_rules()),
        decisions=len(engine.list_decisions()),
    )
