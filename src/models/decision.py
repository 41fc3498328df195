"""Decision models for routine approval requests and the rules that resolve them."""

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import Field, field_validator, model_validator

from src.models.base import ApiModel, BaseEntity, ImmutableModel, local_now


class DecisionStatus(str, Enum):
    """Lifecycle status of a decision. Everything but PENDING is terminal."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    AUTO_APPROVED = "auto-approved"
    ESCALATED = "escalated"


class DecisionCategory(str, Enum):
    """Business area of a decision.

    Rules tagged OTHER match decisions of every category.
    """

    BUDGET = "budget"
    SCHEDULING = "scheduling"
    COMMUNICATION = "communication"
    TASK = "task"
    RESOURCE = "resource"
    OTHER = "other"


class DecisionPriority(str, Enum):
    """Urgency of a decision."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class ImpactScope(str, Enum):
    """Who is affected by a decision option."""

    INDIVIDUAL = "individual"
    TEAM = "team"
    DEPARTMENT = "department"
    ORGANIZATION = "organization"


class ConditionOperator(str, Enum):
    """Comparison applied by a rule condition."""

    EQUALS = "equals"
    NOT_EQUALS = "not_equals"
    GREATER_THAN = "greater_than"
    LESS_THAN = "less_than"
    CONTAINS = "contains"
    NOT_CONTAINS = "not_contains"


class RuleAction(str, Enum):
    """What a matching rule does to a pending decision."""

    AUTO_APPROVE = "auto_approve"
    AUTO_REJECT = "auto_reject"
    ESCALATE = "escalate"
    NOTIFY = "notify"


class DecisionOutcome(str, Enum):
    """Outcome recorded in the decision history."""

    APPROVED = "approved"
    REJECTED = "rejected"


class DecisionContext(ImmutableModel):
    """Who asked for a decision and the facts rules are evaluated against."""

    user_id: str = Field(description="User who raised the decision")
    team_id: str | None = Field(default=None)
    department_id: str | None = Field(default=None)
    project_id: str | None = Field(default=None)
    related_entities: list[str] | None = Field(default=None)
    metadata: dict[str, Any] = Field(
        default_factory=dict,
        description="Free-form facts (amount, currency, ...) read by rule conditions",
    )


class OptionImpact(ImmutableModel):
    """Expected impact of choosing an option."""

    description: str
    scope: ImpactScope
    metrics: dict[str, Any] | None = Field(default=None)


class DecisionOption(ImmutableModel):
    """One of the mutually exclusive choices of a decision."""

    id: str = Field(min_length=1)
    description: str
    impact: OptionImpact
    confidence: float = Field(
        ge=0.0,
        le=1.0,
        description="Confidence that this option is the right one (0-1)",
    )


class DecisionCreate(ApiModel):
    """Caller-supplied fields of a new decision.

    The engine assigns id, timestamps and the initial PENDING status.
    """

    title: str = Field(min_length=1, max_length=500)
    description: str = Field(default="", max_length=5000)
    category: DecisionCategory
    priority: DecisionPriority = Field(default=DecisionPriority.MEDIUM)
    due_by: datetime | None = Field(default=None)
    context: DecisionContext
    options: list[DecisionOption] = Field(default_factory=list)
    selected_option: str | None = Field(default=None)
    reasoning: str | None = Field(default=None)
    approved_by: str | None = Field(default=None)
    rejected_by: str | None = Field(default=None)
    escalated_to: str | None = Field(default=None)
    auto_decision_threshold: float | None = Field(
        default=None,
        ge=0.0,
        le=1.0,
        description="Minimum confidence to resolve without a human (0-1)",
    )
    notify_users: list[str] | None = Field(default=None)

    @model_validator(mode="after")
    def _selected_option_exists(self):
        if self.selected_option is not None:
            option_ids = {option.id for option in self.options}
            if self.selected_option not in option_ids:
                raise ValueError(
                    f"selected_option '{self.selected_option}' is not one of the options"
                )
        return self

    def option(self, option_id: str) -> DecisionOption | None:
        """Find an option by id."""
        for option in self.options:
            if option.id == option_id:
                return option
        return None


class Decision(BaseEntity, DecisionCreate):
    """A structured approval request tracked by the decision engine.

    Decisions are never deleted; they are kept as an audit trail.
    """

    status: DecisionStatus = Field(default=DecisionStatus.PENDING)

    @property
    def is_pending(self) -> bool:
        """Check if the decision can still change status."""
        return self.status == DecisionStatus.PENDING


class RuleCondition(ImmutableModel):
    """A single test a decision must pass for a rule to fire."""

    field: str = Field(description="Dot path into the decision, e.g. context.metadata.amount")
    operator: ConditionOperator
    value: Any = None

    @field_validator("field")
    @classmethod
    def _known_field(cls, value: str) -> str:
        from src.decisions.fields import is_known_field

        if not is_known_field(value):
            raise ValueError(f"unknown rule condition field: {value}")
        return value


class RuleCreate(ApiModel):
    """Caller-supplied fields of a new rule."""

    name: str = Field(min_length=1, max_length=200)
    description: str = Field(default="")
    category: DecisionCategory
    conditions: list[RuleCondition] = Field(default_factory=list)
    action: RuleAction
    action_params: dict[str, Any] = Field(default_factory=dict)
    priority: int = Field(description="Evaluation order, lower runs first")
    enabled: bool = Field(default=True)


class DecisionRule(RuleCreate, ImmutableModel):
    """A prioritized rule applied automatically to new decisions."""

    id: str

    def applies_to(self, category: DecisionCategory) -> bool:
        """Check category match. OTHER acts as a wildcard."""
        return self.category == category or self.category == DecisionCategory.OTHER


class DecisionFeedback(ImmutableModel):
    """Human rating of a recorded outcome."""

    rating: int = Field(ge=1, le=5)
    comments: str | None = Field(default=None)


class DecisionHistory(ImmutableModel):
    """Append-only audit entry for an approve/reject transition."""

    decision_id: str
    outcome: DecisionOutcome
    selected_option: str = Field(
        default="",
        description="Chosen option id, empty for rejections",
    )
    timestamp: datetime = Field(default_factory=local_now)
    feedback: DecisionFeedback | None = Field(default=None)
