"""API endpoints for the decision engine.

Create decisions (evaluated against rules on creation), resolve pending
ones manually, manage rules, and read the audit history.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, Response
from pydantic import Field

from src.api.dependencies import get_decision_engine
from src.decisions.engine import DecisionEngine
from src.models.base import ApiModel
from src.models.decision import (
    Decision,
    DecisionCreate,
    DecisionHistory,
    DecisionRule,
    DecisionStatus,
    RuleCreate,
)

router = APIRouter(prefix="/decisions", tags=["decisions"])

Engine = Annotated[DecisionEngine, Depends(get_decision_engine)]


class ApproveRequest(ApiModel):
    """Request body for approving a decision."""

    option_id: str = Field(description="ID of the option to approve")
    approved_by: str = Field(description="User approving the decision")
    reasoning: str | None = Field(default=None)


class RejectRequest(ApiModel):
    """Request body for rejecting a decision."""

    rejected_by: str = Field(description="User rejecting the decision")
    reasoning: str | None = Field(default=None)


class FeedbackRequest(ApiModel):
    """Request body for rating a resolved decision."""

    rating: int = Field(ge=1, le=5, description="Rating from 1 (poor) to 5 (excellent)")
    comments: str | None = Field(default=None)


class FeedbackResponse(ApiModel):
    """Response for the feedback endpoint."""

    success: bool
    decision_id: str


def _unresolvable(engine: DecisionEngine, decision_id: str) -> HTTPException:
    """Map a None result of approve/reject to the matching HTTP error."""
    decision = engine.get_decision(decision_id)
    if decision is None:
        return HTTPException(status_code=404, detail=f"Decision {decision_id} not found")
    if not decision.is_pending:
        return HTTPException(
            status_code=409,
            detail=f"Decision {decision_id} is already {decision.status.value}",
        )
    return HTTPException(status_code=404, detail="Option not found")


# Collection routes are registered before /{decision_id} so that
# "history" and "rules" are not captured as decision ids.


@router.post("", response_model=Decision, status_code=201)
async def create_decision(request: DecisionCreate, engine: Engine) -> Decision:
    """Create a decision.

    Rules and the confidence threshold are applied before the response,
    so the returned status may already be auto-approved, rejected or
    escalated.
    """
    return await engine.create_decision(request)


@router.get("", response_model=list[Decision])
async def list_decisions(
    engine: Engine,
    status: DecisionStatus | None = Query(default=None, description="Filter by status"),
) -> list[Decision]:
    """List decisions, optionally filtered by status."""
    if status is None:
        return engine.list_decisions()
    return engine.list_by_status(status)


@router.get("/history", response_model=list[DecisionHistory])
async def get_history(engine: Engine) -> list[DecisionHistory]:
    """Full decision history in the order outcomes were recorded."""
    return engine.get_history()


@router.get("/rules", response_model=list[DecisionRule])
async def list_rules(engine: Engine) -> list[DecisionRule]:
    """Rules in evaluation order."""
    return engine.list_rules()


@router.post("/rules", response_model=DecisionRule, status_code=201)
async def add_rule(request: RuleCreate, engine: Engine) -> DecisionRule:
    """Add a rule. It applies to decisions created from now on."""
    return engine.add_rule(request)


@router.delete("/rules/{rule_id}", status_code=204)
async def remove_rule(rule_id: str, engine: Engine) -> Response:
    """Remove a rule."""
    if not engine.remove_rule(rule_id):
        raise HTTPException(status_code=404, detail=f"Rule {rule_id} not found")
    return Response(status_code=204)


@router.get("/{decision_id}", response_model=Decision)
async def get_decision(decision_id: str, engine: Engine) -> Decision:
    """Get a decision by ID."""
    decision = engine.get_decision(decision_id)
    if decision is None:
        raise HTTPException(status_code=404, detail=f"Decision {decision_id} not found")
    return decision


@router.post("/{decision_id}/approve", response_model=Decision)
async def approve_decision(
    decision_id: str,
    request: ApproveRequest,
    engine: Engine,
) -> Decision:
    """Approve a pending decision with one of its options.

    Raises:
        HTTPException: 404 for an unknown decision or option, 409 if the
            decision is no longer pending
    """
    decision = await engine.approve_decision(
        decision_id,
        request.option_id,
        request.approved_by,
        request.reasoning,
    )
    if decision is None:
        raise _unresolvable(engine, decision_id)
    return decision


@router.post("/{decision_id}/reject", response_model=Decision)
async def reject_decision(
    decision_id: str,
    request: RejectRequest,
    engine: Engine,
) -> Decision:
    """Reject a pending decision.

    Raises:
        HTTPException: 404 for an unknown decision, 409 if the decision is
            no longer pending
    """
    decision = await engine.reject_decision(
        decision_id,
        request.rejected_by,
        request.reasoning,
    )
    if decision is None:
        raise _unresolvable(engine, decision_id)
    return decision


@router.get("/{decision_id}/history", response_model=list[DecisionHistory])
async def get_decision_history(decision_id: str, engine: Engine) -> list[DecisionHistory]:
    """History entries of one decision (empty if it was never resolved)."""
    if engine.get_decision(decision_id) is None:
        raise HTTPException(status_code=404, detail=f"Decision {decision_id} not found")
    return engine.get_history_for_decision(decision_id)


@router.post("/{decision_id}/feedback", response_model=FeedbackResponse)
async def provide_feedback(
    decision_id: str,
    request: FeedbackRequest,
    engine: Engine,
) -> FeedbackResponse:
    """Rate the outcome of a resolved decision.

    Raises:
        HTTPException: 404 if the decision has no recorded outcome
    """
    if not engine.provide_feedback(decision_id, request.rating, request.comments):
        raise HTTPException(
            status_code=404,
            detail=f"No recorded outcome for decision {decision_id}",
        )
    return FeedbackResponse(success=True, decision_id=decision_id)
