"""Decision engine.

Creates decisions, resolves them automatically with prioritized rules or
confidence thresholds (optionally asking a decision plugin), handles manual
approval and rejection, and keeps the audit history.

Lifecycle:

    pending -> auto-approved   (rule auto_approve, or confidence >= threshold)
    pending -> rejected        (rule auto_reject, or manual reject)
    pending -> escalated       (rule escalate)
    pending -> approved        (manual approve)

Every non-pending status is terminal. Operations on unknown ids return
None/False instead of raising.
"""

import asyncio
from typing import Any

import structlog

from src.decisions.rules import rule_matches
from src.decisions.store import DecisionStore, generate_id
from src.models.decision import (
    Decision,
    DecisionCreate,
    DecisionFeedback,
    DecisionHistory,
    DecisionOutcome,
    DecisionRule,
    DecisionStatus,
    RuleAction,
    RuleCreate,
)
from src.models.plugin import DecisionEvaluation
from src.plugins.registry import PluginRegistry

logger = structlog.get_logger()


class DecisionEngine:
    """Evaluates decisions against rules and confidence thresholds."""

    def __init__(
        self,
        store: DecisionStore | None = None,
        plugins: PluginRegistry | None = None,
    ):
        """Initialize engine.

        Args:
            store: Decision state (a fresh in-memory store if None)
            plugins: Registry consulted for decision plugins
        """
        self._store = store or DecisionStore()
        self._plugins = plugins if plugins is not None else PluginRegistry()
        self._outcome_tasks: set[asyncio.Task] = set()

    @property
    def plugins(self) -> PluginRegistry:
        """The plugin registry the engine consults."""
        return self._plugins

    # Plugins

    def register_plugin(self, plugin: Any) -> bool:
        """Register a plugin with the engine's registry."""
        return self._plugins.register(plugin)

    async def unregister_plugin(self, plugin_id: str) -> bool:
        """Unregister a plugin from the engine's registry."""
        return await self._plugins.unregister(plugin_id)

    async def wait_for_outcomes(self) -> None:
        """Wait until plugins have been told about every recorded outcome.

        Outcome notifications run in the background so a slow plugin never
        delays a resolution.
        """
        while self._outcome_tasks:
            await asyncio.gather(*self._outcome_tasks)

    # Decisions

    async def create_decision(self, fields: DecisionCreate) -> Decision:
        """Create a decision and evaluate it immediately.

        Args:
            fields: Caller-supplied decision fields

        Returns:
            The decision as stored after evaluation
        """
        decision = Decision(
            **fields.model_dump(),
            id=generate_id("decision"),
            status=DecisionStatus.PENDING,
        )
        self._store.save_decision(decision)
        logger.info(
            "created decision",
            decision_id=decision.id,
            category=decision.category.value,
        )

        await self._evaluate(decision.id)
        return self._store.get_decision(decision.id)

    def get_decision(self, decision_id: str) -> Decision | None:
        """Get a decision snapshot by id."""
        return self._store.get_decision(decision_id)

    def list_decisions(self) -> list[Decision]:
        """All decisions in creation order."""
        return self._store.list_decisions()

    def list_by_status(self, status: DecisionStatus) -> list[Decision]:
        """Decisions with a given status."""
        return self._store.list_decisions(status)

    def list_pending(self) -> list[Decision]:
        """Decisions still awaiting a human or a rule."""
        return self._store.list_decisions(DecisionStatus.PENDING)

    async def approve_decision(
        self,
        decision_id: str,
        option_id: str,
        approved_by: str,
        reasoning: str | None = None,
    ) -> Decision | None:
        """Manually approve a pending decision with one of its options.

        Returns:
            Updated decision, or None if the decision or option does not
            exist or the decision is no longer pending
        """
        decision = self._store.get_decision(decision_id)
        if decision is None or decision.option(option_id) is None:
            return None
        if not decision.is_pending:
            logger.warning(
                "decision already resolved",
                decision_id=decision_id,
                status=decision.status.value,
            )
            return None

        updated = self._update(
            decision,
            status=DecisionStatus.APPROVED,
            selected_option=option_id,
            approved_by=approved_by,
            reasoning=reasoning or "Manually approved",
        )
        await self._record_outcome(decision_id, DecisionOutcome.APPROVED, option_id)
        return updated

    async def reject_decision(
        self,
        decision_id: str,
        rejected_by: str,
        reasoning: str | None = None,
    ) -> Decision | None:
        """Manually reject a pending decision.

        Returns:
            Updated decision, or None if the decision does not exist or is
            no longer pending
        """
        decision = self._store.get_decision(decision_id)
        if decision is None:
            return None
        if not decision.is_pending:
            logger.warning(
                "decision already resolved",
                decision_id=decision_id,
                status=decision.status.value,
            )
            return None

        updated = self._update(
            decision,
            status=DecisionStatus.REJECTED,
            rejected_by=rejected_by,
            reasoning=reasoning or "Manually rejected",
        )
        await self._record_outcome(decision_id, DecisionOutcome.REJECTED, "")
        return updated

    # Rules

    def add_rule(self, fields: RuleCreate) -> DecisionRule:
        """Add a rule.

        Existing pending decisions are not re-evaluated; rules only apply
        to decisions created afterwards.
        """
        rule = DecisionRule(**fields.model_dump(), id=generate_id("rule"))
        self._store.add_rule(rule)
        logger.info("added rule", rule_id=rule.id, priority=rule.priority)
        return rule

    def remove_rule(self, rule_id: str) -> bool:
        """Remove a rule. Returns False if no rule has this id."""
        return self._store.remove_rule(rule_id)

    def list_rules(self) -> list[DecisionRule]:
        """Rules in evaluation order."""
        return self._store.list_rules()

    # History

    def get_history(self) -> list[DecisionHistory]:
        """Full decision history."""
        return self._store.list_history()

    def get_history_for_decision(self, decision_id: str) -> list[DecisionHistory]:
        """History entries for one decision."""
        return self._store.list_history(decision_id)

    def provide_feedback(
        self,
        decision_id: str,
        rating: int,
        comments: str | None = None,
    ) -> bool:
        """Attach feedback to the first history entry of a decision.

        Returns:
            False if the decision has no history or the rating is not 1-5
        """
        index = self._store.find_history_index(decision_id)
        if index is None:
            return False
        if not 1 <= rating <= 5:
            logger.warning("invalid feedback rating", decision_id=decision_id, rating=rating)
            return False

        entry = self._store.list_history()[index]
        feedback = DecisionFeedback(rating=rating, comments=comments)
        self._store.replace_history(index, entry.model_copy(update={"feedback": feedback}))
        return True

    # Evaluation

    async def _evaluate(self, decision_id: str) -> None:
        decision = self._store.get_decision(decision_id)
        if decision is None or not decision.is_pending:
            return

        for rule in self._store.list_rules():
            if rule_matches(decision, rule):
                logger.info(
                    "rule matched",
                    decision_id=decision_id,
                    rule_id=rule.id,
                    action=rule.action.value,
                )
                await self._apply_rule(decision, rule)
                break

        decision = self._store.get_decision(decision_id)
        if decision.is_pending and decision.auto_decision_threshold is not None:
            await self._attempt_auto_decision(decision)

    async def _apply_rule(self, decision: Decision, rule: DecisionRule) -> None:
        params = rule.action_params

        if rule.action == RuleAction.AUTO_APPROVE:
            if not decision.options:
                return
            option_id = params.get("optionId") or decision.options[0].id
            if decision.option(option_id) is None:
                logger.warning(
                    "rule names an unknown option",
                    decision_id=decision.id,
                    rule_id=rule.id,
                    option_id=option_id,
                )
                return
            self._update(
                decision,
                status=DecisionStatus.AUTO_APPROVED,
                selected_option=option_id,
                reasoning=params.get("reasoning") or f"Auto-approved by rule: {rule.name}",
            )
            await self._record_outcome(decision.id, DecisionOutcome.APPROVED, option_id)

        elif rule.action == RuleAction.AUTO_REJECT:
            self._update(
                decision,
                status=DecisionStatus.REJECTED,
                reasoning=params.get("reasoning") or f"Auto-rejected by rule: {rule.name}",
            )
            await self._record_outcome(decision.id, DecisionOutcome.REJECTED, "")

        elif rule.action == RuleAction.ESCALATE:
            self._update(
                decision,
                status=DecisionStatus.ESCALATED,
                escalated_to=params.get("escalateTo"),
                reasoning=params.get("reasoning") or f"Escalated by rule: {rule.name}",
            )

        elif rule.action == RuleAction.NOTIFY:
            self._update(decision, notify_users=list(params.get("notifyUsers") or []))

    async def _attempt_auto_decision(self, decision: Decision) -> None:
        if not decision.options:
            return
        threshold = decision.auto_decision_threshold

        plugin = next(
            (p for p in self._plugins.decision_plugins() if p.metadata.enabled),
            None,
        )
        if plugin is not None:
            try:
                result = DecisionEvaluation.model_validate(
                    await plugin.evaluate_decision(decision.context, decision.options)
                )
            except Exception as e:
                logger.error(
                    "decision plugin failed",
                    decision_id=decision.id,
                    plugin_id=plugin.metadata.id,
                    error=str(e),
                )
                return

            if result.confidence >= threshold and decision.option(result.decision):
                self._update(
                    decision,
                    status=DecisionStatus.AUTO_APPROVED,
                    selected_option=result.decision,
                    reasoning=result.reasoning or "Auto-approved by decision engine",
                )
                await self._record_outcome(
                    decision.id, DecisionOutcome.APPROVED, result.decision
                )
            return

        best = decision.options[0]
        for option in decision.options[1:]:
            if option.confidence > best.confidence:
                best = option

        if best.confidence >= threshold:
            self._update(
                decision,
                status=DecisionStatus.AUTO_APPROVED,
                selected_option=best.id,
                reasoning="Auto-approved based on confidence score",
            )
            await self._record_outcome(decision.id, DecisionOutcome.APPROVED, best.id)

    def _update(self, decision: Decision, **updates) -> Decision:
        updated = decision.touched(**updates)
        self._store.save_decision(updated)
        if "status" in updates:
            logger.info(
                "decision status changed",
                decision_id=decision.id,
                status=updated.status.value,
            )
        return updated

    async def _record_outcome(
        self,
        decision_id: str,
        outcome: DecisionOutcome,
        selected_option: str,
    ) -> None:
        self._store.append_history(
            DecisionHistory(
                decision_id=decision_id,
                outcome=outcome,
                selected_option=selected_option,
            )
        )

        result = {"outcome": outcome.value, "selectedOption": selected_option}
        for plugin in self._plugins.decision_plugins():
            if not plugin.metadata.enabled:
                continue
            task = asyncio.create_task(self._notify_plugin(plugin, decision_id, result))
            self._outcome_tasks.add(task)
            task.add_done_callback(self._outcome_tasks.discard)

    @staticmethod
    async def _notify_plugin(plugin: Any, decision_id: str, result: dict[str, str]) -> None:
        try:
            await plugin.record_outcome(decision_id, result)
        except Exception as e:
            logger.error(
                "error recording outcome in plugin",
                plugin_id=plugin.metadata.id,
                decision_id=decision_id,
                error=str(e),
            )
