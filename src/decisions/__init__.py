"""Decision engine module.

Rule-based and confidence-based resolution of routine approval requests,
with an in-memory store and audit history.
"""

from src.decisions.engine import DecisionEngine
from src.decisions.fields import UnknownFieldError, is_known_field, resolve_field
from src.decisions.rules import compare, condition_matches, rule_matches
from src.decisions.samples import sample_decisions, sample_rules, seed_engine
from src.decisions.store import DecisionStore, generate_id

__all__ = [
    "DecisionEngine",
    "DecisionStore",
    "UnknownFieldError",
    "compare",
    "condition_matches",
    "generate_id",
    "is_known_field",
    "resolve_field",
    "rule_matches",
    "sample_decisions",
    "sample_rules",
    "seed_engine",
]
