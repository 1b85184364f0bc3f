"""Conditional rule strategies.

Condition evaluation, action application, marker-delimited sections and
the rule engine that ties them together.
"""

from docsmith.strategies.rules.actions import (
    ActionApplier,
    ActionOutcome,
    split_target,
    substitution_pattern,
    to_pattern_string,
)
from docsmith.strategies.rules.adaptation import rules_from_adaptations
from docsmith.strategies.rules.engine import RuleEngine
from docsmith.strategies.rules.evaluator import ConditionEvaluator, binding_values
from docsmith.strategies.rules.sections import (
    add_conditional_section,
    has_section,
    list_sections,
    remove_section,
    reveal_section,
)

__all__ = [
    "ActionApplier",
    "ActionOutcome",
    "ConditionEvaluator",
    "RuleEngine",
    "add_conditional_section",
    "binding_values",
    "has_section",
    "list_sections",
    "remove_section",
    "reveal_section",
    "rules_from_adaptations",
    "split_target",
    "substitution_pattern",
    "to_pattern_string",
]
