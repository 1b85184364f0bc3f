"""Domain models shared by the extraction, rule and profile components."""

from docsmith.models.profile import FrequentVariable, ProfileSnapshot, UserProfile
from docsmith.models.results import MergeResult, RuleApplicationResult, ValidationResult
from docsmith.models.rules import (
    CompoundCondition,
    Condition,
    LogicalOperator,
    Operator,
    Rule,
    RuleAction,
    SimpleCondition,
    SkippedRule,
    SkippedTarget,
    parse_condition,
)
from docsmith.models.template import (
    Binding,
    ConditionalSection,
    CustomizationEntry,
    DataType,
    Document,
    Template,
    Variable,
    VariableSource,
)

__all__ = [
    "Binding",
    "CompoundCondition",
    "Condition",
    "ConditionalSection",
    "CustomizationEntry",
    "DataType",
    "Document",
    "FrequentVariable",
    "LogicalOperator",
    "MergeResult",
    "Operator",
    "ProfileSnapshot",
    "Rule",
    "RuleAction",
    "RuleApplicationResult",
    "SimpleCondition",
    "SkippedRule",
    "SkippedTarget",
    "Template",
    "UserProfile",
    "ValidationResult",
    "Variable",
    "VariableSource",
    "parse_condition",
]
