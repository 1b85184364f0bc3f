"""Result objects returned by the rule engine, deduplicator and validator."""

from pydantic import Field

from docsmith.models.base import WireModel
from docsmith.models.rules import SkippedRule, SkippedTarget
from docsmith.models.template import Binding, CustomizationEntry


class RuleApplicationResult(WireModel):
    """Outcome of applying an ordered rule list to one document.

    ``applied`` holds one history entry per rule whose condition held;
    everything that was skipped is reported rather than raised.
    """

    content: str
    bindings: list[Binding] = Field(default_factory=list)
    applied: list[CustomizationEntry] = Field(default_factory=list)
    skipped_rules: list[SkippedRule] = Field(default_factory=list)
    skipped_targets: list[SkippedTarget] = Field(default_factory=list)

    def binding_values(self) -> dict[str, str]:
        return {binding.name: binding.value for binding in self.bindings}


class MergeResult(WireModel):
    """Outcome of fuzzy deduplication over profile snapshots."""

    merged_fields: dict[str, str] = Field(default_factory=dict)
    duplicate_count: int = 0
    fields_affected: list[str] = Field(default_factory=list)


class ValidationResult(WireModel):
    """Outcome of validating one piece of profile data."""

    is_valid: bool = False
    errors: list[str] = Field(default_factory=list)
    suggestions: list[str] = Field(default_factory=list)
    confidence: float = 0.0
