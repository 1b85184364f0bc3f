"""Concrete strategy implementations."""

from docsmith.strategies.ai import (
    OpenAIRuleSuggester,
    OpenAITextGenerator,
    OpenAIVariableDetector,
)
from docsmith.strategies.documents import (
    DocumentPersonalizer,
)
from docsmith.strategies.extraction import (
    PatternCatalog,
    VariableExtractor,
)
from docsmith.strategies.profiles import (
    DataValidator,
    Deduplicator,
    ProfileStore,
)
from docsmith.strategies.rules import (
    ConditionEvaluator,
    RuleEngine,
)

__all__ = [
    "OpenAIVariableDetector",
    "OpenAITextGenerator",
    "OpenAIRuleSuggester",
    "DocumentPersonalizer",
    "PatternCatalog",
    "VariableExtractor",
    "DataValidator",
    "Deduplicator",
    "ProfileStore",
    "ConditionEvaluator",
    "RuleEngine",
]
