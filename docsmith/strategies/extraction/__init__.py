"""Variable extraction strategies.

Implements placeholder pattern matching and semantic-detector merging.
"""

from docsmith.strategies.extraction.extractor import VariableExtractor, normalize_name
from docsmith.strategies.extraction.patterns import (
    DEFAULT_MATCHERS,
    PatternCatalog,
    PatternMatcher,
    VariableCandidate,
    normalize_placeholders,
)

__all__ = [
    "DEFAULT_MATCHERS",
    "PatternCatalog",
    "PatternMatcher",
    "VariableCandidate",
    "VariableExtractor",
    "normalize_name",
    "normalize_placeholders",
]
