"""Profile data strategies: similarity, deduplication, storage, validation."""

from docsmith.strategies.profiles.deduplicator import Deduplicator
from docsmith.strategies.profiles.similarity import SimilarityScorer, edit_distance, normalize_value
from docsmith.strategies.profiles.store import ProfileStore
from docsmith.strategies.profiles.validation import DataValidator

__all__ = [
    "DataValidator",
    "Deduplicator",
    "ProfileStore",
    "SimilarityScorer",
    "edit_distance",
    "normalize_value",
]
