"""Fuzzy deduplication of profile snapshots."""

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass

from docsmith.interfaces.errors import InvalidInputError
from docsmith.models import MergeResult, ProfileSnapshot
from docsmith.strategies.profiles.similarity import SimilarityScorer, normalize_value

logger = logging.getLogger(__name__)


@dataclass
class _Tracked:
    value: str
    normalized: str


class Deduplicator:
    """Merges historical field snapshots into one canonical record.

    Snapshots are walked in their stored order. A field's tracked value is
    set when the field is first seen and replaced only by a merge, so a
    later collision compares against the just-merged value.
    """

    def __init__(
        self,
        scorer: SimilarityScorer | None = None,
        threshold: float = 0.8,
    ) -> None:
        """Initialize the deduplicator.

        Args:
            scorer: Similarity scorer. Defaults to a normalizing scorer.
            threshold: Minimum similarity for two values to collide.

        Raises:
            ValueError: If threshold is outside [0, 1].
        """
        if not 0.0 <= threshold <= 1.0:
            raise ValueError("threshold must be between 0 and 1")
        self._scorer = scorer or SimilarityScorer()
        self._threshold = threshold

    def is_duplicate(self, existing: str, candidate: str) -> bool:
        """Whether two normalized values are distinct spellings of one value."""
        if existing == candidate:
            return False
        if candidate in existing or existing in candidate:
            return True
        return self._scorer.score(existing, candidate) >= self._threshold

    def merge(
        self, snapshots: Iterable[ProfileSnapshot | Mapping[str, str]] | None
    ) -> MergeResult:
        """Merge snapshots into canonical field values.

        Args:
            snapshots: Snapshots in chronological order. Plain mappings are
                taken as the fields of a snapshot.

        Returns:
            MergeResult with only the fields touched by a merge; when no
            collision was found, ``merged_fields`` is empty.

        Raises:
            InvalidInputError: If snapshots is None.
        """
        if snapshots is None:
            raise InvalidInputError("Snapshot list is required")

        tracked: dict[str, _Tracked] = {}
        result = MergeResult()

        for snapshot in snapshots:
            if isinstance(snapshot, Mapping):
                snapshot = ProfileSnapshot(fields=dict(snapshot))
            for field, value in snapshot.fields.items():
                normalized = normalize_value(value)
                if not normalized:
                    continue

                existing = tracked.get(field)
                if existing is None:
                    tracked[field] = _Tracked(value=value, normalized=normalized)
                    continue

                if not self.is_duplicate(existing.normalized, normalized):
                    continue

                merged = value if len(value) > len(existing.value) else existing.value
                tracked[field] = _Tracked(value=merged, normalized=normalize_value(merged))

                result.duplicate_count += 1
                result.merged_fields[field] = merged
                if field not in result.fields_affected:
                    result.fields_affected.append(field)

                logger.debug(f"Duplicate in field '{field}': kept {merged!r}")

        logger.info(
            f"Deduplication complete: {result.duplicate_count} duplicate(s) "
            f"across {len(result.fields_affected)} field(s)"
        )
        return result
