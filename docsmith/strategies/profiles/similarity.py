"""String similarity based on Levenshtein edit distance."""

import re

from rapidfuzz.distance import Levenshtein

_WHITESPACE = re.compile(r"\s+")


def normalize_value(text: str | None) -> str:
    """Lower-case, trim and collapse whitespace runs to one space."""
    if not text:
        return ""
    return _WHITESPACE.sub(" ", text.lower().strip())


def edit_distance(a: str, b: str) -> int:
    """Levenshtein distance with unit insert, delete and substitute costs."""
    return Levenshtein.distance(a, b)


class SimilarityScorer:
    """Scores two strings in [0, 1]: ``1 - distance / max(len)``.

    Identical strings score 1.0; a comparison involving an empty string
    scores 0.0. With ``normalize=True`` both inputs are normalized first.
    """

    def __init__(self, normalize: bool = True) -> None:
        self._normalize = normalize

    def score(self, a: str, b: str) -> float:
        if self._normalize:
            a, b = normalize_value(a), normalize_value(b)
        if a == b:
            return 1.0
        if not a or not b:
            return 0.0
        return Levenshtein.normalized_similarity(a, b)

    def __call__(self, a: str, b: str) -> float:
        return self.score(a, b)
