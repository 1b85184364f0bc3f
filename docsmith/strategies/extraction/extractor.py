"""Variable extraction strategy.

Discovers fill-in points in document text with the pattern catalog and an
optional semantic detector, then deduplicates the candidates into the
canonical variable list stored on a template.
"""

import logging
import re
from typing import Any

from pydantic import ValidationError

from docsmith.interfaces.collaborator import BaseVariableDetector, capture
from docsmith.models import Template, Variable, VariableSource
from docsmith.strategies.extraction.patterns import PatternCatalog, normalize_placeholders

logger = logging.getLogger(__name__)

_NON_ALNUM = re.compile(r"[^a-zA-Z0-9]")


def normalize_name(name: str) -> str:
    """Deduplication key: alphanumerics only, lower-cased."""
    return _NON_ALNUM.sub("", name).lower()


class VariableExtractor:
    """Extracts the canonical variable list from document text.

    Pattern matches are higher-confidence than detector output, so they are
    always ranked first; the first candidate to claim a normalized name wins.
    """

    def __init__(
        self,
        catalog: PatternCatalog | None = None,
        detector: BaseVariableDetector | None = None,
        detector_max_chars: int = 10000,
    ) -> None:
        """Initialize the extractor.

        Args:
            catalog: Placeholder matchers. Defaults to the built-in catalog.
            detector: Optional semantic detector collaborator.
            detector_max_chars: How much text is sent to the detector.
        """
        self._catalog = catalog or PatternCatalog()
        self._detector = detector
        self._detector_max_chars = detector_max_chars

        logger.info(
            f"VariableExtractor initialized: matchers={len(self._catalog.matchers)}, "
            f"detector={type(detector).__name__ if detector else None}"
        )

    def match_patterns(self, text: Any) -> list[Variable]:
        """Extract pattern-matched variables only (no collaborator call).

        Args:
            text: Document text. Anything that is not a string yields [].

        Returns:
            Deduplicated variables in first-seen order.
        """
        if not isinstance(text, str) or not text.strip():
            return []

        return self._deduplicate(self._pattern_variables(text))

    async def extract(self, text: Any) -> list[Variable]:
        """Extract variables from document text.

        Args:
            text: Document text. Anything that is not a string yields [].

        Returns:
            Pattern-matched variables (first-seen order) followed by
            detector-supplied variables (given order), deduplicated by
            normalized name. Never raises for bad input or a failing
            detector.
        """
        if not isinstance(text, str) or not text.strip():
            logger.debug("Empty or non-text input, no variables extracted")
            return []

        pattern_vars = self._pattern_variables(text)
        detected_vars = await self._detect(text)

        variables = self._deduplicate(pattern_vars + detected_vars)

        logger.info(
            f"Extraction complete: {len(variables)} variables "
            f"({len(pattern_vars)} pattern candidates, {len(detected_vars)} detected)"
        )
        return variables

    async def prepare_template(self, text: Any, name: str = "") -> Template:
        """Build a Template from document text.

        The stored content is the placeholder-normalized text so that each
        variable's ``raw_pattern`` occurs in it verbatim.
        """
        content = normalize_placeholders(text) if isinstance(text, str) else ""
        variables = await self.extract(content)
        return Template(name=name, content=content, variables=variables)

    def _pattern_variables(self, text: str) -> list[Variable]:
        normalized = normalize_placeholders(text)
        return [
            Variable(
                name=candidate.name,
                raw_pattern=candidate.raw_pattern,
                source=VariableSource.PATTERN_MATCH,
            )
            for candidate in self._catalog.find_all(normalized)
        ]

    async def _detect(self, text: str) -> list[Variable]:
        """Ask the semantic detector for candidates.

        Detector failure or malformed output contributes zero candidates;
        individual malformed entries are dropped.
        """
        if self._detector is None:
            return []

        result = await capture(
            "semantic detector", self._detector.detect, text[: self._detector_max_chars]
        )
        if not result.ok:
            return []

        raw = result.value
        if not isinstance(raw, list):
            logger.warning(
                f"Semantic detector returned {type(raw).__name__}, expected list; ignoring"
            )
            return []

        variables = []
        for item in raw:
            if not isinstance(item, dict):
                logger.debug(f"Skipping non-object detector entry: {item!r}")
                continue
            data = {**item, "source": VariableSource.SEMANTIC_DETECTED}
            try:
                variables.append(Variable.model_validate(data))
            except ValidationError as e:
                logger.debug(f"Skipping malformed detector entry {item!r}: {e.error_count()} error(s)")
        return variables

    @staticmethod
    def _deduplicate(variables: list[Variable]) -> list[Variable]:
        """Keep the first variable per normalized name, preserving order."""
        unique: list[Variable] = []
        seen: set[str] = set()
        for variable in variables:
            key = normalize_name(variable.name)
            if not key or key in seen:
                continue
            seen.add(key)
            unique.append(variable)
        return unique
