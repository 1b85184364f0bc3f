"""Placeholder pattern catalog.

Four placeholder families are recognized out of the box:

- ``{{ client name }}``        double-brace tokens
- ``<variable>name</variable>`` tag-wrapped tokens
- ``[CLIENT_NAME]``            all-caps bracket tokens
- ``__client_name__``          double-underscore tokens

Text extracted from PDFs or DOCX files often breaks a placeholder across
lines, so ``normalize_placeholders`` joins such tokens before matching.
"""

import logging
import re
from dataclasses import dataclass

logger = logging.getLogger(__name__)

_LINE_BREAK = re.compile(r"\s*\n\s*")
_WHITESPACE = re.compile(r"\s+")

_SPLIT_NAME = r"[A-Za-z0-9]+(?:_[A-Za-z0-9]+)*"

# Tokens whose inner text may contain a line break, per family
_SPLIT_TOKEN_PATTERNS = [
    re.compile(r"\{\{([^{}]*)\}\}"),
    re.compile(r"<variable>([^<>]*)</variable>"),
    re.compile(r"\[([A-Z0-9_\s]*[A-Z_][A-Z0-9_\s]*)\]"),
    # Only a name broken between two alphanumeric runs; never spans two tokens
    re.compile(rf"__({_SPLIT_NAME}[ \t]*\n\s*{_SPLIT_NAME})__"),
]


def normalize_placeholders(text: str) -> str:
    """Normalize line endings and join placeholders split across lines.

    Only the inside of placeholder tokens is touched; a line break (with
    its surrounding whitespace) inside a token becomes a single space.

    Args:
        text: Raw extracted document text.

    Returns:
        The normalized text.
    """
    normalized = text.replace("\r\n", "\n").replace("\r", "\n")

    def _join(match: re.Match[str]) -> str:
        token = match.group(0)
        inner = match.group(1)
        if "\n" not in inner:
            return token
        start = match.start(1) - match.start(0)
        end = match.end(1) - match.start(0)
        return token[:start] + _LINE_BREAK.sub(" ", inner) + token[end:]

    for pattern in _SPLIT_TOKEN_PATTERNS:
        normalized = pattern.sub(_join, normalized)

    return normalized


def clean_name(raw_name: str) -> str:
    """Trim a matched name and collapse internal whitespace to underscores."""
    return _WHITESPACE.sub("_", raw_name.strip())


@dataclass(frozen=True)
class VariableCandidate:
    """A raw placeholder found by one matcher.

    Attributes:
        name: Cleaned placeholder name.
        raw_pattern: The full token as it appears in the normalized text.
        matcher: Name of the matcher that produced it.
    """

    name: str
    raw_pattern: str
    matcher: str


@dataclass(frozen=True)
class PatternMatcher:
    """A named regex whose first group captures the placeholder name."""

    name: str
    regex: re.Pattern[str]
    description: str = ""

    @classmethod
    def from_pattern(cls, name: str, pattern: str, description: str = "") -> "PatternMatcher":
        """Compile a matcher from a pattern string.

        Raises:
            ValueError: If the pattern does not compile or has no group.
        """
        try:
            regex = re.compile(pattern)
        except re.error as e:
            raise ValueError(f"Invalid pattern for matcher '{name}': {e}") from e
        if regex.groups < 1:
            raise ValueError(f"Pattern for matcher '{name}' must capture the variable name")
        return cls(name=name, regex=regex, description=description)

    def find(self, text: str) -> list[VariableCandidate]:
        """Return every candidate in text, in order of appearance."""
        candidates = []
        for match in self.regex.finditer(text):
            name = clean_name(match.group(1) or "")
            if not name:
                continue
            candidates.append(
                VariableCandidate(name=name, raw_pattern=match.group(0), matcher=self.name)
            )
        return candidates


DEFAULT_MATCHERS: tuple[PatternMatcher, ...] = (
    PatternMatcher.from_pattern(
        "double_brace",
        r"\{\{\s*([^{}]+?)\s*\}\}",
        "Delimiter-wrapped tokens such as {{client_name}}",
    ),
    PatternMatcher.from_pattern(
        "tag",
        r"<variable>\s*([^<>]+?)\s*</variable>",
        "Tag-wrapped tokens such as <variable>client_name</variable>",
    ),
    PatternMatcher.from_pattern(
        "caps_bracket",
        r"\[\s*([A-Z_][A-Z0-9_]*(?: +[A-Z0-9_]+)*)\s*\]",
        "All-caps bracket tokens such as [CLIENT_NAME]",
    ),
    PatternMatcher.from_pattern(
        "double_underscore",
        r"__([A-Za-z0-9]+(?:_[A-Za-z0-9]+| [A-Za-z0-9]+)*)__",
        "Double-underscore tokens such as __client_name__",
    ),
)


class PatternCatalog:
    """Ordered set of named placeholder matchers.

    Matchers run independently over the full text; results are grouped by
    matcher in catalog order, then by position in the text.
    """

    def __init__(self, matchers: list[PatternMatcher] | tuple[PatternMatcher, ...] | None = None) -> None:
        """Initialize the catalog.

        Args:
            matchers: Matchers to use. Defaults to the four built-in families.

        Raises:
            ValueError: If two matchers share a name.
        """
        self._matchers = tuple(DEFAULT_MATCHERS if matchers is None else matchers)

        names = [m.name for m in self._matchers]
        if len(names) != len(set(names)):
            raise ValueError(f"Duplicate matcher names in catalog: {names}")

        logger.debug(f"PatternCatalog initialized: matchers={names}")

    @property
    def matchers(self) -> tuple[PatternMatcher, ...]:
        return self._matchers

    def with_matcher(self, matcher: PatternMatcher) -> "PatternCatalog":
        """Return a new catalog with matcher appended."""
        return PatternCatalog([*self._matchers, matcher])

    def find_all(self, text: str) -> list[VariableCandidate]:
        """Run every matcher over already-normalized text."""
        candidates: list[VariableCandidate] = []
        for matcher in self._matchers:
            found = matcher.find(text)
            if found:
                logger.debug(f"Matcher {matcher.name} found {len(found)} candidate(s)")
            candidates.extend(found)
        return candidates
