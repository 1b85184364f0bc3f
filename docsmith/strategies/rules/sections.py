"""Marker-delimited optional sections.

A section named ``terms`` is written either bare::

    BEGIN terms ... END terms

or wrapped in HTML comments, which is how sections are authored::

    <!-- BEGIN terms -->...<!-- END terms -->

The bare form absorbs the whitespace between a marker and the enclosed
text; the comment form keeps the enclosed text verbatim. Matching is
non-greedy and non-nested: nested regions are not supported.
"""

import functools
import logging
import re

from docsmith.interfaces.errors import InvalidInputError
from docsmith.models import ConditionalSection, Rule, Template

logger = logging.getLogger(__name__)

_SECTION_NAME = re.compile(r"^[\w.-]+$")
_SECTION_START = re.compile(r"(?:<!--\s*BEGIN\s*|(?<![\w-])BEGIN\s+)([\w.-]+)")


@functools.lru_cache(maxsize=256)
def section_pattern(name: str) -> re.Pattern[str]:
    """Compile the region pattern for one section name."""
    escaped = re.escape(name)
    return re.compile(
        rf"<!--\s*BEGIN\s*{escaped}\s*-->(?P<commented>.*?)<!--\s*END\s*{escaped}\s*-->"
        rf"|(?<![\w-])BEGIN\s+{escaped}(?![\w.-])\s*(?P<bare>.*?)\s*"
        rf"(?<![\w-])END\s+{escaped}(?![\w.-])",
        re.DOTALL,
    )


def reveal_section(content: str, name: str) -> str:
    """Replace each region named name with its enclosed text."""

    def _inner(match: re.Match[str]) -> str:
        commented = match.group("commented")
        return commented if commented is not None else match.group("bare")

    return section_pattern(name).sub(_inner, content)


def remove_section(content: str, name: str) -> str:
    """Remove each region named name, markers and enclosed text included."""
    return section_pattern(name).sub("", content)


def has_section(content: str, name: str) -> bool:
    return section_pattern(name).search(content) is not None


def list_sections(content: str) -> list[str]:
    """Names of complete sections in content, in order of first appearance."""
    names: list[str] = []
    for match in _SECTION_START.finditer(content):
        name = match.group(1)
        if name not in names and has_section(content, name):
            names.append(name)
    return names


def add_conditional_section(
    template: Template,
    name: str,
    content: str,
    rules: list[Rule] | None = None,
) -> Template:
    """Append a commented section to a template and record its rules.

    Args:
        template: The template to extend.
        name: Section name (letters, digits, ``_``, ``.`` and ``-``).
        content: Text enclosed by the markers.
        rules: Rules governing the section.

    Returns:
        A new Template; the input is left untouched.

    Raises:
        InvalidInputError: If name or content is blank, or name contains
            characters that cannot appear in a marker.
    """
    if not name or not name.strip():
        raise InvalidInputError("Section name is required")
    if not content or not content.strip():
        raise InvalidInputError("Section content is required")
    name = name.strip()
    if not _SECTION_NAME.match(name):
        raise InvalidInputError(f"Invalid section name: {name!r}")

    block = f"<!-- BEGIN {name} -->{content}<!-- END {name} -->"
    new_content = f"{template.content}\n\n{block}" if template.content else block

    sections = [s for s in template.conditional_sections if s.name != name]
    sections.append(ConditionalSection(name=name, rules=list(rules or [])))

    logger.info(f"Added conditional section '{name}' with {len(rules or [])} rule(s)")
    return template.model_copy(
        update={"content": new_content, "conditional_sections": sections}
    )
