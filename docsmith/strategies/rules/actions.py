"""Rule actions: show, hide, insertText and generateText.

Actions never mutate their inputs; each call returns new content and a
new binding list together with the targets it had to skip.
"""

import logging
import re
from collections.abc import Callable
from dataclasses import dataclass, field

from docsmith.interfaces.collaborator import BaseTextGenerator, capture
from docsmith.models import Binding, RuleAction, SkippedTarget
from docsmith.strategies.rules.sections import remove_section, reveal_section

logger = logging.getLogger(__name__)

# "/<expression>/<flags>" as stored in Binding.original_pattern
_DELIMITED_PATTERN = re.compile(r"^/(?P<expr>.+)/(?P<flags>[a-z]*)$", re.DOTALL)

_FLAG_MAP = {
    "i": re.IGNORECASE,
    "m": re.MULTILINE,
    "s": re.DOTALL,
}


def to_pattern_string(raw_pattern: str) -> str:
    """Encode a literal placeholder as a delimited pattern string."""
    return f"/{re.escape(raw_pattern)}/g"


def substitution_pattern(original_pattern: str) -> re.Pattern[str] | None:
    """Derive the matchable expression from a stored pattern string.

    ``/expr/flags`` strings yield the inner expression; anything else is
    matched literally. Returns None when nothing usable remains.
    """
    if not original_pattern:
        return None

    match = _DELIMITED_PATTERN.match(original_pattern)
    if match is None:
        return re.compile(re.escape(original_pattern))

    flags = 0
    for flag in match.group("flags"):
        flags |= _FLAG_MAP.get(flag, 0)
    try:
        return re.compile(match.group("expr"), flags)
    except re.error as e:
        logger.warning(f"Unusable substitution pattern {original_pattern!r}: {e}")
        return None


def split_target(target: str) -> tuple[str, str] | None:
    """Split a ``"name:payload"`` target on its first colon."""
    if not isinstance(target, str):
        return None
    name, separator, payload = target.partition(":")
    name = name.strip()
    if not separator or not name:
        return None
    return name, payload


@dataclass
class ActionOutcome:
    """Content and bindings after one action, plus skipped targets."""

    content: str
    bindings: list[Binding]
    skipped: list[SkippedTarget] = field(default_factory=list)


class ActionApplier:
    """Applies one rule action to document content and bindings."""

    def __init__(
        self,
        generator: BaseTextGenerator | None = None,
        context_chars: int = 1000,
    ) -> None:
        """Initialize the applier.

        Args:
            generator: Text generation collaborator for generateText.
            context_chars: How much content is passed as generation context.
        """
        self._generator = generator
        self._context_chars = context_chars

    async def apply(
        self,
        action: str,
        content: str,
        bindings: list[Binding],
        targets: tuple[str, ...] | list[str],
        rule_name: str = "",
    ) -> ActionOutcome:
        """Apply an action to every target.

        Unknown actions are no-ops. Malformed or unresolvable targets are
        skipped individually and reported in the outcome.
        """
        outcome = ActionOutcome(content=content, bindings=list(bindings))

        match action:
            case RuleAction.SHOW.value:
                self._apply_sections(outcome, targets, reveal_section, action, rule_name)
            case RuleAction.HIDE.value:
                self._apply_sections(outcome, targets, remove_section, action, rule_name)
            case RuleAction.INSERT_TEXT.value:
                for target in targets:
                    self._insert_text(outcome, target, rule_name)
            case RuleAction.GENERATE_TEXT.value:
                for target in targets:
                    await self._generate_text(outcome, target, rule_name)
            case _:
                logger.debug(f"Unknown action {action!r} ignored")

        return outcome

    def _apply_sections(
        self,
        outcome: ActionOutcome,
        targets: tuple[str, ...] | list[str],
        transform: Callable[[str, str], str],
        action: str,
        rule_name: str,
    ) -> None:
        for target in targets:
            if not isinstance(target, str) or not target.strip():
                self._skip(outcome, rule_name, action, str(target), "empty section name")
                continue
            outcome.content = transform(outcome.content, target.strip())

    def _insert_text(self, outcome: ActionOutcome, target: str, rule_name: str) -> None:
        action = RuleAction.INSERT_TEXT.value
        parsed = split_target(target)
        if parsed is None:
            self._skip(outcome, rule_name, action, target, "expected 'name:text'")
            return

        name, text = parsed
        self._substitute(outcome, name, text, rule_name, action, target)

    async def _generate_text(self, outcome: ActionOutcome, target: str, rule_name: str) -> None:
        action = RuleAction.GENERATE_TEXT.value
        parsed = split_target(target)
        if parsed is None:
            self._skip(outcome, rule_name, action, target, "expected 'name:prompt'")
            return

        name, prompt = parsed
        if self._find(outcome.bindings, name) is None:
            self._skip(outcome, rule_name, action, target, f"no binding named '{name}'")
            return
        if self._generator is None:
            self._skip(outcome, rule_name, action, target, "no text generator configured")
            return

        result = await capture(
            "text generator",
            self._generator.generate,
            prompt,
            outcome.content[: self._context_chars],
        )
        if not result.ok:
            self._skip(outcome, rule_name, action, target, f"generation failed: {result.error.message}")
            return
        if not isinstance(result.value, str):
            self._skip(outcome, rule_name, action, target, "generator returned non-text")
            return

        self._substitute(outcome, name, result.value, rule_name, action, target)

    def _substitute(
        self,
        outcome: ActionOutcome,
        name: str,
        text: str,
        rule_name: str,
        action: str,
        target: str,
    ) -> None:
        index = self._find(outcome.bindings, name)
        if index is None:
            self._skip(outcome, rule_name, action, target, f"no binding named '{name}'")
            return

        binding = outcome.bindings[index]
        pattern = substitution_pattern(binding.original_pattern)
        count = 0
        if pattern is not None:
            outcome.content, count = pattern.subn(lambda _: text, outcome.content)
        outcome.bindings[index] = binding.model_copy(update={"value": text})
        logger.debug(f"{action}: '{name}' set, {count} occurrence(s) replaced")

    @staticmethod
    def _find(bindings: list[Binding], name: str) -> int | None:
        for index, binding in enumerate(bindings):
            if binding.name == name:
                return index
        return None

    @staticmethod
    def _skip(outcome: ActionOutcome, rule_name: str, action: str, target: str, reason: str) -> None:
        logger.warning(f"Rule '{rule_name}' skipped {action} target {target!r}: {reason}")
        outcome.skipped.append(
            SkippedTarget(rule_name=rule_name, action=action, target=str(target), reason=reason)
        )
