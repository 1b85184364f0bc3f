"""Rule engine.

Applies an ordered rule list to one document. Rules run strictly in list
order and each condition sees the bindings produced by the rules before it.
"""

import logging
from collections.abc import Iterable, Mapping
from datetime import datetime
from typing import Any

from pydantic import ValidationError

from docsmith.interfaces.errors import InvalidInputError
from docsmith.models import (
    Binding,
    CustomizationEntry,
    Document,
    Rule,
    RuleAction,
    RuleApplicationResult,
    SkippedRule,
)
from docsmith.strategies.rules.actions import ActionApplier
from docsmith.strategies.rules.adaptation import rules_from_adaptations
from docsmith.strategies.rules.evaluator import ConditionEvaluator

logger = logging.getLogger(__name__)

_KNOWN_ACTIONS = {action.value for action in RuleAction}


class RuleEngine:
    """Orchestrates condition evaluation and action application.

    Example:
        ```python
        engine = RuleEngine()
        result = await engine.apply_rules(
            "A BEGIN x hidden-part END x B",
            [],
            [{"condition": {...}, "action": "hide", "targetVariables": ["x"]}],
        )
        ```
    """

    def __init__(
        self,
        evaluator: ConditionEvaluator | None = None,
        applier: ActionApplier | None = None,
    ) -> None:
        self._evaluator = evaluator or ConditionEvaluator()
        self._applier = applier or ActionApplier()

    async def apply_rules(
        self,
        content: str,
        bindings: Iterable[Binding],
        rules: Iterable[Rule | Mapping[str, Any]],
    ) -> RuleApplicationResult:
        """Apply rules to content and bindings.

        Args:
            content: Current document content.
            bindings: Current variable bindings.
            rules: Ordered rules, as Rule objects or wire dictionaries.

        Returns:
            New content and bindings, one history entry per applied rule,
            and every skipped rule and target.

        Raises:
            InvalidInputError: If content, bindings or rules is None.
        """
        if content is None:
            raise InvalidInputError("Document content is required")
        if bindings is None:
            raise InvalidInputError("Bindings are required")
        if rules is None:
            raise InvalidInputError("Rule list is required")

        result = RuleApplicationResult(content=content, bindings=list(bindings))

        for position, raw_rule in enumerate(rules):
            rule = self._parse_rule(raw_rule, position, result)
            if rule is None:
                continue
            rule_name = rule.name or f"rule_{position}"

            if not self._evaluator.evaluate(rule.condition, result.bindings):
                logger.debug(f"Rule '{rule_name}' condition not met")
                result.skipped_rules.append(
                    SkippedRule(rule_name=rule_name, reason="condition not met")
                )
                continue

            if rule.action not in _KNOWN_ACTIONS:
                logger.warning(f"Rule '{rule_name}' has unknown action {rule.action!r}")
                result.skipped_rules.append(
                    SkippedRule(rule_name=rule_name, reason=f"unknown action {rule.action!r}")
                )
                continue

            outcome = await self._applier.apply(
                rule.action,
                result.content,
                result.bindings,
                rule.target_variables,
                rule_name=rule_name,
            )
            result.content = outcome.content
            result.bindings = outcome.bindings
            result.skipped_targets.extend(outcome.skipped)
            result.applied.append(
                CustomizationEntry(
                    action=rule.action,
                    description=rule.description or f"Applied rule '{rule_name}'",
                    rule_name=rule_name,
                    details={"targetVariables": list(rule.target_variables)},
                )
            )

        logger.info(
            f"Rules processed: {len(result.applied)} applied, "
            f"{len(result.skipped_rules)} skipped, "
            f"{len(result.skipped_targets)} target(s) skipped"
        )
        return result

    async def apply_to_document(
        self,
        document: Document,
        rules: Iterable[Rule | Mapping[str, Any]],
        timestamp: datetime | None = None,
    ) -> tuple[Document, RuleApplicationResult]:
        """Apply rules to a document and extend its history.

        Args:
            document: The document instance.
            rules: Ordered rules.
            timestamp: Stamped on the new history entries when given.

        Returns:
            The updated document (history appended, never rewritten) and
            the detailed application result.

        Raises:
            InvalidInputError: If document or rules is None.
        """
        if document is None:
            raise InvalidInputError("Document is required")

        result = await self.apply_rules(document.content, document.bindings, rules)
        entries = [entry.model_copy(update={"timestamp": timestamp}) for entry in result.applied]

        updated = document.model_copy(
            update={"content": result.content, "bindings": tuple(result.bindings)}
        ).with_history(*entries)
        return updated, result

    async def adapt_document(
        self,
        document: Document,
        adaptations: Iterable[Mapping[str, Any]],
        timestamp: datetime | None = None,
    ) -> tuple[Document, RuleApplicationResult]:
        """Apply context-adaptation payloads to a document.

        Adaptations are converted to rules and applied; a single
        ``context_adaptation`` entry summarizing the request is appended
        after the per-rule entries.

        Raises:
            InvalidInputError: If document or adaptations is None.
        """
        if adaptations is None:
            raise InvalidInputError("Adaptations are required")

        adaptations = list(adaptations)
        rules = rules_from_adaptations(adaptations)
        updated, result = await self.apply_to_document(document, rules, timestamp=timestamp)

        summary = CustomizationEntry(
            action="context_adaptation",
            description="Document adapted based on context analysis",
            details={"adaptations": [rule.to_wire() for rule in rules]},
            timestamp=timestamp,
        )
        return updated.with_history(summary), result

    @staticmethod
    def _parse_rule(
        raw_rule: Rule | Mapping[str, Any], position: int, result: RuleApplicationResult
    ) -> Rule | None:
        if isinstance(raw_rule, Rule):
            return raw_rule

        name = f"rule_{position}"
        if isinstance(raw_rule, Mapping):
            name = str(raw_rule.get("name") or name)
            try:
                return Rule.model_validate(raw_rule)
            except ValidationError as e:
                reason = f"malformed rule: {e.error_count()} error(s)"
        else:
            reason = f"malformed rule: {type(raw_rule).__name__}"

        logger.warning(f"Rule '{name}' skipped, {reason}")
        result.skipped_rules.append(SkippedRule(rule_name=name, reason=reason))
        return None
