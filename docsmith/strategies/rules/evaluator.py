"""Condition evaluation.

Evaluation is total: unknown operators, missing variables, unparsable
conditions and empty compound conditions all evaluate to ``False``.
Binding values are strings; numeric parsing happens only for the ordering
operators, at evaluation time.
"""

import logging
from collections.abc import Callable, Iterable, Mapping
from typing import Any

from docsmith.models import Binding, CompoundCondition, SimpleCondition, parse_condition
from docsmith.models.rules import LogicalOperator, Operator

logger = logging.getLogger(__name__)


def _to_float(value: str) -> float | None:
    try:
        return float(value.strip())
    except ValueError:
        return None


def _greater_than(actual: str, expected: str) -> bool:
    left, right = _to_float(actual), _to_float(expected)
    if left is None or right is None:
        return False
    return left > right


def _less_than(actual: str, expected: str) -> bool:
    left, right = _to_float(actual), _to_float(expected)
    if left is None or right is None:
        return False
    return left < right


_OPERATORS: dict[str, Callable[[str, str], bool]] = {
    Operator.EQUALS.value: lambda actual, expected: actual == expected,
    Operator.NOT_EQUALS.value: lambda actual, expected: actual != expected,
    Operator.CONTAINS.value: lambda actual, expected: expected in actual,
    Operator.STARTS_WITH.value: lambda actual, expected: actual.startswith(expected),
    Operator.ENDS_WITH.value: lambda actual, expected: actual.endswith(expected),
    Operator.GREATER_THAN.value: _greater_than,
    Operator.LESS_THAN.value: _less_than,
    Operator.IS_EMPTY.value: lambda actual, _: actual.strip() == "",
    Operator.IS_NOT_EMPTY.value: lambda actual, _: actual.strip() != "",
}


def binding_values(bindings: Mapping[str, Any] | Iterable[Binding] | None) -> dict[str, str]:
    """Flatten bindings to a name -> string value mapping.

    Accepts a mapping or an iterable of Binding objects. For repeated
    names the first binding wins.
    """
    if bindings is None:
        return {}
    if isinstance(bindings, Mapping):
        return {
            str(name): "" if value is None else str(value)
            for name, value in bindings.items()
        }

    values: dict[str, str] = {}
    for binding in bindings:
        if isinstance(binding, Binding) and binding.name not in values:
            values[binding.name] = binding.value
    return values


class ConditionEvaluator:
    """Evaluates condition trees against a binding set."""

    def evaluate(
        self,
        condition: SimpleCondition | CompoundCondition | Mapping[str, Any] | None,
        bindings: Mapping[str, Any] | Iterable[Binding] | None,
    ) -> bool:
        """Evaluate a condition. Never raises.

        Args:
            condition: A parsed condition or its wire-format dictionary.
            bindings: Current variable bindings.

        Returns:
            Whether the condition holds.
        """
        parsed = parse_condition(condition)
        if parsed is None:
            return False
        return self._evaluate(parsed, binding_values(bindings))

    def _evaluate(
        self, condition: SimpleCondition | CompoundCondition | None, values: dict[str, str]
    ) -> bool:
        if condition is None:
            return False
        if isinstance(condition, CompoundCondition):
            return self._evaluate_compound(condition, values)
        return self._evaluate_simple(condition, values)

    def _evaluate_simple(self, condition: SimpleCondition, values: dict[str, str]) -> bool:
        if condition.variable not in values:
            return False

        check = _OPERATORS.get(condition.operator)
        if check is None:
            logger.debug(f"Unknown operator {condition.operator!r} evaluates to False")
            return False

        return check(values[condition.variable], condition.value)

    def _evaluate_compound(self, condition: CompoundCondition, values: dict[str, str]) -> bool:
        if not condition.sub_conditions:
            logger.debug("Compound condition without sub-conditions evaluates to False")
            return False

        results = (self._evaluate(sub, values) for sub in condition.sub_conditions)

        match condition.logical_operator:
            case LogicalOperator.AND.value:
                return all(results)
            case LogicalOperator.OR.value:
                return any(results)
            case _:
                logger.debug(
                    f"Unknown logical operator {condition.logical_operator!r} evaluates to False"
                )
                return False
