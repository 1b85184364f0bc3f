"""Condition and rule models.

Conditions form a tagged union (``simple`` | ``compound``). Operator and
logical-operator names are kept as plain strings so that unknown values
survive parsing and evaluate to ``False`` instead of failing validation.
"""

import enum
import logging
from collections.abc import Mapping
from typing import Annotated, Any, Literal, Union

from pydantic import Field, ValidationError, field_validator

from docsmith.models.base import FrozenWireModel, WireModel

logger = logging.getLogger(__name__)


class Operator(str, enum.Enum):
    """Comparison operators understood by the condition evaluator."""

    EQUALS = "equals"
    NOT_EQUALS = "notEquals"
    CONTAINS = "contains"
    STARTS_WITH = "startsWith"
    ENDS_WITH = "endsWith"
    GREATER_THAN = "greaterThan"
    LESS_THAN = "lessThan"
    IS_EMPTY = "isEmpty"
    IS_NOT_EMPTY = "isNotEmpty"


class LogicalOperator(str, enum.Enum):
    """Combinators for compound conditions."""

    AND = "AND"
    OR = "OR"


class RuleAction(str, enum.Enum):
    """Content-mutating actions a rule can trigger."""

    SHOW = "show"
    HIDE = "hide"
    INSERT_TEXT = "insertText"
    GENERATE_TEXT = "generateText"


class SimpleCondition(FrozenWireModel):
    """Compare one bound variable against a literal value."""

    type: Literal["simple"] = "simple"
    variable: str
    operator: str
    value: str = ""

    @field_validator("value", mode="before")
    @classmethod
    def coerce_value(cls, v: Any) -> str:
        """Condition values travel as strings; numbers are stringified."""
        if v is None:
            return ""
        if isinstance(v, bool):
            return "true" if v else "false"
        return str(v)

    @field_validator("operator", mode="before")
    @classmethod
    def coerce_operator(cls, v: Any) -> str:
        if isinstance(v, Operator):
            return v.value
        return v


class CompoundCondition(FrozenWireModel):
    """Combine sub-conditions with AND / OR.

    An empty ``sub_conditions`` tuple is accepted here and evaluates to
    ``False``. A sub-condition that cannot be parsed is kept as ``None`` in
    its position, so only that branch evaluates to ``False``.
    """

    type: Literal["compound"] = "compound"
    sub_conditions: tuple[Union["SimpleCondition", "CompoundCondition", None], ...] = ()
    logical_operator: str | None = None

    @field_validator("logical_operator", mode="before")
    @classmethod
    def coerce_logical_operator(cls, v: Any) -> Any:
        if isinstance(v, LogicalOperator):
            return v.value
        return v

    @field_validator("sub_conditions", mode="before")
    @classmethod
    def parse_sub_conditions(cls, v: Any) -> Any:
        if isinstance(v, (list, tuple)):
            return [parse_condition(item) for item in v]
        return v


Condition = Annotated[
    Union[SimpleCondition, CompoundCondition],
    Field(discriminator="type"),
]

CompoundCondition.model_rebuild()


def _with_type(raw: Any) -> Any:
    """Infer a missing ``type`` tag on a wire-format condition."""
    if not isinstance(raw, Mapping) or "type" in raw:
        return raw
    data = dict(raw)
    has_subs = "subConditions" in data or "sub_conditions" in data
    data["type"] = "compound" if has_subs else "simple"
    return data


def parse_condition(raw: Any) -> SimpleCondition | CompoundCondition | None:
    """Parse a wire-format condition, returning None when it is unusable.

    A missing ``type`` is inferred: payloads carrying ``subConditions`` are
    compound, everything else is simple.
    """
    if isinstance(raw, (SimpleCondition, CompoundCondition)):
        return raw
    if not isinstance(raw, Mapping):
        return None

    data = _with_type(raw)

    try:
        if data["type"] == "compound":
            return CompoundCondition.model_validate(data)
        if data["type"] == "simple":
            return SimpleCondition.model_validate(data)
    except ValidationError as e:
        logger.warning(f"Unparsable condition ignored: {e.error_count()} error(s)")
        return None

    logger.warning(f"Unknown condition type: {data['type']!r}")
    return None


class Rule(FrozenWireModel):
    """A condition + action pair applied to one document."""

    name: str = ""
    description: str = ""
    condition: SimpleCondition | CompoundCondition | None = None
    action: str
    target_variables: tuple[str, ...] = ()

    @field_validator("condition", mode="wrap")
    @classmethod
    def lenient_condition(cls, v: Any, handler: Any) -> Any:
        """Keep the rule even when its condition cannot be parsed."""
        if v is None:
            return None
        parsed = parse_condition(v)
        if parsed is None:
            return None
        return handler(parsed)

    @field_validator("action", mode="before")
    @classmethod
    def coerce_action(cls, v: Any) -> Any:
        if isinstance(v, RuleAction):
            return v.value
        return v

    @field_validator("target_variables", mode="before")
    @classmethod
    def coerce_targets(cls, v: Any) -> Any:
        if v is None:
            return ()
        if isinstance(v, str):
            return (v,)
        return v


class SkippedRule(WireModel):
    """A rule that produced no effect, with the reason why."""

    rule_name: str
    reason: str


class SkippedTarget(WireModel):
    """A single target of an applied rule that could not be processed."""

    rule_name: str
    action: str
    target: str
    reason: str
