"""Unit tests for the ConditionEvaluator and condition models."""

import itertools

import pytest

from docsmith.models import (
    Binding,
    CompoundCondition,
    Operator,
    Rule,
    SimpleCondition,
    parse_condition,
)
from docsmith.strategies.rules import ConditionEvaluator


def simple(variable: str, operator: str, value: str = "") -> dict:
    return {"type": "simple", "variable": variable, "operator": operator, "value": value}


def compound(logical_operator: str | None, *subs: dict) -> dict:
    return {"type": "compound", "logicalOperator": logical_operator, "subConditions": list(subs)}


# =============================================================================
# Simple Condition Tests
# =============================================================================


class TestSimpleConditions:
    """Test suite for single-variable comparisons."""

    @pytest.fixture
    def evaluator(self):
        """Create a condition evaluator."""
        return ConditionEvaluator()

    @pytest.mark.parametrize(
        "operator, actual, expected, result",
        [
            ("equals", "Sales", "Sales", True),
            ("equals", "Sales", "sales", False),
            ("notEquals", "Sales", "Marketing", True),
            ("notEquals", "Sales", "Sales", False),
            ("contains", "Remote - EU", "Remote", True),
            ("contains", "Office", "Remote", False),
            ("startsWith", "Senior Engineer", "Senior", True),
            ("endsWith", "Senior Engineer", "Engineer", True),
            ("endsWith", "Senior Engineer", "Senior", False),
            ("greaterThan", "100000", "75000", True),
            ("greaterThan", "50.5", "50.25", True),
            ("greaterThan", "10", "10", False),
            ("lessThan", "3", "12", True),
            ("lessThan", "abc", "12", False),
            ("greaterThan", "12", "n/a", False),
            ("isEmpty", "   ", "", True),
            ("isEmpty", "x", "", False),
            ("isNotEmpty", " x ", "", True),
            ("isNotEmpty", "", "", False),
        ],
    )
    def test_operator_semantics(self, evaluator, operator, actual, expected, result):
        """Each operator compares the bound value as documented."""
        condition = simple("field", operator, expected)
        assert evaluator.evaluate(condition, {"field": actual}) is result

    @pytest.mark.parametrize("operator", ["equals", "isEmpty", "isNotEmpty", "notEquals"])
    def test_missing_variable_is_false(self, evaluator, operator):
        """An unbound variable never satisfies a condition."""
        assert evaluator.evaluate(simple("absent", operator, ""), {"other": ""}) is False

    def test_unknown_operator_is_false(self, evaluator):
        """Unknown operators evaluate to False instead of raising."""
        assert evaluator.evaluate(simple("field", "matchesRegex", ".*"), {"field": "x"}) is False

    def test_numeric_value_is_compared_as_string(self, evaluator):
        """Numeric condition values are stringified before comparison."""
        condition = {"variable": "years", "operator": "equals", "value": 5}
        assert evaluator.evaluate(condition, {"years": "5"}) is True

    def test_accepts_binding_objects(self, evaluator):
        """Binding objects work as well as a plain mapping."""
        bindings = [Binding(name="role", value="Sales"), Binding(name="role", value="Ignored")]
        assert evaluator.evaluate(simple("role", "equals", "Sales"), bindings) is True

    def test_accepts_model_with_enum_operator(self, evaluator):
        """Models built with enum operators evaluate normally."""
        condition = SimpleCondition(variable="role", operator=Operator.CONTAINS, value="ale")
        assert condition.operator == "contains"
        assert evaluator.evaluate(condition, {"role": "Sales"}) is True

    @pytest.mark.parametrize(
        "condition",
        [
            None,
            "role equals Sales",
            {"type": "regex", "variable": "role"},
            {"variable": "role"},
        ],
    )
    def test_unusable_condition_is_false(self, evaluator, condition):
        """Unparsable conditions evaluate to False."""
        assert evaluator.evaluate(condition, {"role": "Sales"}) is False

    def test_evaluation_does_not_touch_bindings(self, evaluator):
        """Evaluation leaves the bindings unchanged."""
        bindings = {"role": "Sales"}
        evaluator.evaluate(simple("role", "equals", "Sales"), bindings)
        assert bindings == {"role": "Sales"}


# =============================================================================
# Compound Condition Tests
# =============================================================================


class TestCompoundConditions:
    """Test suite for AND / OR combinations."""

    @pytest.fixture
    def evaluator(self):
        """Create a condition evaluator."""
        return ConditionEvaluator()

    @pytest.fixture
    def bindings(self):
        """Create bindings for a remote sales role."""
        return {"role": "Sales", "salary": "90000", "location": "Remote"}

    def test_and_requires_all(self, evaluator, bindings):
        """AND holds only when every branch holds."""
        condition = compound(
            "AND", simple("role", "equals", "Sales"), simple("salary", "greaterThan", "80000")
        )
        assert evaluator.evaluate(condition, bindings) is True

        condition = compound(
            "AND", simple("role", "equals", "Sales"), simple("salary", "greaterThan", "95000")
        )
        assert evaluator.evaluate(condition, bindings) is False

    def test_or_requires_one(self, evaluator, bindings):
        """OR holds when any branch holds."""
        condition = compound(
            "OR", simple("role", "equals", "Legal"), simple("location", "contains", "Remote")
        )
        assert evaluator.evaluate(condition, bindings) is True

    def test_empty_compound_is_false(self, evaluator, bindings):
        """A compound without branches is False."""
        assert evaluator.evaluate(compound("AND"), bindings) is False
        assert evaluator.evaluate(compound("OR"), bindings) is False

    @pytest.mark.parametrize("logical_operator", [None, "XOR", "and"])
    def test_unknown_logical_operator_is_false(self, evaluator, bindings, logical_operator):
        """Missing or unknown combinators evaluate to False."""
        condition = compound(logical_operator, simple("role", "equals", "Sales"))
        assert evaluator.evaluate(condition, bindings) is False

    def test_nested_compound(self, evaluator, bindings):
        """Compound conditions nest."""
        condition = compound(
            "AND",
            simple("role", "equals", "Sales"),
            compound(
                "OR",
                simple("location", "equals", "Office"),
                simple("salary", "lessThan", "100000"),
            ),
        )
        assert evaluator.evaluate(condition, bindings) is True

    def test_untyped_sub_conditions_are_inferred(self, evaluator, bindings):
        """Missing type tags are inferred at every level."""
        condition = {
            "logicalOperator": "OR",
            "subConditions": [
                {"variable": "role", "operator": "equals", "value": "Legal"},
                {
                    "logicalOperator": "AND",
                    "subConditions": [{"variable": "role", "operator": "equals", "value": "Sales"}],
                },
            ],
        }
        parsed = parse_condition(condition)

        assert isinstance(parsed, CompoundCondition)
        assert isinstance(parsed.sub_conditions[1], CompoundCondition)
        assert evaluator.evaluate(condition, bindings) is True

    def test_and_or_match_boolean_algebra(self, evaluator, bindings):
        """AND and OR agree with evaluating each branch alone."""
        conditions = [
            simple("role", "equals", "Sales"),
            simple("role", "equals", "Legal"),
            simple("missing", "isEmpty"),
            simple("salary", "greaterThan", "1000"),
        ]
        for c1, c2 in itertools.product(conditions, repeat=2):
            e1 = evaluator.evaluate(c1, bindings)
            e2 = evaluator.evaluate(c2, bindings)
            assert evaluator.evaluate(compound("AND", c1, c2), bindings) == (e1 and e2)
            assert evaluator.evaluate(compound("OR", c1, c2), bindings) == (e1 or e2)

    # =========================================================================
    # Malformed Sub-condition Tests
    # =========================================================================

    @pytest.fixture
    def malformed(self):
        """A simple condition without a variable."""
        return {"type": "simple", "operator": "equals", "value": "x"}

    def test_malformed_sub_condition_is_false_locally(self, evaluator, bindings, malformed):
        """A bad branch evaluates to False without sinking its siblings."""
        valid = simple("role", "equals", "Sales")

        assert evaluator.evaluate(compound("OR", malformed, valid), bindings) is True
        assert evaluator.evaluate(compound("AND", malformed, valid), bindings) is False

    def test_malformed_sub_condition_keeps_position(self, malformed):
        """Unparsable entries stay in place as None."""
        parsed = parse_condition(compound("OR", malformed, "junk", simple("role", "isEmpty")))

        assert isinstance(parsed, CompoundCondition)
        assert parsed.sub_conditions[0] is None
        assert parsed.sub_conditions[1] is None
        assert isinstance(parsed.sub_conditions[2], SimpleCondition)

    def test_malformed_sub_condition_matches_boolean_algebra(self, evaluator, bindings, malformed):
        """OR and AND stay consistent with evaluating each branch alone."""
        for other in (simple("role", "equals", "Sales"), simple("role", "equals", "Legal")):
            e1 = evaluator.evaluate(malformed, bindings)
            e2 = evaluator.evaluate(other, bindings)
            assert evaluator.evaluate(compound("OR", malformed, other), bindings) == (e1 or e2)
            assert evaluator.evaluate(compound("AND", other, malformed), bindings) == (e1 and e2)


# =============================================================================
# Rule Model Tests
# =============================================================================


class TestRuleModel:
    """Test suite for parsing wire-format rules."""

    def test_parses_camel_case_payload(self):
        """Rules parse from camelCase wire payloads."""
        rule = Rule.model_validate(
            {
                "name": "Remote clause",
                "condition": {"variable": "location", "operator": "contains", "value": "Remote"},
                "action": "show",
                "targetVariables": ["relocation_clause"],
            }
        )

        assert isinstance(rule.condition, SimpleCondition)
        assert rule.target_variables == ("relocation_clause",)
        assert rule.to_wire()["targetVariables"] == ["relocation_clause"]

    def test_single_target_string_becomes_tuple(self):
        """A single target string is wrapped in a tuple."""
        rule = Rule.model_validate({"action": "hide", "targetVariables": "terms"})
        assert rule.target_variables == ("terms",)

    def test_unparsable_condition_keeps_rule(self):
        """The rule survives with no condition."""
        rule = Rule.model_validate({"action": "hide", "condition": {"type": "regex"}})
        assert rule.condition is None

    def test_rule_is_immutable(self):
        """Rules are frozen."""
        rule = Rule(action="hide")
        with pytest.raises(Exception):
            rule.action = "show"
