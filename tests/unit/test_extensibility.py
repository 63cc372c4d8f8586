"""Tests for user-supplied selection, matching and assertion rules and steps."""

from dataclasses import dataclass

import pytest

from affirm import (
    AssertionFailedError,
    AssertionOptions,
    AssertionRule,
    AssertionScope,
    EquivalencyStep,
    MemberMatchingRule,
    MemberSelectionRule,
    assert_equivalent,
    find_member,
    should,
)


@dataclass
class Order:
    id: int
    customer_id: int
    total: float


@dataclass
class OrderRow:
    id: int
    customer_id: int


@dataclass
class OrderDto:
    id: int
    customer: int


@dataclass
class Measurement:
    value: float
    unit: str


class ExcludeForeignKeys(MemberSelectionRule):
    def select_members(self, selected_members, context, options):
        return [member for member in selected_members if not member.name.endswith("_id")]

    def __str__(self):
        return "Exclude foreign keys"


class ForeignKeyMatchingRule(MemberMatchingRule):
    def match(self, subject_member, expectation, member_path, options):
        if subject_member.name.endswith("_id"):
            return find_member(expectation, subject_member.name[: -len("_id")])
        return None


class CaseInsensitiveStrings(EquivalencyStep):
    def can_handle(self, context, options):
        return isinstance(context.expectation, str)

    def handle(self, context, validator, options):
        AssertionScope.current().for_condition(
            isinstance(context.subject, str) and context.subject.lower() == context.expectation.lower()
        ).fail_with("Expected {context:subject} to be {0} ignoring case, but found {1}.", context.expectation, context.subject)
        return True


class FailingRule(AssertionRule):
    def __init__(self, name):
        self.name = name

    def assert_equality(self, context, options):
        if not isinstance(context.subject, float):
            return False
        AssertionScope.current().fail_with(f"Rule {self.name} failed")
        return True

    def __str__(self):
        return f"Rule {self.name}"


def approximately(context):
    should(abs(context.subject - context.expectation) <= 0.01).be(True)


class TestSelectionRules:
    def test_custom_selection_rule(self):
        assert_equivalent(Order(1, 10, 5.0), Order(1, 99, 5.0), lambda options: options.using(ExcludeForeignKeys()))

    def test_exclude_by_path(self):
        assert_equivalent(Order(1, 10, 5.0), Order(1, 99, 5.0), lambda options: options.excluding("customer_id"))

    def test_exclude_by_predicate(self):
        assert_equivalent(
            Order(1, 10, 5.0),
            Order(1, 99, 5.0),
            lambda options: options.excluding(lambda member: member.path.endswith("_id")),
        )

    def test_exclude_nested_path_ignores_indexers(self):
        assert_equivalent(
            [Order(1, 10, 5.0)],
            [Order(1, 99, 5.0)],
            lambda options: options.excluding("customer_id"),
        )

    def test_include_replaces_standard_rules(self):
        assert_equivalent(Order(1, 10, 5.0), Order(1, 99, 7.0), lambda options: options.including("id"))

    def test_include_by_predicate(self):
        with pytest.raises(AssertionFailedError) as exc_info:
            assert_equivalent(
                Order(1, 10, 5.0),
                Order(2, 99, 7.0),
                lambda options: options.including(lambda member: member.name == "total"),
            )

        assert exc_info.value.failures == ["Expected member total to be 7.0, but found 5.0."]

    def test_rule_names_are_reported(self, matches_wildcard):
        with pytest.raises(AssertionFailedError) as exc_info:
            assert_equivalent(
                Order(1, 10, 5.0),
                Order(2, 10, 5.0),
                lambda options: options.excluding("customer_id").using(ExcludeForeignKeys()),
            )

        assert matches_wildcard(
            "Expected member id to be 2, but found 1.\n\nWith configuration:\n*"
            "- Exclude member root.customer_id\n- Exclude foreign keys\n*",
            str(exc_info.value),
        )


class TestMatchingRules:
    def test_custom_matching_rule(self):
        assert_equivalent(OrderRow(1, 7), OrderDto(1, 7), lambda options: options.using(ForeignKeyMatchingRule()))

    def test_custom_matching_rule_mismatch(self):
        with pytest.raises(AssertionFailedError) as exc_info:
            assert_equivalent(OrderRow(1, 7), OrderDto(1, 8), lambda options: options.using(ForeignKeyMatchingRule()))

        assert exc_info.value.failures == ["Expected member customer_id to be 8, but found 7."]

    def test_without_rule_the_member_is_missing(self):
        with pytest.raises(AssertionFailedError) as exc_info:
            assert_equivalent(OrderRow(1, 7), OrderDto(1, 7))

        assert exc_info.value.failures == ["Subject has member customer_id that the other object does not have."]


class TestAssertionRules:
    def test_rule_for_type(self):
        assert_equivalent(
            Measurement(1.0, "kg"),
            Measurement(1.005, "kg"),
            lambda options: options.using(approximately).when_type_is(float),
        )

    def test_rule_for_predicate(self):
        assert_equivalent(
            Measurement(1.0, "kg"),
            Measurement(1.005, "kg"),
            lambda options: options.using(approximately).when(lambda context: context.selected_member_path == "value"),
        )

    def test_failing_rule_reports_its_own_message(self):
        with pytest.raises(AssertionFailedError) as exc_info:
            assert_equivalent(
                Measurement(1.0, "kg"),
                Measurement(1.5, "kg"),
                lambda options: options.using(approximately).when_type_is(float),
            )

        assert exc_info.value.failures == ["Expected member value to be True, but found False."]

    def test_expectation_of_another_type(self):
        with pytest.raises(AssertionFailedError) as exc_info:
            assert_equivalent(
                Measurement(1.0, "kg"),
                Measurement("1.0", "kg"),
                lambda options: options.using(approximately).when_type_is(float),
            )

        assert exc_info.value.failures == ["Expected member value to be a float, but found a str."]

    def test_most_recent_failing_rule_is_reported(self):
        with pytest.raises(AssertionFailedError) as exc_info:
            assert_equivalent(
                Measurement(1.0, "kg"),
                Measurement(1.0, "kg"),
                lambda options: options.using(FailingRule("A")).using(FailingRule("B")),
            )

        assert exc_info.value.failures == ["Rule B failed"]

    def test_passing_rule_wins_over_failing_rules(self):
        assert_equivalent(
            Measurement(1.0, "kg"),
            Measurement(1.005, "kg"),
            lambda options: options.using(approximately).when_type_is(float).using(FailingRule("B")),
        )
        assert_equivalent(
            Measurement(1.0, "kg"),
            Measurement(1.005, "kg"),
            lambda options: options.using(FailingRule("A")).using(approximately).when_type_is(float),
        )

    def test_rules_never_apply_to_root(self):
        with pytest.raises(AssertionFailedError) as exc_info:
            assert_equivalent(1, 2, lambda options: options.using(lambda context: None).when(lambda context: True))

        assert exc_info.value.failures == ["Expected subject to be 2, but found 1."]


class TestEquivalencySteps:
    def test_user_step_runs_before_built_in_steps(self):
        assert_equivalent({"name": "ANN"}, {"name": "ann"}, lambda options: options.using(CaseInsensitiveStrings()))

    def test_user_step_failure(self):
        with pytest.raises(AssertionFailedError) as exc_info:
            assert_equivalent(["ANN"], ["bob"], lambda options: options.using(CaseInsensitiveStrings()))

        assert exc_info.value.failures == ['Expected item[0] to be "bob" ignoring case, but found "ANN".']


class TestGlobalDefaults:
    def test_defaults_apply_to_every_comparison(self):
        AssertionOptions.assert_equivalency_using(lambda options: options.excluding("customer_id"))

        assert_equivalent(Order(1, 10, 5.0), Order(1, 99, 5.0))

    def test_reset_restores_defaults(self):
        AssertionOptions.assert_equivalency_using(lambda options: options.excluding("customer_id"))
        AssertionOptions.reset()

        with pytest.raises(AssertionFailedError):
            assert_equivalent(Order(1, 10, 5.0), Order(1, 99, 5.0))
