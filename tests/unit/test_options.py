"""Tests for affirm.equivalency.options."""

import pytest

from affirm import (
    AssertionFailedError,
    AssertionOptions,
    EquivalencyOptions,
    InvalidOperationError,
    assert_equivalent,
)
from affirm.equivalency import (
    AllPublicFieldsSelectionRule,
    AllPublicPropertiesSelectionRule,
    CyclicReferenceHandling,
    EnumEquivalencyHandling,
    IncludeMemberByPathSelectionRule,
    MustMatchByNameRule,
    OrderingRule,
    Restriction,
    TryMatchByNameRule,
)


class TestDefaults:
    def test_default_settings(self):
        options = EquivalencyOptions()

        assert options.use_runtime_typing is False
        assert options.include_fields is True
        assert options.include_properties is True
        assert options.is_recursive is True
        assert options.cyclic_reference_handling is CyclicReferenceHandling.IGNORE
        assert options.enum_equivalency_handling is EnumEquivalencyHandling.BY_VALUE
        assert [type(rule) for rule in options.matching_rules] == [MustMatchByNameRule]

    def test_description(self):
        assert str(EquivalencyOptions()) == (
            "- Use declared types and members\n"
            "- Compare enums by value\n"
            "- Ignoring cyclic references\n"
            "- Include all non-private fields\n"
            "- Include all non-private properties\n"
            "- Match member by name (or throw)"
        )

    def test_global_defaults_are_applied(self):
        AssertionOptions.assert_equivalency_using(lambda options: options.comparing_enums_by_name())

        assert AssertionOptions.equivalency_defaults().enum_equivalency_handling is EnumEquivalencyHandling.BY_NAME


class TestSelection:
    def test_standard_rules_come_first(self):
        options = EquivalencyOptions().excluding("id")

        assert [type(rule) for rule in options.selection_rules][:2] == [
            AllPublicFieldsSelectionRule,
            AllPublicPropertiesSelectionRule,
        ]
        assert len(options.selection_rules) == 3

    def test_include_rule_overrides_standard_rules(self):
        options = EquivalencyOptions().including("id")

        assert [type(rule) for rule in options.selection_rules] == [IncludeMemberByPathSelectionRule]

    def test_excluding_fields_drops_field_rule(self):
        options = EquivalencyOptions().excluding_fields()

        assert [type(rule) for rule in options.selection_rules] == [AllPublicPropertiesSelectionRule]

    def test_including_all_runtime_properties(self):
        options = EquivalencyOptions().including_all_runtime_properties()

        assert options.use_runtime_typing is True
        assert options.include_fields is False


class TestMatching:
    def test_excluding_missing_members_swaps_rule(self):
        options = EquivalencyOptions().excluding_missing_members()

        assert [type(rule) for rule in options.matching_rules] == [TryMatchByNameRule]

        options.throwing_on_missing_members()

        assert [type(rule) for rule in options.matching_rules] == [MustMatchByNameRule]


class StrictAtRoot(OrderingRule):
    def applies_to(self, context):
        return context.is_root


class TestUsing:
    def test_callable_returns_restriction(self):
        assert isinstance(EquivalencyOptions().using(lambda context: None), Restriction)

    def test_assertion_rules_most_recent_first(self):
        options = EquivalencyOptions()
        options.using(lambda context: None).when_type_is(int)
        options.using(lambda context: None).when_type_is(str)

        assert [rule.target_type for rule in options.assertion_rules] == [str, int]

    def test_unknown_extension_is_rejected(self):
        with pytest.raises(InvalidOperationError):
            EquivalencyOptions().using(42)

    def test_comparing_by_value_is_idempotent(self):
        options = EquivalencyOptions().comparing_by_value(complex).comparing_by_value(complex)

        assert options.value_types == [complex]
        assert "- Compare complex by value" in str(options)


class TestFreezing:
    def test_frozen_options_reject_changes(self):
        options = EquivalencyOptions().freeze()

        with pytest.raises(InvalidOperationError, match="cannot be changed once the comparison has started"):
            options.excluding("id")

    def test_options_are_frozen_during_comparison(self):
        captured = []

        assert_equivalent(1, 1, lambda options: captured.append(options))

        assert captured[0].is_frozen
        with pytest.raises(InvalidOperationError):
            captured[0].with_strict_ordering()


class TestOrderingRules:
    def test_ordering_rule_is_abstract(self):
        with pytest.raises(TypeError):
            OrderingRule()

    def test_custom_ordering_rule(self):
        with pytest.raises(AssertionFailedError):
            assert_equivalent([1, 2], [2, 1], lambda options: options.using(StrictAtRoot()))

        assert_equivalent([[1, 2]], [[2, 1]], lambda options: options.using(StrictAtRoot()))
