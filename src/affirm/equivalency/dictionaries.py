"""Equivalency of mappings, key by key."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from affirm.equivalency.steps import EquivalencyStep, scope_for
from affirm.equivalency.typeinfo import common_base, mapping_parameterizations, mapping_value_type, origin_class
from affirm.execution import FailureKind
from affirm.formatting import type_name


class GenericDictionaryEquivalencyStep(EquivalencyStep):
    """Compare two mappings.

    Keys are compared only when the key type of the expectation is the key
    type of the subject or one of its bases. A subject without a key
    parameter qualifies when it is empty or holds at least one key of the
    expected type. Every expected key is looked up in the subject and its
    value compared recursively, then subject keys the expectation lacks are
    reported.
    """

    def can_handle(self, context, options):
        return isinstance(context.expectation, Mapping)

    def handle(self, context, validator, options):
        subject = context.subject
        expectation = context.expectation
        scope = scope_for(context)

        parameterizations = mapping_parameterizations(type(expectation))
        if len(parameterizations) > 1:
            implemented = ", ".join(f"Mapping[{type_name(key)}, {type_name(value)}]" for key, value in parameterizations)
            scope.fail_with(
                "{context:Subject} implements multiple dictionary types.  It is not known which type should be "
                "use for equivalence.\nThe following dictionary types are implemented: " + _escape(implemented),
                kind=FailureKind.CONFIGURATION,
            )
            return True

        if not isinstance(subject, Mapping):
            scope.fail_with("{context:Subject} is a dictionary and cannot be compared with a non-dictionary type.")
            return True

        expected_key_type = _key_type(expectation, None)
        subject_key_type = _incompatible_key_type(subject, context.compile_time_type, expected_key_type)
        if subject_key_type is not None:
            scope.fail_with(
                "The {context:subject} dictionary has keys of type {0}; however, the expected dictionary is not "
                "keyed with any compatible types.\nThe expectation implements: "
                + _escape(_describe(expectation, expected_key_type)),
                subject_key_type,
                kind=FailureKind.CONFIGURATION,
            )
            return True

        if len(subject) != len(expectation):
            scope.fail_with(
                "Expected {context:subject} to be a dictionary with {0} item(s){reason}, but found {1} item(s).",
                len(expectation),
                len(subject),
            )

        value_type = mapping_value_type(context.compile_time_type, type(subject))
        for key, expected_value in expectation.items():
            if key in subject:
                validator.assert_equality_using(
                    context.for_dictionary_item(key, subject[key], expected_value, value_type)
                )
            else:
                scope_for(context).fail_with("Expected {context:subject} to contain key {0}{reason}.", key)

        for key in subject:
            if key not in expectation:
                scope_for(context).fail_with("{context:Subject} contains unexpected key {0}{reason}.", key)

        return True


def _key_type(mapping: Mapping[Any, Any], declared_type: Any) -> type:
    """Parameterized key type of a mapping, else the common base of its keys."""
    parameterized = _parameterized_key_type(mapping, declared_type)
    if parameterized is not None:
        return parameterized
    return common_base(type(key) for key in mapping)


def _parameterized_key_type(mapping: Mapping[Any, Any], declared_type: Any) -> type | None:
    for candidate in (declared_type, type(mapping)):
        parameterizations = mapping_parameterizations(candidate)
        if len(parameterizations) == 1:
            return origin_class(parameterizations[0][0]) or object
    return None


def _incompatible_key_type(subject: Mapping[Any, Any], declared_type: Any, expected_key_type: type) -> type | None:
    """Key type of the subject when none of its keys can match the expectation's, else None.

    A parameterized subject is judged by its key parameter. An unparameterized
    one is judged by its actual keys, so an empty subject or one with at least
    one compatible key is always compared key by key.
    """
    parameterized = _parameterized_key_type(subject, declared_type)
    if parameterized is not None:
        return None if issubclass(parameterized, expected_key_type) else parameterized
    if subject and not any(isinstance(key, expected_key_type) for key in subject):
        return common_base(type(key) for key in subject)
    return None


def _describe(mapping: Mapping[Any, Any], key_type: type) -> str:
    parameterizations = mapping_parameterizations(type(mapping))
    if parameterizations:
        value_type = parameterizations[0][1]
    else:
        value_type = common_base(type(value) for value in mapping.values())
    return f"{type_name(type(mapping))}[{type_name(key_type)}, {type_name(value_type)}]"


def _escape(text: str) -> str:
    return text.replace("{", "{{").replace("}", "}}")
