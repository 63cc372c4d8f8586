"""Equivalency of collections, in strict or loose order."""

from __future__ import annotations

import logging
from typing import Any

from affirm.equivalency.steps import EquivalencyStep, scope_for
from affirm.equivalency.typeinfo import collection_item_type, is_collection
from affirm.execution import AssertionScope, Failure


logger = logging.getLogger(__name__)

FAILED_ITEMS_FAST_FAIL_THRESHOLD = 10


class EnumerableEquivalencyStep(EquivalencyStep):
    """Compare two collections item by item.

    With strict ordering item ``i`` of the subject is compared with item ``i``
    of the expectation. Otherwise every expected item is matched against the
    subject items not matched yet, and the closest candidate is reported when
    none of them is equivalent.
    """

    def can_handle(self, context, options):
        return is_collection(context.expectation)

    def handle(self, context, validator, options):
        expectation = list(context.expectation)
        scope = scope_for(context)

        if not is_collection(context.subject):
            scope.fail_with(
                "Expected {context:subject} to be a collection with {0} item(s){reason}, but found {1}.",
                len(expectation),
                context.subject,
            )
            return True

        subject = list(context.subject)
        _assert_same_count(scope, subject, expectation)

        matcher = _CollectionMatcher(context, validator, subject, expectation)
        if options.is_ordering_strict_for(context):
            matcher.match_strictly()
        else:
            matcher.match_loosely()
        return True


class _CollectionMatcher:
    def __init__(self, context, validator, subject: list[Any], expectation: list[Any]):
        self.context = context
        self.validator = validator
        self.subject = subject
        self.expectation = expectation
        self.scope = AssertionScope.current()
        self.unmatched = list(range(len(subject)))

    def _item_context(self, expectation_index: int, subject_item: Any):
        declared_type = collection_item_type(
            self.context.compile_time_type, type(self.context.subject), expectation_index
        )
        return self.context.for_collection_item(
            expectation_index, subject_item, self.expectation[expectation_index], declared_type
        )

    def match_strictly(self) -> None:
        failed = 0
        for index in range(min(len(self.subject), len(self.expectation))):
            before = len(self.scope.failure_records)
            self.validator.assert_equality_using(self._item_context(index, self.subject[index]))
            if len(self.scope.failure_records) > before:
                failed += 1
                if failed >= FAILED_ITEMS_FAST_FAIL_THRESHOLD:
                    logger.debug(
                        "Stopped strict comparison of %s after %d failing items",
                        self.context.selected_member_description,
                        failed,
                    )
                    break

    def match_loosely(self) -> None:
        failed = 0
        for index in range(len(self.expectation)):
            if not self.unmatched:
                break
            if not self._match_one(index):
                failed += 1
                if failed >= FAILED_ITEMS_FAST_FAIL_THRESHOLD:
                    logger.debug(
                        "Stopped loose comparison of %s after %d failing items",
                        self.context.selected_member_description,
                        failed,
                    )
                    break

    def _match_one(self, expectation_index: int) -> bool:
        attempts: list[tuple[int, list[Failure]]] = []
        for position, subject_index in enumerate(self.unmatched):
            failures = self.validator.try_to_match(
                self._item_context(expectation_index, self.subject[subject_index])
            )
            if not failures:
                del self.unmatched[position]
                return True
            attempts.append((subject_index, failures))

        for failure in _closest(attempts, expectation_index):
            self.scope.add_failure(failure)
        return False


def _closest(attempts: list[tuple[int, list[Failure]]], expectation_index: int) -> list[Failure]:
    """Failures of the attempt with the fewest failures, preferring the item at the same index."""
    fewest = min(len(failures) for _, failures in attempts)
    best = [(index, failures) for index, failures in attempts if len(failures) == fewest]
    for index, failures in best:
        if index == expectation_index:
            return failures
    return best[0][1]


def _assert_same_count(scope: AssertionScope, subject: list[Any], expectation: list[Any]) -> None:
    if len(subject) == len(expectation):
        return
    if not subject:
        scope.fail_with(
            "Expected {context:subject} to be a collection with {0} item(s){reason}, but found an empty collection.",
            len(expectation),
        )
    elif len(subject) < len(expectation):
        scope.fail_with(
            "Expected {context:subject} to be a collection with {0} item(s){reason}, "
            "but {1} contains {2} item(s) less than {3}.",
            len(expectation),
            subject,
            len(expectation) - len(subject),
            expectation,
        )
    else:
        scope.fail_with(
            "Expected {context:subject} to be a collection with {0} item(s){reason}, "
            "but {1} contains {2} item(s) more than {3}.",
            len(expectation),
            subject,
            len(subject) - len(expectation),
            expectation,
        )
