"""Assertions that apply to any object."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from affirm.equivalency import AssertionOptions, EquivalencyOptions, EquivalencyValidationContext, EquivalencyValidator
from affirm.execution import AssertionScope
from affirm.primitives.base import AndConstraint, BaseAssertions


class ObjectAssertions(BaseAssertions):
    """Assertions on an arbitrary subject.

    Every method takes an optional ``because`` reason, formatted with
    ``because_args``, that is inserted into the failure message.

    Examples
    --------
    >>> should(order).be_equivalent_to(OrderDto(id=3, lines=[LineDto(sku="A-1")]))
    >>> should(None).be(1, "the {0} was loaded", "order")
    Traceback (most recent call last):
    AssertionFailedError: Expected object to be 1 because the order was loaded, but found <null>.
    """

    def be(self, expected: Any, because: str = "", *because_args: Any) -> AndConstraint:
        """Assert that the subject equals ``expected`` using ``==``."""
        self._execute(because, because_args).for_condition(self.subject == expected).fail_with(
            "Expected {context:object} to be {0}{reason}, but found {1}.", expected, self.subject
        )
        return self._and()

    def not_be(self, unexpected: Any, because: str = "", *because_args: Any) -> AndConstraint:
        self._execute(because, because_args).for_condition(self.subject != unexpected).fail_with(
            "Did not expect {context:object} to be equal to {0}{reason}.", unexpected
        )
        return self._and()

    def be_none(self, because: str = "", *because_args: Any) -> AndConstraint:
        self._execute(because, because_args).for_condition(self.subject is None).fail_with(
            "Expected {context:object} to be <null>{reason}, but found {0}.", self.subject
        )
        return self._and()

    def not_be_none(self, because: str = "", *because_args: Any) -> AndConstraint:
        self._execute(because, because_args).for_condition(self.subject is not None).fail_with(
            "Expected {context:object} not to be <null>{reason}."
        )
        return self._and()

    def be_same_as(self, expected: Any, because: str = "", *because_args: Any) -> AndConstraint:
        """Assert that the subject is the very object ``expected``."""
        self._execute(because, because_args).for_condition(self.subject is expected).fail_with(
            "Expected {context:object} to refer to {0}{reason}, but found {1}.", expected, self.subject
        )
        return self._and()

    def not_be_same_as(self, unexpected: Any, because: str = "", *because_args: Any) -> AndConstraint:
        self._execute(because, because_args).for_condition(self.subject is not unexpected).fail_with(
            "Did not expect reference to object {0}{reason}.", unexpected
        )
        return self._and()

    def be_equivalent_to(
        self,
        expectation: Any,
        configure: Callable[[EquivalencyOptions], Any] | None = None,
        because: str = "",
        *because_args: Any,
    ) -> AndConstraint:
        """Assert that the subject has the same structure and values as ``expectation``.

        Members are compared recursively, by name, as selected by the options.
        Every difference is collected before one `AssertionFailedError` is
        raised.

        Parameters
        ----------
        expectation : Any
            The object graph the subject should match.
        configure : callable or None
            Receives the default `EquivalencyOptions` and may change them.
        because : str
            Reason inserted into the failure messages.
        *because_args : Any
            Arguments formatted into ``because``.

        Returns
        -------
        AndConstraint
            Allows chaining more assertions on the subject.

        Raises
        ------
        AssertionFailedError
            If the subject is not equivalent to the expectation.
        InvalidOperationError
            If the options make the comparison meaningless, for instance when
            no member is left to compare.
        """
        options = AssertionOptions.equivalency_defaults()
        if configure is not None:
            configured = configure(options)
            if isinstance(configured, EquivalencyOptions):
                options = configured
        options.freeze()

        context = EquivalencyValidationContext(
            subject=self.subject,
            expectation=expectation,
            compile_time_type=self.declared_type,
            because=because,
            because_args=because_args,
        )
        with AssertionScope(parent=self._scope) as scope:
            EquivalencyValidator(options, scope).assert_equality(context)
        return self._and()


def assert_equivalent(
    subject: Any,
    expectation: Any,
    configure: Callable[[EquivalencyOptions], Any] | None = None,
    because: str = "",
    *because_args: Any,
    declared_type: Any = None,
) -> None:
    """Function form of ``should(subject).be_equivalent_to(expectation)``.

    Examples
    --------
    >>> assert_equivalent({"a": 1}, {"a": 1})
    >>> assert_equivalent([1, 2], [2, 1], lambda o: o.with_strict_ordering())
    Traceback (most recent call last):
    AssertionFailedError: Expected item[0] to be 2, but found 1.
    ...
    """
    ObjectAssertions(subject, declared_type=declared_type).be_equivalent_to(
        expectation, configure, because, *because_args
    )
