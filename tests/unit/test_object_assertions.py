"""Tests for affirm.primitives.objects."""

from dataclasses import dataclass

import pytest

from affirm import AndConstraint, AssertionFailedError, ObjectAssertions, should


class Customer:
    def __init__(self, name):
        self.name = name


@dataclass
class CustomerDto:
    name: str


def test_be_returns_constraint_for_chaining():
    constraint = should(3).be(3)

    assert isinstance(constraint, AndConstraint)
    assert isinstance(constraint.and_, ObjectAssertions)
    constraint.and_.not_be(4).and_.not_be_none()


@pytest.mark.parametrize(
    ("assertion", "message"),
    [
        (lambda: should(1).be(2), "Expected object to be 2, but found 1."),
        (lambda: should("a").not_be("a"), 'Did not expect object to be equal to "a".'),
        (lambda: should(5).be_none(), "Expected object to be <null>, but found 5."),
        (lambda: should(None).not_be_none(), "Expected object not to be <null>."),
        (lambda: should([1]).be_same_as([1]), "Expected object to refer to [1], but found [1]."),
        (lambda: should(None).be(1, "the {0} was loaded", "order"),
         "Expected object to be 1 because the order was loaded, but found <null>."),
    ],
)
def test_failure_messages(assertion, message):
    with pytest.raises(AssertionFailedError) as exc_info:
        assertion()

    assert str(exc_info.value) == message


def test_be_same_as_passes_for_identical_object():
    customer = Customer("Ann")

    should(customer).be_same_as(customer).and_.not_be_same_as(Customer("Ann"))


def test_not_be_same_as_fails_for_identical_object():
    customer = Customer("Ann")

    with pytest.raises(AssertionFailedError, match="Did not expect reference to object"):
        should(customer).not_be_same_as(customer)


def test_be_equivalent_to_object_of_another_type():
    should(Customer("Ann")).be_equivalent_to(CustomerDto(name="Ann"))


def test_be_equivalent_to_mapping_requires_mapping_subject():
    with pytest.raises(AssertionFailedError) as exc_info:
        should(Customer("Ann")).be_equivalent_to({"name": "Ann"})

    assert exc_info.value.failures == ["Subject is a dictionary and cannot be compared with a non-dictionary type."]
