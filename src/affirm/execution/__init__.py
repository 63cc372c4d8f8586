from .message import MessageBuilder, sanitize_reason
from .scope import AssertionScope
from .strategies import (
    AssertionStrategy,
    CollectingAssertionStrategy,
    Failure,
    FailureKind,
    ThrowingAssertionStrategy,
)

__all__ = [
    "AssertionScope",
    "AssertionStrategy",
    "CollectingAssertionStrategy",
    "ThrowingAssertionStrategy",
    "Failure",
    "FailureKind",
    "MessageBuilder",
    "sanitize_reason",
]
