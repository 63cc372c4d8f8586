from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from typing import TYPE_CHECKING


if TYPE_CHECKING:
    from affirm.execution.scope import AssertionScope


SCOPE_CONTEXT: ContextVar[AssertionScope | None] = ContextVar("assertion_scope", default=None)


def get_current_scope() -> AssertionScope | None:
    """Get the innermost active assertion scope, or None outside any scope."""
    return SCOPE_CONTEXT.get()


@contextmanager
def assertion_scope_context(scope: AssertionScope) -> Iterator[None]:
    """Temporarily bind `SCOPE_CONTEXT` to ``scope`` for the duration of the ``with`` block.

    Parameters
    ----------
    scope : AssertionScope
        The scope that becomes current inside the block.
    """
    token = SCOPE_CONTEXT.set(scope)
    try:
        yield
    finally:
        SCOPE_CONTEXT.reset(token)
