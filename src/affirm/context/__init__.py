from .context import (
    SCOPE_CONTEXT,
    assertion_scope_context,
    get_current_scope,
)

__all__ = [
    "SCOPE_CONTEXT",
    "assertion_scope_context",
    "get_current_scope",
]
