"""Render failure templates into the text of a failure line."""

from __future__ import annotations

import re
from collections.abc import Mapping, Sequence
from typing import Any

from affirm.formatting import format_value


_PLACEHOLDER = re.compile(
    r"\{\{|\}\}|\{(?:(?P<index>\d+)|(?P<reason>reason)|context(?::(?P<default>[^}]*))?|(?P<key>\w+))\}"
)


def sanitize_reason(because: str, because_args: Sequence[Any] = ()) -> str:
    """Turn a user-supplied reason into the `` because ...`` clause of a message.

    Parameters
    ----------
    because : str
        Reason template. ``{0}``-style placeholders are filled from ``because_args``.
    because_args : Sequence[Any]
        Arguments for the reason template.

    Returns
    -------
    str
        The clause including its leading space, or an empty string when
        there is no reason.
    """
    reason = format_reason(because, because_args)
    if not reason:
        return ""
    if not reason.startswith("because"):
        reason = "because " + reason
    return " " + reason


def format_reason(because: str | None, because_args: Sequence[Any] = ()) -> str:
    because = (because or "").strip()
    if not because_args:
        return because
    try:
        return because.format(*because_args)
    except (IndexError, KeyError, ValueError):
        return f"because message '{because}' could not be formatted with str.format"


class MessageBuilder:
    """Fill the placeholders of a failure template.

    Supported placeholders are ``{0}``, ``{1}``... for formatted arguments,
    ``{reason}`` for the reason clause, ``{context}`` or ``{context:default}``
    for the description of what is being asserted on, and ``{key}`` for named
    context data. ``{{`` and ``}}`` produce literal braces.
    """

    def __init__(self, use_line_breaks: bool = False):
        self.use_line_breaks = use_line_breaks

    def build(
        self,
        template: str,
        args: Sequence[Any],
        reason: str,
        context_data: Mapping[str, Any],
        identifier: str | None = None,
        capitalize: bool = True,
    ) -> str:
        formatted_args = [format_value(arg, self.use_line_breaks) for arg in args]

        def replace(match: re.Match[str]) -> str:
            text = match.group(0)
            if text == "{{":
                return "{"
            if text == "}}":
                return "}"

            index = match.group("index")
            if index is not None:
                position = int(index)
                return formatted_args[position] if position < len(formatted_args) else text

            if match.group("reason"):
                return reason

            key = match.group("key")
            if key is not None:
                if key in context_data:
                    return str(_resolve(context_data[key]))
                return text

            return _describe_context(identifier, match.group("default"))

        message = _PLACEHOLDER.sub(replace, template)
        return _capitalize(message) if capitalize else message


def _describe_context(identifier: str | None, default: str | None) -> str:
    if not identifier:
        return default or "object"
    if default and default[0].isupper():
        return _capitalize(identifier)
    return identifier


def _resolve(value: Any) -> Any:
    return value() if callable(value) else value


def _capitalize(text: str) -> str:
    return text[:1].upper() + text[1:]
