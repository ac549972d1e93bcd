"""
Value formatting for failure messages.
"""

from __future__ import annotations

from collections.abc import Mapping
from enum import Enum
from typing import Any

MAX_LENGTH = 120


def format_value(value: Any, max_length: int = MAX_LENGTH) -> str:
    """
    Format a value for display in a failure message, truncating if too long.

    None is shown as <null>, strings are double-quoted and collections
    are rendered as {a, b, c} so the subject and expectation read alike
    regardless of their concrete collection type.
    """
    formatted = _format(value)

    if len(formatted) > max_length:
        return formatted[: max_length - 3] + "..."

    return formatted


def format_reason(reason: str = "", *reason_args: Any) -> str:
    """
    Build the " because ..." clause of a failure message.

    The word "because" is prepended unless the reason already starts with it.
    Placeholders like {0} are filled with the reason arguments.
    """
    if not reason:
        return ""

    if reason_args:
        try:
            reason = reason.format(*reason_args)
        except (IndexError, KeyError, ValueError):
            # Keep the raw text when the placeholders do not line up
            pass

    reason = reason.strip()
    if not reason.lower().startswith("because"):
        reason = f"because {reason}"
    return f" {reason}"


def _format(value: Any, seen: frozenset[int] = frozenset()) -> str:
    if value is None:
        return "<null>"

    if isinstance(value, str):
        escaped = value.replace("\\", "\\\\").replace('"', '\\"')
        return f'"{escaped}"'

    if isinstance(value, Enum):
        return f"{type(value).__name__}.{value.name}"

    if id(value) in seen:
        return "<cyclic reference>"

    if isinstance(value, Mapping):
        seen = seen | {id(value)}
        items = ", ".join(f"{_format(k, seen)}: {_format(v, seen)}" for k, v in value.items())
        return "{" + items + "}"

    if isinstance(value, (list, tuple, set, frozenset)):
        if len(value) == 0:
            return "{empty}"
        seen = seen | {id(value)}
        return "{" + ", ".join(_format(v, seen) for v in value) + "}"

    return repr(value)
