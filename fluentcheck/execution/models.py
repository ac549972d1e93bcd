"""
Comparison result models.

This module defines data structures for the outcome of an equivalency
comparison, including every mismatch found and where it was found.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from .formatting import format_value


# ─────────────────────────────────────────────────────────────────────────────
# Errors
# ─────────────────────────────────────────────────────────────────────────────

class FluentCheckError(Exception):
    """Base class for errors raised by fluentcheck itself."""


class ConfigurationError(FluentCheckError):
    """
    Raised when a comparison is set up incorrectly.

    Examples are selecting no members at all at the root of a comparison
    or comparing a collection against a missing (None) expectation.
    Unlike a mismatch, this aborts the whole comparison immediately.
    """


class EquivalencyAssertionError(AssertionError):
    """
    Raised when a subject is not equivalent to its expectation.

    Subclasses AssertionError so pytest and unittest report it as a
    regular test failure.
    """

    def __init__(self, result: ComparisonResult):
        self.result = result
        super().__init__(str(result))

    @property
    def mismatches(self) -> list[Mismatch]:
        return self.result.mismatches


# ─────────────────────────────────────────────────────────────────────────────
# Result Types
# ─────────────────────────────────────────────────────────────────────────────

_NOT_SET: Any = object()


@dataclass
class Mismatch:
    """
    A single difference found while comparing two object graphs.

    Attributes:
        path: Dotted path from the root to the node, e.g. "Orders[2].Name"
        message: Fully formatted failure message
        expected: The expectation at that node (if known)
        actual: The subject at that node (if known)
    """
    path: str
    message: str
    expected: Any = _NOT_SET
    actual: Any = _NOT_SET

    def __str__(self) -> str:
        lines = [f"❌ {self.message}"]
        if self.path:
            lines.append(f"   Path:     {self.path}")
        if self.expected is not _NOT_SET:
            lines.append(f"   Expected: {format_value(self.expected)}")
        if self.actual is not _NOT_SET:
            lines.append(f"   Actual:   {format_value(self.actual)}")
        return "\n".join(lines)

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-friendly dict."""
        result: dict[str, Any] = {"path": self.path, "message": self.message}
        if self.expected is not _NOT_SET:
            result["expected"] = format_value(self.expected)
        if self.actual is not _NOT_SET:
            result["actual"] = format_value(self.actual)
        return result


@dataclass
class ComparisonResult:
    """Every mismatch found by one comparison call."""
    mismatches: list[Mismatch] = field(default_factory=list)

    @property
    def is_equivalent(self) -> bool:
        return len(self.mismatches) == 0

    @property
    def paths(self) -> list[str]:
        return [m.path for m in self.mismatches]

    def add_mismatch(
        self,
        path: str,
        message: str,
        expected: Any = _NOT_SET,
        actual: Any = _NOT_SET,
    ) -> None:
        self.mismatches.append(Mismatch(path, message, expected, actual))

    def __str__(self) -> str:
        if self.is_equivalent:
            return "✅ Subject is equivalent to the expectation"
        if len(self.mismatches) == 1:
            return self.mismatches[0].message
        lines = [f"Found {len(self.mismatches)} difference(s):\n"]
        lines.extend(str(m) for m in self.mismatches)
        return "\n".join(lines)
