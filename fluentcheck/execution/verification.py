"""
Verification sink for comparison failures.

The equivalency engine never raises mismatches itself. It hands every
failed condition to a Verification, which formats the message and passes
it on to the active AssertionScope. The scope decides what happens next:
it collects everything and raises a single error when it closes.
"""

from __future__ import annotations

import logging
from typing import Any

from .formatting import format_reason, format_value
from .models import _NOT_SET, ComparisonResult, EquivalencyAssertionError, Mismatch

logger = logging.getLogger(__name__)


class AssertionScope:
    """
    Collects failures so a single comparison reports every difference.

    Example:
        with AssertionScope() as scope:
            Verification(scope).for_condition(a == b).fail_with("a differs from b")
            Verification(scope).for_condition(c == d).fail_with("c differs from d")
        # raises EquivalencyAssertionError listing both failures
    """

    def __init__(self) -> None:
        self.result = ComparisonResult()

    @property
    def has_failures(self) -> bool:
        return not self.result.is_equivalent

    def fail(self, mismatch: Mismatch) -> None:
        """Record a failure."""
        logger.debug(f"Mismatch at '{mismatch.path}': {mismatch.message}")
        self.result.mismatches.append(mismatch)

    def discard(self) -> ComparisonResult:
        """Return the collected failures and start over with an empty result."""
        result, self.result = self.result, ComparisonResult()
        return result

    def __enter__(self) -> AssertionScope:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        # Let usage errors and other exceptions propagate untouched
        if exc_type is None and self.has_failures:
            raise EquivalencyAssertionError(self.discard())


class Verification:
    """
    Fluent helper that turns a condition into a formatted failure.

    Templates use {0}, {1}, ... for the formatted arguments, {reason} for
    the "because ..." clause and {context} for the description of the node
    being verified.

    Example:
        Verification(scope, context="member Name", path="Name") \\
            .because_of("names are unique") \\
            .for_condition(actual == expected) \\
            .fail_with("Expected {context} to be {0}{reason}, but found {1}.", expected, actual)
    """

    def __init__(
        self,
        scope: AssertionScope | None = None,
        context: str = "subject",
        path: str = "",
    ):
        self.scope = scope
        self.context = context
        self.path = path
        self.reason = ""
        self.succeeded = False

    def because_of(self, reason: str = "", *reason_args: Any) -> Verification:
        self.reason = format_reason(reason, *reason_args)
        return self

    def for_condition(self, condition: bool) -> Verification:
        self.succeeded = bool(condition)
        return self

    def fail_with(
        self,
        template: str,
        *args: Any,
        expected: Any = _NOT_SET,
        actual: Any = _NOT_SET,
    ) -> bool:
        """
        Report a failure unless the last condition succeeded.

        Returns:
            True if the condition held, False if a failure was reported.
            Without a scope the failure is raised immediately.
        """
        if self.succeeded:
            return True

        message = template.format(
            *(format_value(arg) for arg in args),
            reason=self.reason,
            context=self.context,
        )
        mismatch = Mismatch(self.path, message, expected, actual)

        if self.scope is None:
            raise EquivalencyAssertionError(ComparisonResult([mismatch]))

        self.scope.fail(mismatch)
        return False
