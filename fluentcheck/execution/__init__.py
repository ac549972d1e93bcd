"""
Execution layer: how comparison failures are reported.

This package provides the sink the equivalency engine reports through,
plus the models and errors a caller sees.

Usage:
    from fluentcheck.execution import AssertionScope, Verification

    with AssertionScope() as scope:
        Verification(scope).for_condition(1 == 2).fail_with(
            "Expected {context} to be {0}{reason}, but found {1}.", 2, 1
        )
"""

# Models and errors
from .models import (
    ComparisonResult,
    ConfigurationError,
    EquivalencyAssertionError,
    FluentCheckError,
    Mismatch,
)

# Sink
from .verification import AssertionScope, Verification

# Formatting
from .formatting import format_reason, format_value

__all__ = [
    # Models and errors
    "ComparisonResult",
    "ConfigurationError",
    "EquivalencyAssertionError",
    "FluentCheckError",
    "Mismatch",
    # Sink
    "AssertionScope",
    "Verification",
    # Formatting
    "format_reason",
    "format_value",
]
