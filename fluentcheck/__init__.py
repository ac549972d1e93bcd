"""
FluentCheck - Structural Equivalency Checker

This package compares two object graphs member by member and reports
every difference together with the path it was found at.

Subpackages:
    - equivalency: The comparison engine, its options and public API
    - execution: Failure collection, messages and errors
    - suites: Parse and validate comparison suite YAML files
    - reporting: Run reports and result tracking

Usage:
    from fluentcheck import EquivalencyOptions, compare, should_be_equivalent_to

    compare(actual_order, expected_order)

    should_be_equivalent_to(
        actual_order,
        expected_order,
        lambda options: options.excluding("id"),
        "orders must round-trip",
    )
"""

__version__ = "0.1.0"

# Re-export the comparison API for convenience
from .equivalency import (
    # Public API
    check,
    compare,
    should_be_equivalent_to,
    should_all_be_equivalent_to,
    # Configuration
    CyclicReferenceHandling,
    EquivalencyConfig,
    EquivalencyOptions,
    MissingMemberHandling,
    # Member selection
    register_members,
    unregister_members,
)

# Re-export execution for convenience
from .execution import (
    ComparisonResult,
    ConfigurationError,
    EquivalencyAssertionError,
    FluentCheckError,
    Mismatch,
)

# Re-export suites for convenience
from .suites import (
    load_suite,
    validate_suite_yaml,
    Suite,
    ComparisonCase,
    CaseOptions,
    ValidationResult,
)

# Re-export reporting for convenience
from .reporting import (
    Reporter,
    RunReport,
    RunStatus,
    CaseRecord,
    CaseStatus,
    compute_suite_hash,
)

__all__ = [
    # Package info
    "__version__",
    # Equivalency - Public API
    "check",
    "compare",
    "should_be_equivalent_to",
    "should_all_be_equivalent_to",
    # Equivalency - Configuration
    "CyclicReferenceHandling",
    "EquivalencyConfig",
    "EquivalencyOptions",
    "MissingMemberHandling",
    # Equivalency - Member selection
    "register_members",
    "unregister_members",
    # Execution
    "ComparisonResult",
    "ConfigurationError",
    "EquivalencyAssertionError",
    "FluentCheckError",
    "Mismatch",
    # Suites
    "load_suite",
    "validate_suite_yaml",
    "Suite",
    "ComparisonCase",
    "CaseOptions",
    "ValidationResult",
    # Reporting
    "Reporter",
    "RunReport",
    "RunStatus",
    "CaseRecord",
    "CaseStatus",
    "compute_suite_hash",
]
