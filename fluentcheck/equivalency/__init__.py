"""
Structural Equivalency Engine

This package compares two arbitrary object graphs member by member and
item by item, reporting every difference with the path it was found at.

Pipeline (in order):
    - TryConversionStep: converts the subject to the expectation's type
    - ReferenceEqualityStep: the same object is always equivalent
    - EqualityOverrideStep: per-type equality predicates from the options
    - EnumerableStep: collections, compared by position
    - ComplexTypeStep: objects, compared member by member
    - anything else: plain equality

Usage:
    from fluentcheck.equivalency import EquivalencyOptions, check, compare

    compare(actual_order, expected_order)  # raises on any difference

    options = EquivalencyOptions().excluding("Id").using(str, lambda s, e: s.lower() == e.lower())
    result = check(actual_order, expected_order, options)
    if not result.is_equivalent:
        print(result)
"""

# Public API
from .api import check, compare, should_all_be_equivalent_to, should_be_equivalent_to

# Configuration
from .options import (
    CyclicReferenceHandling,
    EquivalencyConfig,
    EquivalencyOptions,
    MissingMemberHandling,
)

# Member selection
from .selection import (
    MemberDescriptor,
    MemberInfo,
    describe_members,
    is_complex_type,
    register_members,
    unregister_members,
)

# Engine
from .context import DiagnosticContext, EquivalencyValidationContext
from .steps import (
    ComplexTypeStep,
    EnumerableStep,
    EqualityOverrideStep,
    EquivalencyStep,
    ReferenceEqualityStep,
    TryConversionStep,
)
from .validator import DEFAULT_STEPS, EquivalencyValidator

# Conversion
from .conversion import try_convert

__all__ = [
    # Public API
    "check",
    "compare",
    "should_be_equivalent_to",
    "should_all_be_equivalent_to",
    # Configuration
    "CyclicReferenceHandling",
    "EquivalencyConfig",
    "EquivalencyOptions",
    "MissingMemberHandling",
    # Member selection
    "MemberDescriptor",
    "MemberInfo",
    "describe_members",
    "is_complex_type",
    "register_members",
    "unregister_members",
    # Engine
    "DiagnosticContext",
    "EquivalencyValidationContext",
    "EquivalencyStep",
    "TryConversionStep",
    "ReferenceEqualityStep",
    "EqualityOverrideStep",
    "EnumerableStep",
    "ComplexTypeStep",
    "EquivalencyValidator",
    "DEFAULT_STEPS",
    # Conversion
    "try_convert",
]
