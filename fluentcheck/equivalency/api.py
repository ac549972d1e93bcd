"""
Public entry points for structural comparison.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any, Callable, Union

from ..execution import AssertionScope, ComparisonResult, ConfigurationError, EquivalencyAssertionError
from .context import EquivalencyValidationContext
from .options import EquivalencyConfig, EquivalencyOptions
from .validator import EquivalencyValidator

ConfigLike = Union[EquivalencyConfig, EquivalencyOptions, None]
OptionsCallback = Callable[[EquivalencyOptions], EquivalencyOptions]

_validator = EquivalencyValidator()


def _resolve_config(config: ConfigLike) -> EquivalencyConfig:
    if config is None:
        return EquivalencyOptions.default().build()
    if isinstance(config, EquivalencyOptions):
        return config.build()
    return config


def check(
    subject: Any,
    expectation: Any,
    config: ConfigLike = None,
    reason: str = "",
    *reason_args: Any,
    compile_time_type: type | None = None,
) -> ComparisonResult:
    """
    Compare two object graphs and return every difference found.

    Args:
        subject: The actual value
        expectation: The value the subject should be equivalent to
        config: An EquivalencyConfig, or an EquivalencyOptions builder
        reason: Optional explanation included in every failure message
        reason_args: Values for {0}-style placeholders in the reason
        compile_time_type: Type whose members are compared at the root
            (defaults to the subject's runtime type)

    Returns:
        ComparisonResult; is_equivalent is True when nothing differs

    Raises:
        ConfigurationError: If the comparison is set up incorrectly
    """
    scope = AssertionScope()
    context = EquivalencyValidationContext.for_root(
        subject,
        expectation,
        _resolve_config(config),
        scope,
        compile_time_type=compile_time_type,
        reason=reason,
        reason_args=reason_args,
    )
    _validator.assert_equality(context)
    return scope.discard()


def compare(
    subject: Any,
    expectation: Any,
    config: ConfigLike = None,
    reason: str = "",
    *reason_args: Any,
    compile_time_type: type | None = None,
) -> None:
    """
    Assert that two object graphs are equivalent.

    Raises:
        EquivalencyAssertionError: Listing every difference found
        ConfigurationError: If the comparison is set up incorrectly

    Example:
        compare(order, expected_order, EquivalencyOptions().excluding("Id"))
    """
    result = check(
        subject,
        expectation,
        config,
        reason,
        *reason_args,
        compile_time_type=compile_time_type,
    )
    if not result.is_equivalent:
        raise EquivalencyAssertionError(result)


def should_be_equivalent_to(
    subject: Any,
    expectation: Any,
    options: OptionsCallback | None = None,
    reason: str = "",
    *reason_args: Any,
) -> None:
    """
    Assert that an object is equivalent to another object.

    Objects are equivalent when both graphs have equally named members with
    the same value, irrespective of the types of those objects. Values that
    can be converted to the expected type are compared after conversion.

    Args:
        options: Receives the default options and returns the ones to use,
            e.g. lambda o: o.excluding("Id")
    """
    builder = EquivalencyOptions.default()
    if options is not None:
        builder = options(builder)
    compare(subject, expectation, builder, reason, *reason_args)


def should_all_be_equivalent_to(
    subjects: Iterable[Any],
    expectations: Iterable[Any],
    options: OptionsCallback | None = None,
    reason: str = "",
    *reason_args: Any,
) -> None:
    """
    Assert that every item of a collection is equivalent to the item at the
    same position in another collection.

    Raises:
        ConfigurationError: If either argument is not a collection
    """
    for name, value in (("subjects", subjects), ("expectations", expectations)):
        if value is None:
            raise ConfigurationError(f"Cannot compare a collection with <null> ({name}).")
        if isinstance(value, (str, bytes, Mapping)) or not isinstance(value, Iterable):
            raise ConfigurationError(
                f"Expected {name} to be a collection, but found {type(value).__name__}."
            )

    should_be_equivalent_to(list(subjects), list(expectations), options, reason, *reason_args)
