"""
Equivalency steps.

Each step knows how to compare one shape of data. The validator offers a
node to every step in order; the first step whose handle() returns True
takes full responsibility for that node.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Iterable, Mapping, Set
from typing import TYPE_CHECKING, Any

from ..execution import ConfigurationError
from .conversion import try_convert
from .selection import is_value_type

if TYPE_CHECKING:
    from .context import EquivalencyValidationContext
    from .validator import EquivalencyValidator

logger = logging.getLogger(__name__)


class EquivalencyStep(ABC):
    """
    Abstract base class for equivalency steps.

    Steps are stateless; a single instance serves every comparison.
    """

    @abstractmethod
    def can_handle(self, context: EquivalencyValidationContext) -> bool:
        """Return True if this step applies to the node."""
        pass

    def prepare(self, context: EquivalencyValidationContext) -> EquivalencyValidationContext:
        """
        Give the step a chance to replace the node before it is handled.

        Later steps see the returned context. The default keeps it as is.
        """
        return context

    @abstractmethod
    def handle(self, context: EquivalencyValidationContext, parent: EquivalencyValidator) -> bool:
        """
        Compare the node, reporting mismatches through context.verification.

        Args:
            context: The node to compare
            parent: The validator, used to compare child nodes

        Returns:
            True if the node is fully handled and no further step should run.

        Raises:
            ConfigurationError: If the comparison is set up incorrectly
        """
        pass

    def __repr__(self) -> str:
        return type(self).__name__


def is_collection(value: Any, value_types: Iterable[type] = ()) -> bool:
    """Iterables other than strings, mappings and value types."""
    return (
        isinstance(value, Iterable)
        and not isinstance(value, Mapping)
        and not is_value_type(type(value), value_types)
    )


class TryConversionStep(EquivalencyStep):
    """
    Converts the subject to the expectation's type when they differ.

    Never handles a node by itself: it only swaps in the converted subject
    so 5 and 5.0 or "42" and 42 compare as equal. Failed conversions leave
    the subject untouched.
    """

    def can_handle(self, context):
        return context.config.type_conversion

    def prepare(self, context):
        subject, expectation = context.subject, context.expectation
        if subject is None or expectation is None or isinstance(subject, type(expectation)):
            return context

        converted, value = try_convert(subject, type(expectation))
        if not converted:
            return context

        logger.debug(
            f"Converted {type(subject).__name__} to {type(expectation).__name__} at '{context.path}'"
        )
        return context.with_subject(value)

    def handle(self, context, parent):
        return False


class ReferenceEqualityStep(EquivalencyStep):
    """The same object is always equivalent to itself."""

    def can_handle(self, context):
        return context.subject is context.expectation

    def handle(self, context, parent):
        return True


class EqualityOverrideStep(EquivalencyStep):
    """Applies a per-type equality predicate from the configuration."""

    def can_handle(self, context):
        return (
            context.subject is not None
            and context.config.find_override(context.expectation) is not None
        )

    def handle(self, context, parent):
        predicate = context.config.find_override(context.expectation)
        context.verification.for_condition(predicate(context.subject, context.expectation)).fail_with(
            "Expected {context} to be {0}{reason}, but found {1}.",
            context.expectation,
            context.subject,
            expected=context.expectation,
            actual=context.subject,
        )
        return True


class EnumerableStep(EquivalencyStep):
    """
    Compares collections item by item, in order.

    Lengths must match. At the root, or when the comparison is recursive,
    every pair of items is compared as its own node; otherwise items are
    compared with plain equality. Sets have no order, so they are compared
    as a whole and a difference is reported once, at the set itself.
    """

    def can_handle(self, context):
        return is_collection(context.subject, context.config.value_types)

    def handle(self, context, parent):
        config = context.config

        if not is_collection(context.expectation, config.value_types):
            if context.expectation is None and context.is_root:
                raise ConfigurationError("Cannot compare a collection with <null>.")
            context.verification.fail_with(
                "Expected {context} to be {0}{reason}, but found a collection {1}, "
                "which cannot be compared with a non-collection type.",
                context.expectation,
                context.subject,
                expected=context.expectation,
                actual=context.subject,
            )
            return True

        if _safe_equal(context.subject, context.expectation):
            return True

        if isinstance(context.subject, Set) or isinstance(context.expectation, Set):
            self._compare_as_sets(context)
            return True

        subject = list(context.subject)
        expectation = list(context.expectation)

        if len(subject) != len(expectation):
            context.verification.fail_with(
                "Expected {context} to be a collection with {0} item(s){reason}, but found {1}.",
                len(expectation),
                len(subject),
                expected=expectation,
                actual=subject,
            )
            return True

        if context.is_root or config.is_recursive:
            self._compare_items(context, subject, expectation, parent)
        else:
            self._compare_by_equality(context, subject, expectation)

        return True

    def _compare_items(self, context, subject: list, expectation: list, parent) -> None:
        for index, (subject_item, expected_item) in enumerate(zip(subject, expectation)):
            parent.assert_equality_using(
                context.create_for_collection_item(index, subject_item, expected_item)
            )

    def _compare_as_sets(self, context) -> None:
        try:
            equal = set(context.subject) == set(context.expectation)
        except TypeError:
            # Unhashable items cannot be matched without an order
            equal = False

        context.verification.for_condition(equal).fail_with(
            "Expected {context} to be a set equal to {0}{reason}, but found {1}.",
            context.expectation,
            context.subject,
            expected=context.expectation,
            actual=context.subject,
        )

    def _compare_by_equality(self, context, subject: list, expectation: list) -> None:
        for index, (subject_item, expected_item) in enumerate(zip(subject, expectation)):
            if not context.config.are_equal(subject_item, expected_item):
                context.verification.fail_with(
                    "Expected {context} to be equal to {0}{reason}, but {1} differs at index {2}.",
                    expectation,
                    subject,
                    index,
                    expected=expectation,
                    actual=subject,
                )
                return


def _safe_equal(subject: Any, expectation: Any) -> bool:
    try:
        return bool(subject == expectation)
    except (TypeError, ValueError):
        # Items with ambiguous equality (e.g. arrays) are compared one by one instead
        return False


class ComplexTypeStep(EquivalencyStep):
    """
    Compares objects member by member.

    Applies at the root and, when the comparison is recursive, at every
    nested object. Every selected member is compared, so a single call
    reports all differing members instead of only the first.
    """

    def can_handle(self, context):
        return (
            context.subject is not None
            and context.config.is_complex(type(context.subject))
            and (context.is_root or context.config.is_recursive)
        )

    def handle(self, context, parent):
        config = context.config
        expectation = context.expectation

        if (
            expectation is None
            or is_value_type(type(expectation), config.value_types)
            or is_collection(expectation, config.value_types)
        ):
            context.verification.fail_with(
                "Expected {context} to be {0}{reason}, but found {1}.",
                expectation,
                context.subject,
                expected=expectation,
                actual=context.subject,
            )
            return True

        members = config.select_members(
            context.subject, context.compile_time_type, context.path, expectation=expectation
        )
        if context.is_root and not members and not _both_empty_mappings(context.subject, expectation):
            raise ConfigurationError("Please specify some members to include in the comparison.")

        for member, info in members:
            nested = context.create_for_nested_property(member, info)
            if nested is not None:
                parent.assert_equality_using(nested)

        return True


def _both_empty_mappings(subject: Any, expectation: Any) -> bool:
    return (
        isinstance(subject, Mapping)
        and isinstance(expectation, Mapping)
        and not subject
        and not expectation
    )
