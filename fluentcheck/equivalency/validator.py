"""
Equivalency validator.

Drives the step pipeline: every node of the comparison tree is offered
to the steps in order until one of them takes full responsibility.
Nodes that no step claims are compared with plain equality.
"""

from __future__ import annotations

import logging
from typing import Sequence

from .context import EquivalencyValidationContext
from .options import CyclicReferenceHandling
from .steps import (
    ComplexTypeStep,
    EnumerableStep,
    EqualityOverrideStep,
    EquivalencyStep,
    ReferenceEqualityStep,
    TryConversionStep,
    is_collection,
)

logger = logging.getLogger(__name__)

# Order matters: conversion must run before any step looks at the pair,
# and collections must be claimed before they can be mistaken for objects.
DEFAULT_STEPS: tuple[EquivalencyStep, ...] = (
    TryConversionStep(),
    ReferenceEqualityStep(),
    EqualityOverrideStep(),
    EnumerableStep(),
    ComplexTypeStep(),
)


class EquivalencyValidator:
    """
    Compares two object graphs using an ordered list of steps.

    The validator keeps no state per node, so one instance can be reused
    for any number of comparisons.

    Example:
        scope = AssertionScope()
        context = EquivalencyValidationContext.for_root(subject, expectation, config, scope)
        EquivalencyValidator().assert_equality(context)
        result = scope.discard()
    """

    def __init__(self, steps: Sequence[EquivalencyStep] | None = None):
        self.steps: tuple[EquivalencyStep, ...] = tuple(steps) if steps is not None else DEFAULT_STEPS

    def assert_equality(self, context: EquivalencyValidationContext) -> None:
        """
        Compare a whole graph, starting at its root context.

        Raises:
            ValueError: If the context is not a root context
            ConfigurationError: If the comparison is set up incorrectly
        """
        if not context.is_root:
            raise ValueError("A comparison must start at a root context")

        logger.debug(
            f"Comparing {type(context.subject).__name__} with "
            f"{type(context.expectation).__name__}"
        )
        self.assert_equality_using(context)

    def assert_equality_using(self, context: EquivalencyValidationContext) -> None:
        """Compare one node, recursing into child nodes through the steps."""
        if (
            context.subject is not context.expectation
            and self._is_container(context)
            and not self._can_descend(context)
        ):
            return

        for step in self.steps:
            if not step.can_handle(context):
                continue

            context = step.prepare(context)
            if step.handle(context, self):
                logger.debug(f"{step!r} handled '{context.path or '<root>'}'")
                return

        self._assert_default_equality(context)

    def _is_container(self, context: EquivalencyValidationContext) -> bool:
        subject = context.subject
        if subject is None:
            return False
        config = context.config
        return is_collection(subject, config.value_types) or config.is_complex(type(subject))

    def _can_descend(self, context: EquivalencyValidationContext) -> bool:
        """Guard against cyclic graphs and runaway nesting."""
        config = context.config

        if id(context.subject) in context.ancestors:
            if config.cyclic_reference_handling == CyclicReferenceHandling.IGNORE:
                logger.debug(f"Ignoring cyclic reference at '{context.path}'")
                return False
            context.verification.fail_with(
                "Expected {context} to be {0}{reason}, but it contains a cyclic reference.",
                context.expectation,
                expected=context.expectation,
            )
            return False

        if context.depth > config.max_recursion_depth:
            context.verification.fail_with(
                "The maximum recursion depth of {0} was reached at {context}{reason}.",
                config.max_recursion_depth,
            )
            return False

        return True

    def _assert_default_equality(self, context: EquivalencyValidationContext) -> None:
        context.verification.for_condition(
            context.config.are_equal(context.subject, context.expectation)
        ).fail_with(
            "Expected {context} to be {0}{reason}, but found {1}.",
            context.expectation,
            context.subject,
            expected=context.expectation,
            actual=context.subject,
        )
