"""
Per-node comparison context.

One EquivalencyValidationContext exists for every node of the comparison
tree. It is immutable: deriving a child (or a converted subject) always
produces a new context, while the configuration, the diagnostics and the
reporting scope are shared by reference across the whole tree.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from typing import Any

from ..execution import AssertionScope, Verification
from .options import EquivalencyConfig, MissingMemberHandling
from .selection import MISSING, MemberDescriptor, MemberInfo


def describe_path(path: str) -> str:
    """Name a node by its path: "subject", "member Orders[2].Name" or "item[0].Name"."""
    if not path:
        return "subject"
    if path.startswith("["):
        return f"item{path}"
    return f"member {path}"


@dataclass(frozen=True)
class DiagnosticContext:
    """The caller's explanation, carried unchanged to every node."""
    reason: str = ""
    reason_args: tuple[Any, ...] = ()


@dataclass(frozen=True)
class EquivalencyValidationContext:
    """
    One node of a comparison.

    Attributes:
        subject: The actual value at this node
        expectation: The value the subject must be equivalent to
        compile_time_type: Type whose members are selected for comparison
        config: Shared, read-only configuration of the comparison
        scope: Shared sink that collects mismatches
        diagnostics: Shared reason for the comparison
        path: Dotted path from the root, e.g. "Orders[2].Customer.Name"
        is_root: True only for the node the comparison started at
        depth: Number of members/items between the root and this node
        ancestors: Identities of the subject objects above this node
    """
    subject: Any
    expectation: Any
    compile_time_type: type
    config: EquivalencyConfig
    scope: AssertionScope = field(compare=False, repr=False)
    diagnostics: DiagnosticContext = field(default_factory=DiagnosticContext, repr=False)
    path: str = ""
    is_root: bool = True
    depth: int = 0
    ancestors: frozenset[int] = frozenset()

    @classmethod
    def for_root(
        cls,
        subject: Any,
        expectation: Any,
        config: EquivalencyConfig,
        scope: AssertionScope,
        compile_time_type: type | None = None,
        reason: str = "",
        reason_args: tuple[Any, ...] = (),
    ) -> EquivalencyValidationContext:
        return cls(
            subject=subject,
            expectation=expectation,
            compile_time_type=compile_time_type or type(subject),
            config=config,
            scope=scope,
            diagnostics=DiagnosticContext(reason, tuple(reason_args)),
        )

    @property
    def description(self) -> str:
        """How this node is named in failure messages."""
        if self.is_root:
            return "subject"
        return describe_path(self.path)

    @property
    def verification(self) -> Verification:
        """A Verification bound to this node's path, reason and scope."""
        return Verification(self.scope, context=self.description, path=self.path).because_of(
            self.diagnostics.reason, *self.diagnostics.reason_args
        )

    def with_subject(self, subject: Any) -> EquivalencyValidationContext:
        """Return a copy whose subject is replaced (used after type conversion)."""
        return dataclasses.replace(self, subject=subject)

    def create_for_nested_property(
        self,
        member: MemberDescriptor,
        info: MemberInfo | None = None,
    ) -> EquivalencyValidationContext | None:
        """
        Derive the context for one member of the current subject/expectation.

        Returns:
            The child context, or None when the member is skipped: it does
            not exist on the expectation, or its expected value is None and
            null expectations are excluded. A missing member is reported
            unless the configuration ignores missing members.
        """
        path = info.path if info else self._child_path(f".{member.name}")

        expected_value = member.read(self.expectation)
        if expected_value is MISSING:
            if self.config.missing_member_handling == MissingMemberHandling.FAIL:
                self._verify_member(path).fail_with(
                    "Expected {context} to exist on the expectation{reason}, but it does not.",
                    actual=member.read(self.subject),
                )
            return None

        if expected_value is None and self.config.exclude_null_expectations:
            return None

        subject_value = member.read(self.subject)
        if subject_value is MISSING:
            self._verify_member(path).fail_with(
                "Expected {context} to exist{reason}, but the subject does not have it.",
                expected=expected_value,
            )
            return None

        compile_time_type = member.declared_type or type(subject_value)

        return EquivalencyValidationContext(
            subject=subject_value,
            expectation=expected_value,
            compile_time_type=compile_time_type,
            config=self.config,
            scope=self.scope,
            diagnostics=self.diagnostics,
            path=path,
            is_root=False,
            depth=self.depth + 1,
            ancestors=self.ancestors | {id(self.subject)},
        )

    def create_for_collection_item(
        self,
        index: int,
        subject: Any,
        expectation: Any,
    ) -> EquivalencyValidationContext:
        """Derive the context for the item at index in both collections."""
        return EquivalencyValidationContext(
            subject=subject,
            expectation=expectation,
            compile_time_type=type(subject),
            config=self.config,
            scope=self.scope,
            diagnostics=self.diagnostics,
            path=self._child_path(f"[{index}]"),
            is_root=False,
            depth=self.depth + 1,
            ancestors=self.ancestors | {id(self.subject)},
        )

    def _verify_member(self, path: str) -> Verification:
        return Verification(self.scope, context=describe_path(path), path=path).because_of(
            self.diagnostics.reason, *self.diagnostics.reason_args
        )

    def _child_path(self, suffix: str) -> str:
        if not self.path and suffix.startswith("."):
            return suffix[1:]
        return f"{self.path}{suffix}"
