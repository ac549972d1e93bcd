"""
Equivalency configuration.

EquivalencyOptions is the fluent builder callers use to describe how two
object graphs are compared. build() freezes it into an EquivalencyConfig,
which is shared read-only by every node of a single comparison.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable

from .selection import (
    ExcludeMemberByPathRule,
    ExcludeMemberByPredicateRule,
    IncludeMemberByPathRule,
    MemberDescriptor,
    MemberInfo,
    SelectAllMembersRule,
    SelectionRule,
    is_complex_type,
    members_of,
)

EqualityPredicate = Callable[[Any, Any], bool]

DEFAULT_MAX_RECURSION_DEPTH = 10


class MissingMemberHandling(str, Enum):
    """What to do when the expectation lacks a member the subject has."""
    FAIL = "fail"
    IGNORE = "ignore"


class CyclicReferenceHandling(str, Enum):
    """What to do when an object is met again below itself."""
    FAIL = "fail"
    IGNORE = "ignore"


@dataclass(frozen=True)
class EquivalencyConfig:
    """
    Frozen comparison policy for one comparison call.

    Attributes:
        is_recursive: Compare nested objects and collections member by member
            instead of with plain equality
        selection_rules: Ordered rules deciding which members are compared
        equality_overrides: (type, predicate) pairs replacing == for a type
        value_types: Extra types that are compared as a whole
        use_runtime_types: Select members from the runtime type of the subject
        missing_member_handling: Policy for members the expectation lacks
        exclude_null_expectations: Skip members whose expected value is None
        type_conversion: Try to convert the subject to the expectation's type
        cyclic_reference_handling: Policy for cyclic object graphs
        max_recursion_depth: Nodes deeper than this are reported, not traversed
    """
    is_recursive: bool = True
    selection_rules: tuple[SelectionRule, ...] = (SelectAllMembersRule(),)
    equality_overrides: tuple[tuple[type, EqualityPredicate], ...] = ()
    value_types: tuple[type, ...] = ()
    use_runtime_types: bool = False
    missing_member_handling: MissingMemberHandling = MissingMemberHandling.FAIL
    exclude_null_expectations: bool = False
    type_conversion: bool = True
    cyclic_reference_handling: CyclicReferenceHandling = CyclicReferenceHandling.FAIL
    max_recursion_depth: int = DEFAULT_MAX_RECURSION_DEPTH

    def is_complex(self, cls: type) -> bool:
        return is_complex_type(cls, self.value_types)

    def find_override(self, expectation: Any) -> EqualityPredicate | None:
        """Return the equality override for the expectation's type, most specific first."""
        if expectation is None or not self.equality_overrides:
            return None
        for klass in type(expectation).__mro__:
            for override_type, predicate in self.equality_overrides:
                if klass is override_type:
                    return predicate
        return None

    def are_equal(self, subject: Any, expectation: Any) -> bool:
        """Plain equality, honoring equality overrides."""
        predicate = self.find_override(expectation)
        if predicate is not None and subject is not None:
            return bool(predicate(subject, expectation))
        return bool(subject == expectation)

    def select_members(
        self,
        subject: Any,
        compile_time_type: type,
        parent_path: str = "",
        expectation: Any = None,
    ) -> list[tuple[MemberDescriptor, MemberInfo]]:
        """
        Resolve the ordered members to compare for a node.

        Args:
            subject: The subject at the node (needed for mappings and plain objects)
            compile_time_type: The type whose members are compared
            parent_path: Path of the node, used to build member paths
            expectation: The expectation at the node; keys only it has are
                included when comparing mappings

        Returns:
            (descriptor, info) pairs in comparison order
        """
        selected_type = type(subject) if self.use_runtime_types else compile_time_type
        members = list(members_of(subject, selected_type, expectation))

        infos = {
            m.name: MemberInfo(
                name=m.name,
                path=f"{parent_path}.{m.name}" if parent_path else m.name,
                declared_type=m.declared_type,
                declaring_type=selected_type,
            )
            for m in members
        }

        for rule in self.selection_rules:
            members = rule.select(members, infos)

        return [(m, infos[m.name]) for m in members]

    def __str__(self) -> str:
        lines = [f"- {rule!r}" for rule in self.selection_rules]
        lines.append("- Compare nested objects" if self.is_recursive else "- Compare nested objects by equality")
        for override_type, _ in self.equality_overrides:
            lines.append(f"- Use a custom equality for {override_type.__name__}")
        if self.use_runtime_types:
            lines.append("- Use runtime types for member selection")
        if self.missing_member_handling == MissingMemberHandling.IGNORE:
            lines.append("- Ignore members missing from the expectation")
        if self.exclude_null_expectations:
            lines.append("- Skip members expected to be null")
        if not self.type_conversion:
            lines.append("- Do not convert between types")
        if self.cyclic_reference_handling == CyclicReferenceHandling.IGNORE:
            lines.append("- Ignore cyclic references")
        lines.append(f"- Stop at a recursion depth of {self.max_recursion_depth}")
        return "\n".join(lines)


@dataclass
class EquivalencyOptions:
    """
    Fluent builder for EquivalencyConfig.

    Example:
        options = (
            EquivalencyOptions.default()
            .excluding("Id", "Audit.CreatedAt")
            .using(str, lambda s, e: s.lower() == e.lower())
        )
        compare(subject, expectation, options.build())
    """
    is_recursive: bool = True
    selection_rules: list[SelectionRule] = field(default_factory=lambda: [SelectAllMembersRule()])
    equality_overrides: list[tuple[type, EqualityPredicate]] = field(default_factory=list)
    value_types: list[type] = field(default_factory=list)
    use_runtime_types: bool = False
    missing_member_handling: MissingMemberHandling = MissingMemberHandling.FAIL
    exclude_null_expectations: bool = False
    type_conversion: bool = True
    cyclic_reference_handling: CyclicReferenceHandling = CyclicReferenceHandling.FAIL
    max_recursion_depth: int = DEFAULT_MAX_RECURSION_DEPTH

    @classmethod
    def default(cls) -> EquivalencyOptions:
        return cls()

    def including_nested_objects(self) -> EquivalencyOptions:
        self.is_recursive = True
        return self

    def excluding_nested_objects(self) -> EquivalencyOptions:
        """Compare nested objects and collections with plain equality."""
        self.is_recursive = False
        return self

    def excluding(self, *paths: str) -> EquivalencyOptions:
        """Exclude members by dotted path, e.g. "Id" or "Orders.Lines.Sku"."""
        for path in paths:
            self.selection_rules.append(ExcludeMemberByPathRule(path))
        return self

    def excluding_where(
        self,
        predicate: Callable[[MemberInfo], bool],
        description: str = "predicate",
    ) -> EquivalencyOptions:
        self.selection_rules.append(ExcludeMemberByPredicateRule(predicate, description))
        return self

    def including(self, *paths: str) -> EquivalencyOptions:
        """Compare only the given member paths (and what leads to them)."""
        if paths:
            self.selection_rules.append(IncludeMemberByPathRule(*paths))
        return self

    def using(self, override_type: type, predicate: EqualityPredicate) -> EquivalencyOptions:
        """Compare every value of override_type with predicate(subject, expectation)."""
        self.equality_overrides.append((override_type, predicate))
        return self

    def comparing_by_value(self, value_type: type) -> EquivalencyOptions:
        self.value_types.append(value_type)
        return self

    def respecting_runtime_types(self) -> EquivalencyOptions:
        self.use_runtime_types = True
        return self

    def excluding_missing_members(self) -> EquivalencyOptions:
        self.missing_member_handling = MissingMemberHandling.IGNORE
        return self

    def excluding_null_expectations(self) -> EquivalencyOptions:
        self.exclude_null_expectations = True
        return self

    def without_type_conversion(self) -> EquivalencyOptions:
        self.type_conversion = False
        return self

    def ignoring_cyclic_references(self) -> EquivalencyOptions:
        self.cyclic_reference_handling = CyclicReferenceHandling.IGNORE
        return self

    def with_max_recursion_depth(self, depth: int) -> EquivalencyOptions:
        if depth < 1:
            raise ValueError("The maximum recursion depth must be at least 1")
        self.max_recursion_depth = depth
        return self

    def build(self) -> EquivalencyConfig:
        """Freeze the options into a read-only configuration."""
        return EquivalencyConfig(
            is_recursive=self.is_recursive,
            selection_rules=tuple(self.selection_rules),
            equality_overrides=tuple(self.equality_overrides),
            value_types=tuple(self.value_types),
            use_runtime_types=self.use_runtime_types,
            missing_member_handling=self.missing_member_handling,
            exclude_null_expectations=self.exclude_null_expectations,
            type_conversion=self.type_conversion,
            cyclic_reference_handling=self.cyclic_reference_handling,
            max_recursion_depth=self.max_recursion_depth,
        )
