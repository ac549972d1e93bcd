"""
Typed data structures for comparison suites.

This module contains the dataclasses that represent a parsed suite file:
the suite itself, its comparison cases and the options they run with.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from ..equivalency import EquivalencyOptions


# ─────────────────────────────────────────────────────────────────────────────
# Options
# ─────────────────────────────────────────────────────────────────────────────

OPTION_FLAGS = {
    "recursive",
    "ignore_case",
    "ignore_missing_members",
    "exclude_null_expectations",
    "ignore_cyclic_references",
    "type_conversion",
    "runtime_types",
}
OPTION_LISTS = {"exclude", "include"}
OPTION_INTS = {"max_depth"}
OPTION_KEYS = OPTION_FLAGS | OPTION_LISTS | OPTION_INTS


def _ignore_case(subject: str, expectation: str) -> bool:
    return isinstance(subject, str) and subject.casefold() == expectation.casefold()


@dataclass
class CaseOptions:
    """
    Comparison options as written in a suite file.

    None means "not set here", so case options can be layered over the
    suite defaults with merged_over().
    """
    recursive: bool | None = None
    ignore_case: bool | None = None
    ignore_missing_members: bool | None = None
    exclude_null_expectations: bool | None = None
    ignore_cyclic_references: bool | None = None
    type_conversion: bool | None = None
    runtime_types: bool | None = None
    max_depth: int | None = None
    exclude: list[str] = field(default_factory=list)
    include: list[str] = field(default_factory=list)

    def merged_over(self, defaults: CaseOptions) -> CaseOptions:
        """Return options where unset values fall back to defaults; path lists add up."""
        merged = CaseOptions()
        for name in OPTION_FLAGS | OPTION_INTS:
            own = getattr(self, name)
            setattr(merged, name, own if own is not None else getattr(defaults, name))
        merged.exclude = [*defaults.exclude, *self.exclude]
        merged.include = [*defaults.include, *self.include]
        return merged

    def to_options(self) -> EquivalencyOptions:
        """Translate into an EquivalencyOptions builder."""
        options = EquivalencyOptions.default()
        if self.recursive is False:
            options.excluding_nested_objects()
        if self.ignore_case:
            options.using(str, _ignore_case)
        if self.ignore_missing_members:
            options.excluding_missing_members()
        if self.exclude_null_expectations:
            options.excluding_null_expectations()
        if self.ignore_cyclic_references:
            options.ignoring_cyclic_references()
        if self.type_conversion is False:
            options.without_type_conversion()
        if self.runtime_types:
            options.respecting_runtime_types()
        if self.max_depth is not None:
            options.with_max_recursion_depth(self.max_depth)
        options.excluding(*self.exclude)
        options.including(*self.include)
        return options


# ─────────────────────────────────────────────────────────────────────────────
# Cases
# ─────────────────────────────────────────────────────────────────────────────

@dataclass
class DataSource:
    """Where one side of a comparison comes from: inline data or a file."""
    value: Any = None
    file: Path | None = None

    @property
    def is_file(self) -> bool:
        return self.file is not None

    def describe(self) -> str:
        return str(self.file) if self.file is not None else "inline"


@dataclass
class ComparisonCase:
    """One subject/expectation pair to compare."""
    id: str
    subject: DataSource
    expectation: DataSource
    at: str | None = None  # JSONPath applied to both sides before comparing
    reason: str = ""
    options: CaseOptions = field(default_factory=CaseOptions)


# ─────────────────────────────────────────────────────────────────────────────
# Suite
# ─────────────────────────────────────────────────────────────────────────────

@dataclass
class Suite:
    """Fully parsed and validated suite."""
    version: int
    name: str
    defaults: CaseOptions = field(default_factory=CaseOptions)
    cases: list[ComparisonCase] = field(default_factory=list)
    base_dir: Path = field(default_factory=Path.cwd)

    def options_for(self, case: ComparisonCase) -> EquivalencyOptions:
        """Case options layered over the suite defaults."""
        return case.options.merged_over(self.defaults).to_options()
