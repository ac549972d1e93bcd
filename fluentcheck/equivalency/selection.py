"""
Member discovery and selection.

Describes which members of a type take part in a comparison. Member
lists are resolved once per type and cached; mappings and plain objects
are described per instance because their members live on the instance.
"""

from __future__ import annotations

import dataclasses
import datetime
import functools
import re
import types
import typing
import uuid
from abc import ABC, abstractmethod
from collections.abc import Mapping
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from fractions import Fraction
from pathlib import PurePath
from typing import Any, Callable, Iterable

VALUE_TYPES: tuple[type, ...] = (
    type(None),
    bool,
    int,
    float,
    complex,
    str,
    bytes,
    bytearray,
    Decimal,
    Fraction,
    datetime.date,
    datetime.time,
    datetime.timedelta,
    datetime.timezone,
    uuid.UUID,
    Enum,
    PurePath,
    type,
    types.FunctionType,
    types.BuiltinFunctionType,
    types.MethodType,
    types.ModuleType,
    functools.partial,
)

_INDEX_PATTERN = re.compile(r"\[[^\]]*\]")

# Returned by MemberDescriptor.read when an instance lacks the member
MISSING: Any = object()


# ─────────────────────────────────────────────────────────────────────────────
# Member Descriptors
# ─────────────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class MemberDescriptor:
    """
    One comparable member of a type.

    Attributes:
        name: Member name as it appears in paths
        declared_type: Static type of the member, or None when unknown
        getter: Reads the member off an instance
        has_member: Tells whether an instance carries the member at all
    """
    name: str
    declared_type: type | None
    getter: Callable[[Any], Any]
    has_member: Callable[[Any], bool]

    def read(self, instance: Any) -> Any:
        """Return the member's value, or MISSING when the instance lacks it."""
        if instance is None or not self.has_member(instance):
            return MISSING
        return self.getter(instance)


@dataclass(frozen=True)
class MemberInfo:
    """What selection rules get to see about a member."""
    name: str
    path: str
    declared_type: type | None
    declaring_type: type

    @property
    def path_without_indices(self) -> str:
        return strip_indices(self.path)


def strip_indices(path: str) -> str:
    """Turn "Orders[2].Lines[0].Sku" into "Orders.Lines.Sku" and "[0].Sku" into "Sku"."""
    return _INDEX_PATTERN.sub("", path).lstrip(".")


def _attribute(name: str, declared_type: type | None) -> MemberDescriptor:
    # Mappings expose attributes by key so objects compare against plain dicts
    def getter(instance: Any) -> Any:
        if isinstance(instance, Mapping) and name in instance:
            return instance[name]
        return getattr(instance, name)

    def has_member(instance: Any) -> bool:
        if isinstance(instance, Mapping):
            return name in instance
        return hasattr(instance, name)

    return MemberDescriptor(
        name=name,
        declared_type=declared_type,
        getter=getter,
        has_member=has_member,
    )


def _key(key: Any, declared_type: type | None = None) -> MemberDescriptor:
    if isinstance(key, str):
        # Same lookup as attributes, so a dict compares against an object too
        return _attribute(key, declared_type)

    return MemberDescriptor(
        name=str(key),
        declared_type=declared_type,
        getter=lambda mapping: mapping[key],
        has_member=lambda mapping: isinstance(mapping, Mapping) and key in mapping,
    )


# ─────────────────────────────────────────────────────────────────────────────
# Type Registry
# ─────────────────────────────────────────────────────────────────────────────

_registered: dict[type, tuple[str, ...]] = {}


def register_members(cls: type, *names: str) -> None:
    """
    Explicitly declare the comparable members of a type.

    Takes precedence over automatic discovery. Useful for classes whose
    interesting state is exposed through properties.

    Example:
        register_members(Money, "amount", "currency")
    """
    _registered[cls] = tuple(names)
    describe_members.cache_clear()


def unregister_members(cls: type) -> None:
    _registered.pop(cls, None)
    describe_members.cache_clear()


def _resolve_hints(cls: type) -> dict[str, Any]:
    try:
        return typing.get_type_hints(cls)
    except (NameError, TypeError, AttributeError):
        return {}


def _as_class(declared: Any) -> type | None:
    """Only concrete classes are useful for member selection."""
    if typing.get_origin(declared) is not None:
        return None
    if isinstance(declared, type) and declared is not object:
        return declared
    return None


@functools.lru_cache(maxsize=None)
def describe_members(cls: type) -> tuple[MemberDescriptor, ...] | None:
    """
    Describe the comparable members of a type.

    Returns:
        An ordered tuple of descriptors, or None when the members can only
        be discovered from an instance (mappings and plain objects).
    """
    if cls in _registered:
        hints = _resolve_hints(cls)
        return tuple(_attribute(name, _as_class(hints.get(name))) for name in _registered[cls])

    if dataclasses.is_dataclass(cls):
        hints = _resolve_hints(cls)
        return tuple(
            _attribute(f.name, _as_class(hints.get(f.name, f.type)))
            for f in dataclasses.fields(cls)
        )

    if issubclass(cls, tuple) and hasattr(cls, "_fields"):
        hints = _resolve_hints(cls)
        return tuple(_attribute(name, _as_class(hints.get(name))) for name in cls._fields)

    slots = _collect_slots(cls)
    if slots and not _has_instance_dict(cls):
        hints = _resolve_hints(cls)
        return tuple(_attribute(name, _as_class(hints.get(name))) for name in slots)

    return None


def _has_instance_dict(cls: type) -> bool:
    return any("__dict__" in klass.__dict__ for klass in cls.__mro__ if klass is not object)


def _collect_slots(cls: type) -> list[str]:
    names: list[str] = []
    for klass in reversed(cls.__mro__):
        slots = klass.__dict__.get("__slots__", ())
        if isinstance(slots, str):
            slots = (slots,)
        for name in slots:
            if not name.startswith("_") and name not in names:
                names.append(name)
    return names


def members_of(
    instance: Any,
    cls: type,
    expectation: Any = None,
) -> tuple[MemberDescriptor, ...]:
    """
    Describe the members of cls, falling back to the instance when needed.

    For mappings the keys of the instance come first, followed by keys
    only the expectation has, so missing keys are reported too. When the
    expectation is an object rather than a mapping, its declared members
    stand in for those keys.
    """
    described = describe_members(cls)
    if described is not None:
        return described

    if isinstance(instance, Mapping):
        members = [_key(key) for key in instance.keys()]
        if isinstance(expectation, Mapping):
            members.extend(_key(key) for key in expectation.keys() if key not in instance)
        elif expectation is not None:
            members.extend(
                member
                for member in describe_members(type(expectation)) or ()
                if member.name not in instance
            )
        return tuple(members)

    if hasattr(instance, "__dict__"):
        return tuple(
            _attribute(name, None)
            for name in vars(instance)
            if not name.startswith("_")
        )

    return ()


def is_value_type(cls: type, value_types: Iterable[type] = ()) -> bool:
    """Value types are compared as a whole and never descended into."""
    return issubclass(cls, VALUE_TYPES) or any(issubclass(cls, t) for t in value_types)


def is_complex_type(cls: type, value_types: Iterable[type] = ()) -> bool:
    """
    Complex types are compared member by member.

    Dataclasses, named tuples, registered types, mappings and any object
    carrying instance attributes qualify; scalars and configured value
    types do not.
    """
    if is_value_type(cls, value_types):
        return False
    if issubclass(cls, Mapping):
        return True
    return (
        describe_members(cls) is not None
        or _has_instance_dict(cls)
        or bool(_collect_slots(cls))
    )


# ─────────────────────────────────────────────────────────────────────────────
# Selection Rules
# ─────────────────────────────────────────────────────────────────────────────

class SelectionRule(ABC):
    """A step in deciding which members of a type are compared."""

    @abstractmethod
    def select(
        self,
        members: list[MemberDescriptor],
        infos: dict[str, MemberInfo],
    ) -> list[MemberDescriptor]:
        """
        Return the members that remain selected after this rule.

        Args:
            members: The currently selected members, in order
            infos: MemberInfo for each member, keyed by member name
        """
        pass


class SelectAllMembersRule(SelectionRule):
    """Start from every member the type describes."""

    def select(self, members, infos):
        return list(members)

    def __repr__(self) -> str:
        return "Include all members"


class ExcludeMemberByPathRule(SelectionRule):
    """Drop the members whose index-free path matches exactly."""

    def __init__(self, path: str):
        self.path = strip_indices(path)

    def select(self, members, infos):
        return [m for m in members if infos[m.name].path_without_indices != self.path]

    def __repr__(self) -> str:
        return f"Exclude member {self.path}"


class ExcludeMemberByPredicateRule(SelectionRule):
    """Drop the members a predicate matches."""

    def __init__(self, predicate: Callable[[MemberInfo], bool], description: str = "predicate"):
        self.predicate = predicate
        self.description = description

    def select(self, members, infos):
        return [m for m in members if not self.predicate(infos[m.name])]

    def __repr__(self) -> str:
        return f"Exclude members where {self.description}"


class IncludeMemberByPathRule(SelectionRule):
    """
    Keep only members on, above or below the included paths.

    Including "Customer.Name" keeps "Customer" (so the comparison can get
    there) and "Customer.Name" itself, plus anything nested below it.
    """

    def __init__(self, *paths: str):
        self.paths = tuple(strip_indices(p) for p in paths)

    def select(self, members, infos):
        return [m for m in members if self._matches(infos[m.name].path_without_indices)]

    def _matches(self, member_path: str) -> bool:
        for path in self.paths:
            if member_path == path:
                return True
            if path.startswith(member_path + "."):
                return True
            if member_path.startswith(path + "."):
                return True
        return False

    def __repr__(self) -> str:
        return f"Include only {', '.join(self.paths)}"
