"""Tests for member discovery and selection rules."""

from dataclasses import dataclass
from typing import NamedTuple, Optional

import pytest

from fluentcheck.equivalency import describe_members, is_complex_type, register_members, unregister_members
from fluentcheck.equivalency.selection import (
    MISSING,
    ExcludeMemberByPathRule,
    ExcludeMemberByPredicateRule,
    IncludeMemberByPathRule,
    MemberInfo,
    members_of,
    strip_indices,
)


@dataclass
class Address:
    city: str
    zip_code: str


@dataclass
class Person:
    name: str
    address: Address
    nickname: Optional[str] = None


class Point(NamedTuple):
    x: int
    y: int


class Slotted:
    __slots__ = ("a", "b")

    def __init__(self, a, b):
        self.a = a
        self.b = b


class Plain:
    def __init__(self):
        self.visible = 1
        self._hidden = 2


class Money:
    def __init__(self, amount, currency):
        self._amount = amount
        self._currency = currency

    @property
    def amount(self):
        return self._amount

    @property
    def currency(self):
        return self._currency


class TestDescribeMembers:
    def test_dataclass_members_in_field_order(self):
        members = describe_members(Person)
        assert [m.name for m in members] == ["name", "address", "nickname"]

    def test_declared_types_are_resolved(self):
        members = {m.name: m for m in describe_members(Person)}
        assert members["address"].declared_type is Address
        assert members["name"].declared_type is str
        # Optional[...] is not a concrete class
        assert members["nickname"].declared_type is None

    def test_namedtuple(self):
        assert [m.name for m in describe_members(Point)] == ["x", "y"]

    def test_slots(self):
        assert [m.name for m in describe_members(Slotted)] == ["a", "b"]

    def test_plain_objects_are_described_per_instance(self):
        assert describe_members(Plain) is None
        assert [m.name for m in members_of(Plain(), Plain)] == ["visible"]

    def test_registered_members_take_precedence(self):
        register_members(Money, "amount", "currency")
        try:
            members = describe_members(Money)
            assert [m.name for m in members] == ["amount", "currency"]
            assert members[0].read(Money(5, "EUR")) == 5
        finally:
            unregister_members(Money)

        assert describe_members(Money) is None


class TestMembersOf:
    def test_mapping_keys_include_expectation_only_keys(self):
        members = members_of({"a": 1, "b": 2}, dict, expectation={"b": 2, "c": 3})
        assert [m.name for m in members] == ["a", "b", "c"]

    def test_mapping_takes_declared_members_of_an_object_expectation(self):
        expectation = Person("Ann", Address("Oslo", "0150"))
        members = members_of({"name": "Ann", "extra": 1}, dict, expectation=expectation)
        assert [m.name for m in members] == ["name", "extra", "address", "nickname"]

    def test_non_string_keys(self):
        members = members_of({1: "one"}, dict)
        assert members[0].name == "1"
        assert members[0].read({1: "one"}) == "one"
        assert members[0].read({2: "two"}) is MISSING

    def test_attribute_reads_from_mappings_too(self):
        name = describe_members(Person)[0]
        assert name.read({"name": "Ann"}) == "Ann"
        assert name.read({}) is MISSING
        assert name.read(None) is MISSING


class TestComplexTypes:
    @pytest.mark.parametrize("cls", [int, str, float, bytes, type(None), type, type(len)])
    def test_value_types_are_not_complex(self, cls):
        assert not is_complex_type(cls)

    @pytest.mark.parametrize("cls", [Person, Point, Slotted, Plain, dict])
    def test_complex_types(self, cls):
        assert is_complex_type(cls)

    def test_configured_value_types_are_not_complex(self):
        assert not is_complex_type(Address, value_types=[Address])


def _infos(*paths):
    infos = {}
    members = []
    for path in paths:
        name = path.rsplit(".", 1)[-1]
        infos[name] = MemberInfo(name=name, path=path, declared_type=None, declaring_type=object)
        members.append(type("M", (), {"name": name})())
    return members, infos


class TestSelectionRules:
    def test_strip_indices(self):
        assert strip_indices("orders[2].lines[0].sku") == "orders.lines.sku"

    def test_exclude_by_path_ignores_indices(self):
        members, infos = _infos("orders.id", "orders.total")
        kept = ExcludeMemberByPathRule("orders[0].id").select(members, infos)
        assert [m.name for m in kept] == ["total"]

    def test_exclude_by_predicate(self):
        members, infos = _infos("id", "created_at", "updated_at")
        rule = ExcludeMemberByPredicateRule(lambda info: info.name.endswith("_at"), "timestamps")
        assert [m.name for m in rule.select(members, infos)] == ["id"]
        assert repr(rule) == "Exclude members where timestamps"

    def test_include_keeps_ancestors_and_descendants(self):
        rule = IncludeMemberByPathRule("customer.name")

        assert rule._matches("customer")
        assert rule._matches("customer.name")
        assert rule._matches("customer.name.first")
        assert not rule._matches("customer.email")
        assert not rule._matches("customer_id")

    def test_root_collection_items_strip_to_member_names(self):
        assert strip_indices("[0].sku") == "sku"
        assert strip_indices("[0][1].sku") == "sku"
