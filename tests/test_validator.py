"""Tests for the comparison engine driven through the step pipeline."""

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum

import pytest

from fluentcheck.equivalency import EquivalencyOptions, check
from fluentcheck.execution import ConfigurationError


@dataclass
class Address:
    city: str
    street: str = "Main St"


@dataclass
class Person:
    name: str
    address: Address


@dataclass
class Order:
    id: int
    lines: list = field(default_factory=list)


class Node:
    def __init__(self, value):
        self.value = value
        self.next = None


class Empty:
    pass


class Shape(Enum):
    CIRCLE = 1
    SQUARE = 2


def messages(result):
    return [m.message for m in result.mismatches]


class TestScalars:
    def test_equal_scalars(self):
        assert check(5, 5).is_equivalent
        assert check("a", "a").is_equivalent

    def test_different_scalars_cite_both_values(self):
        result = check(5, 6)
        assert messages(result) == ["Expected subject to be 6, but found 5."]

    def test_none_against_value(self):
        assert messages(check(None, 1)) == ["Expected subject to be 1, but found <null>."]

    def test_reason_is_included(self):
        result = check(5, 6, None, "the total must be {0}", 6)
        assert messages(result) == ["Expected subject to be 6 because the total must be 6, but found 5."]


class TestReflexivity:
    @pytest.mark.parametrize(
        "graph",
        [
            Person("Ann", Address("Oslo")),
            {"x": 1, "y": [1, 2, {"z": None}]},
            [Order(1, [1, 2]), Order(2)],
            (),
            {},
        ],
    )
    def test_graph_equals_itself(self, graph):
        assert check(graph, graph).is_equivalent

    def test_equal_copies(self):
        assert check(Person("Ann", Address("Oslo")), Person("Ann", Address("Oslo"))).is_equivalent


class TestCollections:
    def test_length_mismatch_names_both_counts(self):
        result = check([1, 2, 3], [1, 2])
        assert messages(result) == [
            "Expected subject to be a collection with 2 item(s), but found 3."
        ]

    def test_length_mismatch_without_recursion(self):
        options = EquivalencyOptions().excluding_nested_objects()
        result = check({"items": [1, 2, 3]}, {"items": [1, 2]}, options)
        assert messages(result) == [
            "Expected member items to be a collection with 2 item(s), but found 3."
        ]

    def test_order_matters(self):
        result = check([1, 2, 3], [3, 2, 1])
        assert result.paths == ["[0]", "[2]"]
        assert messages(result)[0] == "Expected item[0] to be 3, but found 1."

    def test_nested_collection_compared_by_equality_when_not_recursive(self):
        options = EquivalencyOptions().excluding_nested_objects()
        result = check({"items": [1, 2, 3]}, {"items": [3, 2, 1]}, options)
        assert messages(result) == [
            "Expected member items to be equal to {3, 2, 1}, but {1, 2, 3} differs at index 0."
        ]

    def test_collection_against_scalar(self):
        result = check({"tags": ["a"]}, {"tags": "a"})
        assert result.paths == ["tags"]
        assert "which cannot be compared with a non-collection type" in messages(result)[0]

    def test_root_collection_against_none_is_a_usage_error(self):
        with pytest.raises(ConfigurationError, match="Cannot compare a collection with <null>"):
            check([1, 2], None)

    def test_tuple_and_list_are_equivalent(self):
        assert check((1, 2), [1, 2]).is_equivalent

    def test_items_are_compared_structurally(self):
        result = check([Address("Oslo")], [Address("Bergen")])
        assert result.paths == ["[0].city"]

    def test_case_insensitive_strings(self):
        options = EquivalencyOptions().using(str, lambda s, e: s.lower() == e.lower())
        assert check(["ONE", "TWO"], ["one", "two"], options).is_equivalent


class TestSets:
    def test_equal_sets_are_equivalent_whatever_their_order(self):
        assert check({8, 16}, {16, 8}).is_equivalent
        assert check(frozenset({"b", "a"}), {"a", "b"}).is_equivalent

    def test_nested_equal_sets_are_equivalent(self):
        assert check({"tags": {8, 16}}, {"tags": {16, 8}}).is_equivalent
        assert check(Order(1, lines={8, 16}), Order(1, lines={16, 8})).is_equivalent

    def test_different_sets_are_one_mismatch_at_the_set(self):
        result = check({1, 2}, {1, 3})
        assert result.paths == [""]
        assert messages(result)[0].startswith("Expected subject to be a set equal to ")

    def test_nested_different_sets_are_reported_at_the_member(self):
        result = check({"tags": {"a", "b"}}, {"tags": {"a", "c"}})
        assert result.paths == ["tags"]
        assert messages(result)[0].startswith("Expected member tags to be a set equal to ")

    def test_set_against_list_with_the_same_items(self):
        assert check({1, 2}, [2, 1]).is_equivalent

    def test_sets_of_different_size(self):
        result = check({1, 2, 3}, {1, 2})
        assert result.paths == [""]


class TestComplexTypes:
    def test_nested_difference_is_reported_at_its_path(self):
        subject = Person("Ann", Address("Oslo"))
        expectation = Person("Ann", Address("Bergen"))

        result = check(subject, expectation)

        assert result.paths == ["address.city"]
        assert messages(result) == [
            'Expected member address.city to be "Bergen", but found "Oslo".'
        ]

    def test_every_difference_is_reported(self):
        subject = Person("Ann", Address("Oslo", "High St"))
        expectation = Person("Bob", Address("Bergen", "Low St"))

        result = check(subject, expectation)

        assert result.paths == ["name", "address.city", "address.street"]

    def test_object_against_dict(self):
        assert check(Person("Ann", Address("Oslo")), {
            "name": "Ann",
            "address": {"city": "Oslo", "street": "Main St"},
        }).is_equivalent

    def test_member_missing_on_expectation(self):
        result = check({"a": 1, "b": 2}, {"a": 1})
        assert messages(result) == [
            "Expected member b to exist on the expectation, but it does not."
        ]

    def test_member_missing_on_expectation_can_be_ignored(self):
        options = EquivalencyOptions().excluding_missing_members()
        assert check({"a": 1, "b": 2}, {"a": 1}, options).is_equivalent

    def test_member_missing_on_subject(self):
        result = check({"x": 1}, {"x": 1, "y": 2})
        assert messages(result) == [
            "Expected member y to exist, but the subject does not have it."
        ]

    def test_null_expectations_can_be_skipped(self):
        options = EquivalencyOptions().excluding_null_expectations()
        assert check({"a": 1, "b": 2}, {"a": 1, "b": None}, options).is_equivalent
        assert not check({"a": 1, "b": 2}, {"a": 1, "b": None}).is_equivalent

    def test_object_against_none(self):
        result = check(Person("Ann", Address("Oslo")), {"name": "Ann", "address": None})
        assert result.paths == ["address"]
        assert messages(result)[0].startswith("Expected member address to be <null>, but found Address(")

    def test_excluded_members_are_not_compared(self):
        options = EquivalencyOptions().excluding("address.city")
        assert check(Person("Ann", Address("Oslo")), Person("Ann", Address("Bergen")), options).is_equivalent

    def test_exclusions_apply_to_every_collection_item(self):
        options = EquivalencyOptions().excluding("lines.sku")
        subject = {"lines": [{"sku": "A", "qty": 1}, {"sku": "B", "qty": 2}]}
        expectation = {"lines": [{"sku": "X", "qty": 1}, {"sku": "Y", "qty": 2}]}
        assert check(subject, expectation, options).is_equivalent

    def test_non_recursive_compares_nested_objects_by_equality(self):
        options = EquivalencyOptions().excluding_nested_objects()
        result = check(Person("Ann", Address("Oslo")), Person("Ann", Address("Bergen")), options)
        assert result.paths == ["address"]

    def test_empty_mappings_are_equivalent(self):
        assert check({}, {}).is_equivalent

    def test_object_against_collection_fails_at_the_object(self):
        result = check(Person("Ann", Address("Oslo")), [1, 2])
        assert result.paths == [""]
        assert messages(result)[0].startswith("Expected subject to be {1, 2}, but found Person(")

    def test_mapping_against_collection_never_reads_list_attributes(self):
        result = check({"count": 3}, [1, 2, 3])
        assert result.paths == [""]
        assert "method" not in messages(result)[0]

    def test_nested_object_against_collection(self):
        result = check({"address": Address("Oslo")}, {"address": ["Oslo"]})
        assert result.paths == ["address"]

    def test_empty_mapping_against_object_reports_missing_members(self):
        result = check({}, Person("Ann", Address("Oslo")))
        assert result.paths == ["name", "address"]
        assert messages(result)[0] == "Expected member name to exist, but the subject does not have it."


class TestUsageErrors:
    def test_root_selecting_no_members(self):
        options = EquivalencyOptions().including("does_not_exist")
        with pytest.raises(ConfigurationError, match="Please specify some members"):
            check(Person("Ann", Address("Oslo")), Person("Ann", Address("Oslo")), options)

    def test_root_type_without_members(self):
        with pytest.raises(ConfigurationError):
            check(Empty(), Empty())


class TestConversion:
    def test_int_against_float(self):
        assert check(5, 5.0).is_equivalent

    def test_string_against_number(self):
        assert check("42", 42).is_equivalent

    def test_decimal_against_float(self):
        assert check(Decimal("0.1"), 0.1).is_equivalent

    def test_enum_against_its_value(self):
        assert check(1, Shape.CIRCLE).is_equivalent
        assert check("SQUARE", Shape.SQUARE).is_equivalent

    def test_incompatible_conversion_is_a_normal_mismatch(self):
        result = check("abc", 5)
        assert messages(result) == ['Expected subject to be 5, but found "abc".']

    def test_conversion_can_be_disabled(self):
        options = EquivalencyOptions().without_type_conversion()
        assert not check("42", 42, options).is_equivalent

    def test_expectation_is_never_converted(self):
        expectation = {"total": 5}
        check({"total": "5"}, expectation)
        assert expectation == {"total": 5}

    def test_nested_conversion(self):
        assert check({"price": "9.5", "qty": 2.0}, {"price": 9.5, "qty": 2}).is_equivalent


class TestCycles:
    def _cycle(self, value):
        node = Node(value)
        node.next = node
        return node

    def test_same_cyclic_object_is_equivalent(self):
        node = self._cycle(1)
        assert check(node, node).is_equivalent

    def test_cycle_is_reported_and_does_not_hang(self):
        result = check(self._cycle(1), self._cycle(1))
        assert result.paths == ["next"]
        assert "contains a cyclic reference" in messages(result)[0]

    def test_cycles_can_be_ignored(self):
        options = EquivalencyOptions().ignoring_cyclic_references()
        assert check(self._cycle(1), self._cycle(1), options).is_equivalent
        assert not check(self._cycle(1), self._cycle(2), options).is_equivalent

    def test_cyclic_dict(self):
        subject = {"name": "a"}
        subject["self"] = subject
        expectation = {"name": "a"}
        expectation["self"] = expectation

        result = check(subject, expectation)

        assert result.paths == ["self"]


class TestMaxDepth:
    @staticmethod
    def _chain(depth):
        node = {"value": depth}
        for _ in range(depth):
            node = {"child": node}
        return node

    def test_deep_graphs_are_cut_off(self):
        options = EquivalencyOptions().with_max_recursion_depth(3)
        result = check(self._chain(6), self._chain(6), options)
        assert messages(result) == [
            "The maximum recursion depth of 3 was reached at member child.child.child.child."
        ]

    def test_default_depth_is_enough_for_shallow_graphs(self):
        assert check(self._chain(5), self._chain(5)).is_equivalent


class TestRuntimeTypes:
    @dataclass
    class Animal:
        name: str

    @dataclass
    class Dog(Animal):
        breed: str = ""

    def test_compile_time_type_limits_members(self):
        result = check(
            self.Dog("Rex", "Husky"),
            self.Dog("Rex", "Pug"),
            compile_time_type=self.Animal,
        )
        assert result.is_equivalent

    def test_runtime_types_compare_every_member(self):
        options = EquivalencyOptions().respecting_runtime_types()
        result = check(
            self.Dog("Rex", "Husky"),
            self.Dog("Rex", "Pug"),
            options,
            compile_time_type=self.Animal,
        )
        assert result.paths == ["breed"]


class TestIdempotence:
    def test_same_outcome_twice(self):
        subject = {"x": 1, "y": [1, 2], "z": Person("Ann", Address("Oslo"))}
        expectation = {"x": 2, "y": [1, 2, 3], "z": Person("Ann", Address("Bergen"))}

        first = check(subject, expectation)
        second = check(subject, expectation)

        assert first.paths == second.paths == ["x", "y", "z.address.city"]
        assert messages(first) == messages(second)

    def test_scenario_count_mismatch_at_member(self):
        result = check({"x": 1, "y": [1, 2]}, {"x": 1, "y": [1, 2, 3]})
        assert messages(result) == [
            "Expected member y to be a collection with 3 item(s), but found 2."
        ]


def test_exclusions_apply_to_items_of_a_root_collection():
    options = EquivalencyOptions().excluding("sku")
    subject = [{"sku": "A", "qty": 1}]
    expectation = [{"sku": "B", "qty": 1}]
    assert check(subject, expectation, options).is_equivalent
