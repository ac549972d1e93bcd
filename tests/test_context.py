"""Tests for per-node comparison contexts."""

import dataclasses
from dataclasses import dataclass

import pytest

from fluentcheck.equivalency import (
    EquivalencyOptions,
    EquivalencyValidationContext,
    EquivalencyValidator,
    describe_members,
)
from fluentcheck.equivalency.context import describe_path
from fluentcheck.execution import AssertionScope


@dataclass
class Address:
    city: str


@dataclass
class Person:
    name: str
    address: Address


def root(subject, expectation, options=None, **kwargs):
    config = (options or EquivalencyOptions()).build()
    return EquivalencyValidationContext.for_root(subject, expectation, config, AssertionScope(), **kwargs)


def member(cls, name):
    return next(m for m in describe_members(cls) if m.name == name)


class TestDescribePath:
    @pytest.mark.parametrize(
        "path, expected",
        [
            ("", "subject"),
            ("[0]", "item[0]"),
            ("[0].name", "item[0].name"),
            ("orders[2].name", "member orders[2].name"),
        ],
    )
    def test_describe(self, path, expected):
        assert describe_path(path) == expected


class TestRootContext:
    def test_root_defaults(self):
        context = root(Person("Ann", Address("Oslo")), None, reason="r", reason_args=(1,))

        assert context.is_root
        assert context.path == ""
        assert context.depth == 0
        assert context.compile_time_type is Person
        assert context.description == "subject"
        assert context.diagnostics.reason == "r"
        assert context.diagnostics.reason_args == (1,)

    def test_is_immutable(self):
        context = root(1, 1)
        with pytest.raises(dataclasses.FrozenInstanceError):
            context.subject = 2

    def test_with_subject_leaves_the_original_alone(self):
        context = root("5", 5)
        converted = context.with_subject(5)

        assert converted.subject == 5
        assert context.subject == "5"
        assert converted.expectation is context.expectation
        assert converted.scope is context.scope


class TestNestedProperty:
    def test_child_context(self):
        subject = Person("Ann", Address("Oslo"))
        context = root(subject, Person("Ann", Address("Bergen")))

        child = context.create_for_nested_property(member(Person, "address"))

        assert child.path == "address"
        assert not child.is_root
        assert child.depth == 1
        assert child.compile_time_type is Address
        assert child.subject == Address("Oslo")
        assert child.expectation == Address("Bergen")
        assert id(subject) in child.ancestors
        assert child.config is context.config
        assert child.diagnostics is context.diagnostics

    def test_grandchild_path(self):
        context = root(Person("Ann", Address("Oslo")), Person("Ann", Address("Oslo")))
        child = context.create_for_nested_property(member(Person, "address"))
        grandchild = child.create_for_nested_property(member(Address, "city"))
        assert grandchild.path == "address.city"
        assert grandchild.description == "member address.city"

    def test_member_missing_on_expectation_is_skipped_and_reported(self):
        context = root(Person("Ann", Address("Oslo")), {"address": {}})

        assert context.create_for_nested_property(member(Person, "name")) is None
        assert context.scope.result.paths == ["name"]

    def test_ignored_missing_member_is_skipped_silently(self):
        options = EquivalencyOptions().excluding_missing_members()
        context = root(Person("Ann", Address("Oslo")), {}, options)

        assert context.create_for_nested_property(member(Person, "name")) is None
        assert not context.scope.has_failures

    def test_null_expectation_is_skipped_when_excluded(self):
        options = EquivalencyOptions().excluding_null_expectations()
        context = root(Person("Ann", Address("Oslo")), {"name": None}, options)

        assert context.create_for_nested_property(member(Person, "name")) is None
        assert not context.scope.has_failures


class TestCollectionItem:
    def test_item_context(self):
        context = root([Address("Oslo")], [Address("Bergen")])
        item = context.create_for_collection_item(0, Address("Oslo"), Address("Bergen"))

        assert item.path == "[0]"
        assert item.description == "item[0]"
        assert item.compile_time_type is Address
        assert not item.is_root
        assert item.depth == 1


class TestValidatorEntryPoint:
    def test_must_start_at_root(self):
        context = root([1], [1]).create_for_collection_item(0, 1, 1)
        with pytest.raises(ValueError, match="root context"):
            EquivalencyValidator().assert_equality(context)

    def test_collects_into_the_scope(self):
        context = root({"a": 1}, {"a": 2})
        EquivalencyValidator().assert_equality(context)
        assert context.scope.result.paths == ["a"]
