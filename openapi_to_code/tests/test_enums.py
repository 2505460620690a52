from unittest import TestCase

import pytest

from openapi_to_code.pipeline.analyzer.enums import (
    get_custom_names,
    get_enum_identity,
    get_type_from_enum,
    proposed_enum_name,
)
from openapi_to_code.pipeline.analyzer.ir_nodes import (
    EnumMember,
    keyword_type,
    literal_type,
    reference_type,
    union_type,
)
from openapi_to_code.pipeline.analyzer.type_synthesizer import TypeSynthesizer
from openapi_to_code.pipeline.config import CodeGeneratorConfig, EnumStyle
from openapi_to_code.pipeline.context import create_context
from openapi_to_code.pipeline.errors import EnumNamesError, EnumValueError


def make_context(**config):
    spec = {"openapi": "3.0.0", "paths": {}}
    return create_context(spec, CodeGeneratorConfig(**config))


class TestEnumIdentity(TestCase):
    def setUp(self):
        self.ctx = make_context(enum_style=EnumStyle.ENUM)

    def test_same_values_reuse_the_declaration(self):
        first = get_enum_identity({"enum": ["a", "b"]}, "status", self.ctx)
        second = get_enum_identity({"enum": ["a", "b"]}, "status", self.ctx)

        self.assertIs(first, second)
        self.assertEqual(first.name, "Status")
        self.assertEqual(len(self.ctx.enum_aliases), 1)

    def test_different_values_get_a_suffixed_name(self):
        first = get_enum_identity({"enum": ["a", "b"]}, "status", self.ctx)
        other = get_enum_identity({"enum": ["c"]}, "status", self.ctx)
        again = get_enum_identity({"enum": ["a", "b"]}, "status", self.ctx)

        self.assertEqual(other.name, "Status2")
        self.assertIs(again, first)
        self.assertEqual([e.name for e in self.ctx.enum_aliases], ["Status", "Status2"])

    def test_members(self):
        identity = get_enum_identity({"enum": ["available", "sold"]}, "status", self.ctx)
        decl = self.ctx.enum_aliases[0]

        self.assertEqual(
            decl.members, [EnumMember("Available", "available"), EnumMember("Sold", "sold")]
        )
        self.assertEqual(decl.style, "enum")
        self.assertEqual(identity.member_names, {"available": "Available", "sold": "Sold"})
        self.assertEqual(identity.type_ref, reference_type("Status"))

    def test_custom_member_names(self):
        schema = {"type": "integer", "enum": [1, 2], "x-enumNames": ["Active", "Inactive"]}
        identity = get_enum_identity(schema, "state", self.ctx)

        self.assertEqual(
            self.ctx.enum_aliases[0].members, [EnumMember("Active", 1), EnumMember("Inactive", 2)]
        )
        self.assertEqual(identity.member_names, {"1": "Active", "2": "Inactive"})

    def test_as_const_style(self):
        ctx = make_context(enum_style=EnumStyle.AS_CONST)
        get_enum_identity({"enum": ["a"]}, "kind", ctx)
        self.assertEqual(ctx.enum_aliases[0].style, "as-const")

    def test_enums_share_names_with_aliases(self):
        self.ctx.get_unique_alias("Status")
        self.assertEqual(get_enum_identity({"enum": ["a"]}, "status", self.ctx).name, "Status2")

    def test_property_enums_through_synthesis(self):
        type_ref = TypeSynthesizer(self.ctx).get_type_from_schema(
            {"type": "object", "properties": {"status": {"type": "string", "enum": ["a"]}}}
        )
        self.assertEqual(type_ref.members[0].type_ref, reference_type("Status"))

    def test_boolean_enums_stay_inline(self):
        type_ref = TypeSynthesizer(self.ctx).get_type_from_schema(
            {"type": "boolean", "enum": [True]}, "flag"
        )
        self.assertEqual(type_ref, literal_type(True))
        self.assertEqual(self.ctx.enum_aliases, [])


class TestCustomNames(TestCase):
    def test_varnames_alias(self):
        schema = {"enum": ["a"], "x-enum-varnames": ["First"]}
        self.assertEqual(get_custom_names(schema, schema["enum"]), ["First"])

    def test_absent(self):
        self.assertIsNone(get_custom_names({"enum": ["a"]}, ["a"]))

    def test_malformed(self):
        for names in ("First", ["First", "Second"], [1]):
            with self.subTest(names=names):
                with self.assertRaises(EnumNamesError):
                    get_custom_names({"enum": ["a"], "x-enumNames": names}, ["a"])


def test_get_type_from_enum():
    assert get_type_from_enum(["a", 2, None]) == union_type(
        [literal_type("a"), literal_type(2), keyword_type("null")]
    )
    assert get_type_from_enum([]) == keyword_type("never")


def test_get_type_from_enum_keeps_booleans_apart_from_numbers():
    type_ref = get_type_from_enum([1, True, 0, False])
    assert [(t.literal_value, t.literal_kind) for t in type_ref.type_args] == [
        (1, "number"),
        (True, "boolean"),
        (0, "number"),
        (False, "boolean"),
    ]
    assert get_type_from_enum([1, 1]) == literal_type(1)


def test_get_type_from_enum_rejects_structured_values():
    with pytest.raises(EnumValueError):
        get_type_from_enum([{"nested": 1}])


@pytest.mark.parametrize(
    "schema,prop_name,expected",
    [
        ({}, "status", "Status"),
        ({}, "pet-kind", "PetKind"),
        ({"title": "order status"}, "status", "OrderStatus"),
    ],
)
def test_proposed_enum_name(schema, prop_name, expected):
    assert proposed_enum_name(schema, prop_name) == expected
