from unittest import TestCase

import pytest

from openapi_to_code.pipeline.analyzer.schema_kind import SchemaKind, classify_schema
from openapi_to_code.pipeline.analyzer.visibility import NO_MODES, OnlyModes, check_visibility
from openapi_to_code.pipeline.config import CodeGeneratorConfig
from openapi_to_code.pipeline.context import create_context


def make_context(schemas, **config):
    spec = {"openapi": "3.0.0", "paths": {}, "components": {"schemas": schemas}}
    return create_context(spec, CodeGeneratorConfig(**config))


def ref(name):
    return {"$ref": f"#/components/schemas/{name}"}


class TestVisibility(TestCase):
    def test_direct_flags(self):
        ctx = make_context({})
        self.assertEqual(check_visibility({"readOnly": True}, ctx), OnlyModes(True, False))
        self.assertEqual(check_visibility({"writeOnly": True}, ctx), OnlyModes(False, True))
        self.assertEqual(check_visibility({"type": "string"}, ctx), NO_MODES)

    def test_nested_properties(self):
        ctx = make_context({})
        schema = {
            "type": "object",
            "properties": {
                "id": {"type": "integer", "readOnly": True},
                "tags": {"type": "array", "items": {"writeOnly": True}},
            },
        }
        self.assertEqual(check_visibility(schema, ctx), OnlyModes(True, True))

    def test_references_are_followed_and_memoized(self):
        ctx = make_context({"Secret": {"type": "object", "properties": {"x": {"writeOnly": True}}}})
        schema = {"type": "object", "properties": {"secret": ref("Secret")}}

        self.assertEqual(check_visibility(schema, ctx), OnlyModes(False, True))
        self.assertEqual(
            ctx.refs_only_mode["#/components/schemas/Secret"], OnlyModes(False, True)
        )

    def test_references_ignored_without_resolution(self):
        ctx = make_context({"Secret": {"type": "object", "properties": {"x": {"writeOnly": True}}}})
        schema = {"type": "object", "properties": {"secret": ref("Secret")}}
        self.assertEqual(check_visibility(schema, ctx, resolve_refs=False), NO_MODES)

    def test_cycles_terminate(self):
        ctx = make_context(
            {
                "A": {"type": "object", "properties": {"b": ref("B")}},
                "B": {
                    "type": "object",
                    "properties": {"a": ref("A"), "x": {"type": "string", "writeOnly": True}},
                },
                "Node": {
                    "type": "object",
                    "properties": {"children": {"type": "array", "items": ref("Node")}},
                },
            }
        )
        self.assertEqual(check_visibility(ref("A"), ctx), OnlyModes(False, True))
        self.assertEqual(check_visibility(ref("Node"), ctx), NO_MODES)

    def test_all_of_cycles_terminate(self):
        ctx = make_context(
            {
                "A": {"allOf": [ref("B")]},
                "B": {"allOf": [ref("A")], "properties": {"x": {"readOnly": True}}},
                "Self": {"allOf": [ref("Self")], "properties": {"y": {"writeOnly": True}}},
            }
        )
        self.assertEqual(check_visibility(ref("A"), ctx), OnlyModes(True, False))
        self.assertEqual(check_visibility(ref("B"), ctx), OnlyModes(True, False))
        self.assertEqual(check_visibility(ref("Self"), ctx), OnlyModes(False, True))

    def test_combinators(self):
        ctx = make_context({})
        schema = {"allOf": [{"readOnly": True}], "oneOf": [{"writeOnly": True}]}
        self.assertEqual(check_visibility(schema, ctx), OnlyModes(True, True))

    def test_merge_read_write_only_short_circuits(self):
        ctx = make_context({}, merge_read_write_only=True)
        self.assertEqual(check_visibility({"readOnly": True}, ctx), NO_MODES)


@pytest.mark.parametrize(
    "schema,expected",
    [
        (None, SchemaKind.EMPTY),
        ({}, SchemaKind.EMPTY),
        ({"description": "no keywords"}, SchemaKind.EMPTY),
        ({"$ref": "#/components/schemas/Pet"}, SchemaKind.REFERENCE),
        (True, SchemaKind.BOOLEAN),
        (False, SchemaKind.BOOLEAN),
        ({"oneOf": [], "anyOf": []}, SchemaKind.ONE_OF),
        ({"anyOf": []}, SchemaKind.ANY_OF),
        (
            {"discriminator": {"propertyName": "kind"}, "allOf": []},
            SchemaKind.DISCRIMINATOR_MAPPING,
        ),
        ({"allOf": []}, SchemaKind.ALL_OF),
        ({"type": ["string", "null"]}, SchemaKind.TYPE_ARRAY),
        ({"type": "array", "items": {"type": "string"}}, SchemaKind.ITEMS),
        ({"type": "array", "prefixItems": [{"type": "string"}]}, SchemaKind.PREFIX_ITEMS),
        ({"type": "object", "properties": {}}, SchemaKind.OBJECT),
        ({"additionalProperties": True}, SchemaKind.OBJECT),
        ({"type": "object", "additionalProperties": False}, SchemaKind.PRIMITIVE),
        ({"type": "string", "enum": ["a"]}, SchemaKind.ENUM),
        ({"type": "string", "format": "binary"}, SchemaKind.BINARY),
        ({"const": None}, SchemaKind.CONST),
        ({"type": "integer"}, SchemaKind.PRIMITIVE),
    ],
)
def test_classify_schema(schema, expected):
    assert classify_schema(schema) == expected
