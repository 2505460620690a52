from unittest import TestCase

import pytest

from openapi_to_code.pipeline.analyzer.reference_resolver import (
    find_available_ref,
    get_ref_basename,
    get_ref_name,
    get_reference_name,
    is_reference,
    ref_path_to_property_path,
    resolve,
    resolve_array,
)
from openapi_to_code.pipeline.context import create_context
from openapi_to_code.pipeline.errors import UnresolvedReferenceError

SPEC = {
    "openapi": "3.0.0",
    "paths": {
        "/pets": {
            "get": {
                "parameters": [
                    {"name": "limit", "in": "query"},
                    {"$ref": "#/components/parameters/Offset"},
                ]
            }
        }
    },
    "components": {
        "schemas": {
            "Pet": {"type": "object"},
            "PetBase": {"type": "object"},
            "a/b": {"type": "string"},
            "a~b": {"type": "number"},
            "with space": {"type": "boolean"},
        },
        "parameters": {"Offset": {"name": "offset", "in": "query"}},
    },
}


class TestReferenceResolver(TestCase):
    def setUp(self):
        self.ctx = create_context(SPEC)

    def test_resolve_follows_local_refs(self):
        resolved = resolve({"$ref": "#/components/schemas/Pet"}, self.ctx)
        self.assertEqual(resolved, {"type": "object"})

    def test_resolve_returns_non_references_unchanged(self):
        schema = {"type": "string"}
        self.assertIs(resolve(schema, self.ctx), schema)
        self.assertIsNone(resolve(None, self.ctx))

    def test_escaped_segments(self):
        self.assertEqual(resolve({"$ref": "#/components/schemas/a~1b"}, self.ctx)["type"], "string")
        self.assertEqual(resolve({"$ref": "#/components/schemas/a~0b"}, self.ctx)["type"], "number")
        resolved = resolve({"$ref": "#/components/schemas/with%20space"}, self.ctx)
        self.assertEqual(resolved["type"], "boolean")

    def test_paths_through_lists(self):
        resolved = resolve({"$ref": "#/paths/~1pets/get/parameters/0"}, self.ctx)
        self.assertEqual(resolved["name"], "limit")

    def test_missing_target_raises(self):
        with self.assertRaises(UnresolvedReferenceError) as cm:
            resolve({"$ref": "#/components/schemas/Missing"}, self.ctx)
        self.assertEqual(cm.exception.ref, "#/components/schemas/Missing")
        self.assertIn("Missing", str(cm.exception))

    def test_external_refs_are_rejected(self):
        with self.assertRaises(UnresolvedReferenceError):
            resolve({"$ref": "other.yaml#/components/schemas/Pet"}, self.ctx)

    def test_resolve_array(self):
        params = resolve_array(self.ctx, SPEC["paths"]["/pets"]["get"]["parameters"])
        self.assertEqual([p["name"] for p in params], ["limit", "offset"])
        self.assertEqual(resolve_array(self.ctx, None), [])

    def test_find_available_ref(self):
        self.assertEqual(
            find_available_ref("#/components/schemas/PetBase", self.ctx),
            "#/components/schemas/PetBase2",
        )
        self.assertEqual(
            find_available_ref("#/components/schemas/CatBase", self.ctx),
            "#/components/schemas/CatBase",
        )


def test_is_reference():
    assert is_reference({"$ref": "#/a"})
    assert not is_reference({"type": "string"})
    assert not is_reference(True)
    assert not is_reference(None)


def test_ref_path_to_property_path():
    assert ref_path_to_property_path("#/components/schemas/Pet") == ["components", "schemas", "Pet"]


@pytest.mark.parametrize(
    "ref,expected",
    [
        ("#/components/schemas/Pet", "Pet"),
        ("#/components/schemas/123", "components_schemas_123"),
    ],
)
def test_get_ref_name(ref, expected):
    assert get_ref_name(ref) == expected


def test_basenames():
    assert get_ref_basename("#/components/schemas/Pet") == "Pet"
    assert get_reference_name({"$ref": "#/components/schemas/Pet"}) == "Pet"
    assert get_reference_name({"type": "object"}) is None
