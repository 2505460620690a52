"""
Component pre-pass for discriminated inheritance.

Runs once per generation, before any type is synthesized:

1. Records the discriminating schemas: components with a `discriminator`
   that is used neither with `oneOf` nor `anyOf`, i.e. parents that children
   extend through `allOf`.
2. Makes the discriminator mapping of every such parent explicit, adding
   `<ChildName>: #/components/schemas/<ChildName>` for each child that does
   not appear in the mapping yet.

The mapping is edited on the context's own copy of the document.
"""

from __future__ import annotations

from ..context import GenerationContext
from ..errors import UnresolvedReferenceError
from .reference_resolver import get_ref_basename, is_reference

SCHEMA_PREFIX = "#/components/schemas/"


def preprocess_components(ctx: GenerationContext) -> None:
    schemas = (ctx.spec.get("components") or {}).get("schemas")
    if not schemas:
        return

    for name, schema in schemas.items():
        if not isinstance(schema, dict) or is_reference(schema):
            continue
        if schema.get("discriminator") and not schema.get("oneOf") and not schema.get("anyOf"):
            ctx.discriminating_schemas.add(SCHEMA_PREFIX + name)

    for name, schema in schemas.items():
        if not isinstance(schema, dict) or is_reference(schema) or not schema.get("allOf"):
            continue

        for child in schema["allOf"]:
            if not is_reference(child) or child["$ref"] not in ctx.discriminating_schemas:
                continue

            parent = schemas[get_ref_basename(child["$ref"])]
            if is_reference(parent):
                raise UnresolvedReferenceError(child["$ref"], message="Unexpected nested reference")

            discriminator = parent["discriminator"]
            mapping = discriminator.get("mapping")
            if mapping is None:
                mapping = discriminator["mapping"] = {}
            if SCHEMA_PREFIX + name not in mapping.values():
                mapping[name] = SCHEMA_PREFIX + name
