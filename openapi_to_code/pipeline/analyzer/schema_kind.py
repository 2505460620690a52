"""
Classification of schema nodes.

Each node falls into exactly one SchemaKind; the order of the checks below is
the precedence between keywords that may appear together.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from .reference_resolver import is_reference


class SchemaKind(Enum):
    EMPTY = "empty"  # Omitted schema or no recognizable keyword
    REFERENCE = "reference"
    BOOLEAN = "boolean"  # `true` / `false` schemas
    ONE_OF = "oneOf"
    ANY_OF = "anyOf"
    DISCRIMINATOR_MAPPING = "discriminatorMapping"  # Bare discriminator, no oneOf/anyOf
    ALL_OF = "allOf"
    TYPE_ARRAY = "typeArray"  # `type: [..]`
    ITEMS = "items"
    PREFIX_ITEMS = "prefixItems"
    OBJECT = "object"
    ENUM = "enum"
    BINARY = "binary"
    CONST = "const"
    PRIMITIVE = "primitive"


def _has(schema: dict, key: str) -> bool:
    return schema.get(key) is not None


def classify_schema(schema: Any) -> SchemaKind:
    if schema is None:
        return SchemaKind.EMPTY
    if is_reference(schema):
        return SchemaKind.REFERENCE
    if isinstance(schema, bool):
        return SchemaKind.BOOLEAN
    if not isinstance(schema, dict):
        return SchemaKind.EMPTY
    if _has(schema, "oneOf"):
        return SchemaKind.ONE_OF
    if _has(schema, "anyOf"):
        return SchemaKind.ANY_OF
    if _has(schema, "discriminator"):
        return SchemaKind.DISCRIMINATOR_MAPPING
    if _has(schema, "allOf"):
        return SchemaKind.ALL_OF
    if isinstance(schema.get("type"), list):
        return SchemaKind.TYPE_ARRAY
    if "items" in schema:
        return SchemaKind.ITEMS
    if _has(schema, "prefixItems"):
        return SchemaKind.PREFIX_ITEMS
    if _has(schema, "properties") or schema.get("additionalProperties") not in (None, False):
        return SchemaKind.OBJECT
    if _has(schema, "enum"):
        return SchemaKind.ENUM
    if schema.get("format") == "binary":
        return SchemaKind.BINARY
    if "const" in schema:
        return SchemaKind.CONST
    if _has(schema, "type"):
        return SchemaKind.PRIMITIVE
    return SchemaKind.EMPTY
