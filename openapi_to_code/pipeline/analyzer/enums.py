"""
Named enum declarations.

A named enum is emitted once per (name, values) identity: asking again for an
enum with the same proposed name and the same values returns the existing
type, a different value list gets a fresh suffixed name.
"""

from __future__ import annotations

import re
from typing import Any

from ..config import EnumStyle
from ..context import EnumIdentity, GenerationContext, enum_signature, signature_part
from ..errors import EnumNamesError, EnumValueError
from .ir_nodes import (
    EnumDecl,
    EnumMember,
    TypeRef,
    keyword_type,
    literal_type,
    reference_type,
    union_type,
)
from .name_resolver import to_identifier, upper_first


def is_named_enum_schema(schema: Any, name: str | None) -> bool:
    return (
        isinstance(schema, dict)
        and schema.get("enum") is not None
        and bool(name)
        and schema.get("type") != "boolean"
    )


def get_type_from_enum(values: list[Any]) -> TypeRef:
    """Inline union of literal types."""
    types = []
    for value in values:
        if value is None:
            types.append(keyword_type("null"))
        elif isinstance(value, (bool, int, float, str)):
            types.append(literal_type(value))
        else:
            raise EnumValueError(f"Unexpected {type(value).__name__} enum value: {value!r}")
    if not types:
        return keyword_type("never")
    return union_type(types)


def get_custom_names(schema: dict, values: list[Any]) -> list[str] | None:
    """Member names from `x-enumNames` or `x-enum-varnames`, if present."""
    if "x-enumNames" in schema:
        names = schema["x-enumNames"]
    elif "x-enum-varnames" in schema:
        names = schema["x-enum-varnames"]
    else:
        return None

    if not isinstance(names, list):
        raise EnumNamesError("enum names must be an array")
    if len(names) != len(values):
        raise EnumNamesError("enum names must have the same length as enum values")
    if any(not isinstance(n, str) for n in names):
        raise EnumNamesError("enum names must be an array of strings")
    return names


def proposed_enum_name(schema: dict, prop_name: str) -> str:
    base_name = schema.get("title") or upper_first(prop_name)
    return "".join(upper_first(part) for part in re.split(r"[^A-Za-z0-9$_]", base_name))


def get_enum_identity(schema: dict, prop_name: str, ctx: GenerationContext) -> EnumIdentity:
    """Return the identity for this enum, emitting its declaration on first use."""
    values = schema.get("enum") or []
    proposed = proposed_enum_name(schema, prop_name)
    signature = enum_signature(values)

    existing = ctx.find_enum(proposed, signature)
    if existing is not None:
        return existing

    names = get_custom_names(schema, values)
    name = ctx.get_unique_alias(proposed)

    members = []
    member_names = {}
    for index, value in enumerate(values):
        member = to_identifier(names[index] if names else signature_part(value), True)
        members.append(EnumMember(member, value))
        member_names[signature_part(value)] = member

    style = ctx.config.effective_enum_style
    ctx.enum_aliases.append(
        EnumDecl(
            name=name,
            members=members,
            style="as-const" if style == EnumStyle.AS_CONST else "enum",
        )
    )
    identity = EnumIdentity(name, signature, reference_type(name), member_names)
    ctx.register_enum(proposed, identity)
    return identity


def get_enum_type(schema: dict, prop_name: str, ctx: GenerationContext) -> TypeRef:
    return get_enum_identity(schema, prop_name, ctx).type_ref
