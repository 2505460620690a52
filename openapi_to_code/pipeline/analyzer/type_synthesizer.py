"""
Type synthesis: turns schema nodes into type descriptions.

This is the core of the generator. `TypeSynthesizer.get_type_from_schema`
classifies a node once (see `schema_kind`) and dispatches on the result.
Referenced schemas become named aliases emitted into the context, with
"Read"/"Write" variants when the schema has readOnly/writeOnly members.
"""

from __future__ import annotations

import copy
import logging
from typing import Any

from ..config import EnumStyle
from ..context import GenerationContext, RefVariants
from ..errors import DiscriminatorError
from .enums import get_enum_identity, get_enum_type, get_type_from_enum, is_named_enum_schema
from .ir_nodes import (
    PropertySignature,
    TypeAliasDecl,
    TypeRef,
    array_type,
    intersection_type,
    keyword_type,
    object_type,
    qualified_type,
    reference_type,
    tuple_type,
    union_type,
)
from .name_resolver import to_identifier
from .reference_resolver import (
    find_available_ref,
    get_ref_basename,
    get_ref_name,
    is_reference,
    resolve,
)
from .schema_kind import SchemaKind, classify_schema
from .visibility import VisibilityMode, check_visibility

logger = logging.getLogger(__name__)

# Primitive `type` values with a direct keyword equivalent
KEYWORD_TYPES = {
    "string": "string",
    "number": "number",
    "integer": "number",
    "boolean": "boolean",
    "null": "null",
    "object": "object",
    "any": "any",
    "unknown": "unknown",
    "never": "never",
    "void": "void",
    "undefined": "undefined",
}

# Keywords that only make sense for one element of a `type: [..]` list
_ARRAY_KEYWORDS = ("items", "prefixItems")
_OBJECT_KEYWORDS = ("properties", "additionalProperties", "required")


def _own_object_keywords(schema: dict) -> dict:
    return {k: schema[k] for k in ("properties", "additionalProperties") if k in schema}


def _merge_variant(parent: dict, variant: Any) -> Any:
    """Merge a oneOf variant over its parent's keywords; lists concatenate."""
    if not isinstance(variant, dict):
        return variant
    merged = copy.deepcopy(parent)
    for key, value in variant.items():
        if isinstance(merged.get(key), list) and isinstance(value, list):
            merged[key] = merged[key] + value
        elif isinstance(merged.get(key), dict) and isinstance(value, dict):
            merged[key] = _merge_variant(merged[key], value)
        else:
            merged[key] = value
    return merged


class TypeSynthesizer:
    """Synthesizes types against the state held by a generation context."""

    def __init__(self, ctx: GenerationContext):
        self.ctx = ctx

    # ------------------------------------------------------------------
    # Entry points
    # ------------------------------------------------------------------

    def get_type_from_schema(
        self,
        schema: Any,
        name: str | None = None,
        mode: VisibilityMode = VisibilityMode.BASE,
        ref_path: str | None = None,
    ) -> TypeRef:
        """
        Create the type for a schema node.

        Args:
            schema: Any schema node (dict, reference, boolean or None)
            name: Hint used to name inline enums (usually the property name)
            mode: Visibility view to synthesize
            ref_path: The `$ref` the schema was reached through, if any

        Returns:
            The type, unioned with `null` when the schema is `nullable`.
        """
        type_ref = self._get_base_type(schema, name, mode, ref_path)
        if isinstance(schema, dict) and not is_reference(schema) and schema.get("nullable"):
            return union_type([type_ref, keyword_type("null")])
        return type_ref

    def get_empty_schema_type(self) -> TypeRef:
        return keyword_type("unknown" if self.ctx.config.use_unknown else "any")

    def get_ref_alias(
        self,
        obj: dict,
        mode: VisibilityMode = VisibilityMode.BASE,
        ignore_discriminator: bool = False,
    ) -> TypeRef:
        """
        Return the alias type for a reference, emitting its declarations on first use.

        With `ignore_discriminator`, the alias is built from a copy of the
        target without its discriminator and is keyed by a free `<ref>Base`
        path, so it never clashes with the alias of the discriminated union.
        """
        ctx = self.ctx
        ref = find_available_ref(obj["$ref"] + "Base", ctx) if ignore_discriminator else obj["$ref"]

        if ref not in ctx.refs:
            schema = resolve(obj, ctx)
            if isinstance(schema, dict) and ignore_discriminator:
                schema = copy.deepcopy(schema)
                schema.pop("discriminator", None)
            name = (isinstance(schema, dict) and schema.get("title")) or get_ref_name(ref)
            identifier = to_identifier(name, True)

            # Named enums are referenced directly, without an alias
            if ctx.config.effective_enum_style != EnumStyle.UNION and is_named_enum_schema(
                schema, name
            ):
                return self.get_type_from_schema(schema, name)

            alias = ctx.get_unique_alias(identifier)
            logger.debug("Allocated alias %s for %s", alias, ref)
            variants = RefVariants(base=reference_type(alias))
            ctx.refs[ref] = variants

            # The target path (not the Base key) identifies the schema in discriminator mappings
            target = obj["$ref"]
            base_type = self.get_type_from_schema(schema, ref_path=target)
            ctx.aliases.append(TypeAliasDecl(name=alias, type_ref=base_type))

            only_modes = check_visibility(schema, ctx)
            if only_modes.read_only:
                self._emit_variant(variants, schema, name, VisibilityMode.READ_ONLY, target)
            if only_modes.write_only:
                self._emit_variant(variants, schema, name, VisibilityMode.WRITE_ONLY, target)

        return ctx.refs[ref].get(mode)

    def _emit_variant(
        self, variants: RefVariants, schema: Any, name: str, mode: VisibilityMode, target: str
    ) -> None:
        alias = self.ctx.get_unique_alias(to_identifier(name, True, mode))
        # Registered before synthesis so recursive schemas refer to the variant
        if mode == VisibilityMode.READ_ONLY:
            variants.read_only = reference_type(alias)
        else:
            variants.write_only = reference_type(alias)
        type_ref = self.get_type_from_schema(schema, mode=mode, ref_path=target)
        self.ctx.aliases.append(TypeAliasDecl(name=alias, type_ref=type_ref))

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------

    def _get_base_type(
        self, schema: Any, name: str | None, mode: VisibilityMode, ref_path: str | None
    ) -> TypeRef:
        match classify_schema(schema):
            case SchemaKind.EMPTY:
                return self.get_empty_schema_type()
            case SchemaKind.REFERENCE:
                return self.get_ref_alias(schema, mode)
            case SchemaKind.BOOLEAN:
                return self.get_empty_schema_type() if schema else keyword_type("never")
            case SchemaKind.ONE_OF:
                parent = {k: v for k, v in schema.items() if k != "oneOf"}
                variants = [_merge_variant(parent, variant) for variant in schema["oneOf"]]
                return self.get_union_type(variants, schema.get("discriminator"), mode)
            case SchemaKind.ANY_OF:
                return self.get_union_type(schema["anyOf"], None, mode)
            case SchemaKind.DISCRIMINATOR_MAPPING:
                mapping = schema["discriminator"].get("mapping") or {}
                return self.get_union_type([{"$ref": ref} for ref in mapping.values()], None, mode)
            case SchemaKind.ALL_OF:
                return self._get_intersection_type(schema, mode, ref_path)
            case SchemaKind.TYPE_ARRAY:
                return self._get_type_array_type(schema, name, mode)
            case SchemaKind.ITEMS:
                items = schema["items"]
                # Inline item enums are named after the property holding the array
                item_name = (
                    name
                    if isinstance(items, dict) and not is_reference(items) and "enum" in items
                    else None
                )
                return array_type(self.get_type_from_schema(items, item_name, mode))
            case SchemaKind.PREFIX_ITEMS:
                return tuple_type(
                    [self.get_type_from_schema(item, mode=mode) for item in schema["prefixItems"]]
                )
            case SchemaKind.OBJECT:
                return self.get_type_from_properties(
                    schema.get("properties") or {},
                    schema.get("required"),
                    schema.get("additionalProperties"),
                    mode,
                )
            case SchemaKind.ENUM:
                if self.ctx.config.effective_enum_style != EnumStyle.UNION and is_named_enum_schema(
                    schema, name
                ):
                    return get_enum_type(schema, name, self.ctx)
                return get_type_from_enum(schema["enum"])
            case SchemaKind.BINARY:
                return reference_type("Blob")
            case SchemaKind.CONST:
                return get_type_from_enum([schema["const"]])
            case SchemaKind.PRIMITIVE:
                return self._get_primitive_type(schema["type"])

    def _get_primitive_type(self, type_name: Any) -> TypeRef:
        if type_name in KEYWORD_TYPES:
            return keyword_type(KEYWORD_TYPES[type_name])
        return self.get_empty_schema_type()

    def _get_type_array_type(self, schema: dict, name: str | None, mode: VisibilityMode) -> TypeRef:
        types = []
        for type_name in schema["type"]:
            sub_schema = {k: v for k, v in schema.items() if k != "nullable"}
            sub_schema["type"] = type_name
            if type_name != "array":
                for key in _ARRAY_KEYWORDS:
                    sub_schema.pop(key, None)
            if type_name != "object":
                for key in _OBJECT_KEYWORDS:
                    sub_schema.pop(key, None)
            types.append(self.get_type_from_schema(sub_schema, name, mode))
        return union_type(types)

    def _get_intersection_type(
        self, schema: dict, mode: VisibilityMode, ref_path: str | None
    ) -> TypeRef:
        types = []
        required = schema.get("required")
        for child in schema["allOf"]:
            if is_reference(child) and child["$ref"] in self.ctx.discriminating_schemas:
                parent = resolve(child, self.ctx)
                discriminator = parent["discriminator"]
                property_name = discriminator.get("propertyName")
                if not property_name:
                    raise DiscriminatorError(
                        f"Discriminator of {child['$ref']} requires a propertyName"
                    )
                matches = [
                    value
                    for value, target in (discriminator.get("mapping") or {}).items()
                    if ref_path is not None and target == ref_path
                ]
                if matches:
                    types.append(
                        object_type(
                            [
                                PropertySignature(
                                    property_name,
                                    self.get_discriminator_type(child, property_name, matches),
                                )
                            ]
                        )
                    )
                types.append(self.get_ref_alias(child, mode, ignore_discriminator=True))
            else:
                if required and isinstance(child, dict) and not is_reference(child):
                    merged_required = [*(child.get("required") or []), *required]
                    child = {**child, "required": list(dict.fromkeys(merged_required))}
                types.append(self.get_type_from_schema(child, mode=mode))

        if classify_schema(_own_object_keywords(schema)) == SchemaKind.OBJECT:
            types.append(
                self.get_type_from_properties(
                    schema.get("properties") or {},
                    required,
                    schema.get("additionalProperties"),
                    mode,
                )
            )
        return intersection_type(types)

    # ------------------------------------------------------------------
    # Unions
    # ------------------------------------------------------------------

    def get_union_type(
        self, variants: list[Any], discriminator: dict | None, mode: VisibilityMode
    ) -> TypeRef:
        """Tagged union when a discriminator is given, untagged union otherwise."""
        if not discriminator:
            return union_type([self.get_type_from_schema(v, mode=mode) for v in variants])

        property_name = discriminator.get("propertyName")
        if property_name is None:
            raise DiscriminatorError("Discriminators require a propertyName")

        mapping = discriminator.get("mapping") or {}
        mapped = {get_ref_basename(ref) for ref in mapping.values()}
        arms: list[tuple[str, dict]] = [(value, {"$ref": ref}) for value, ref in mapping.items()]

        for variant in variants:
            if not is_reference(variant):
                raise DiscriminatorError(
                    "Discriminators require references, not inline schemas"
                    f" (property {property_name!r})"
                )
            basename = get_ref_basename(variant["$ref"])
            if basename in mapped:
                continue
            resolved = resolve(variant, self.ctx)
            prop = None
            if isinstance(resolved, dict):
                prop = (resolved.get("properties") or {}).get(property_name)
            tag = prop["enum"][0] if isinstance(prop, dict) and prop.get("enum") else None
            arms.append((tag or basename, variant))

        return union_type(
            [
                intersection_type(
                    [
                        object_type(
                            [
                                PropertySignature(
                                    property_name,
                                    self.get_discriminator_type(variant, property_name, [value]),
                                )
                            ]
                        ),
                        self.get_type_from_schema(variant, mode=mode),
                    ]
                )
                for value, variant in arms
            ]
        )

    def get_discriminator_type(
        self, variant: Any, property_name: str, matches: list[str]
    ) -> TypeRef:
        """
        Type of the tag property for the given discriminator values.

        With a named enum style, and when the variant declares the
        discriminator property as an enum, the tag references the enum members.
        """
        style = self.ctx.config.effective_enum_style
        if style == EnumStyle.UNION:
            return get_type_from_enum(matches)

        schema = resolve(variant, self.ctx)
        prop_schema = None
        if isinstance(schema, dict):
            prop_schema = (schema.get("properties") or {}).get(property_name)
            if prop_schema is None:
                for parent in schema.get("allOf") or []:
                    parent = resolve(parent, self.ctx)
                    parent_props = parent.get("properties") if isinstance(parent, dict) else None
                    if parent_props and parent_props.get(property_name):
                        prop_schema = parent_props[property_name]
                        break
        prop_schema = resolve(prop_schema, self.ctx)

        if not is_named_enum_schema(prop_schema, property_name):
            return get_type_from_enum(matches)

        identity = get_enum_identity(prop_schema, property_name, self.ctx)
        return union_type(
            [
                qualified_type(
                    identity.name,
                    identity.member_names.get(value) or to_identifier(value, True),
                    is_type_query=style == EnumStyle.AS_CONST,
                )
                for value in matches
            ]
        )

    # ------------------------------------------------------------------
    # Objects
    # ------------------------------------------------------------------

    def get_type_from_properties(
        self,
        props: dict[str, Any],
        required: list[str] | None,
        additional_properties: Any,
        mode: VisibilityMode,
    ) -> TypeRef:
        """Object literal type for the properties visible in `mode`."""
        members = []
        for prop_name, prop_schema in props.items():
            only_modes = check_visibility(prop_schema, self.ctx, resolve_refs=False)
            match mode:
                case VisibilityMode.READ_ONLY:
                    keep = only_modes.read_only or not only_modes.write_only
                case VisibilityMode.WRITE_ONLY:
                    keep = only_modes.write_only or not only_modes.read_only
                case _:
                    keep = not only_modes.read_only and not only_modes.write_only
            if not keep:
                continue

            is_required = bool(required) and prop_name in required
            type_ref = self.get_type_from_schema(prop_schema, prop_name, mode)
            if not is_required and self.ctx.config.union_undefined:
                type_ref = union_type([type_ref, keyword_type("undefined")])

            comment = None
            if isinstance(prop_schema, dict) and prop_schema.get("description"):
                comment = prop_schema["description"].replace("*/", "*\\/")

            members.append(PropertySignature(prop_name, type_ref, not is_required, comment))

        index_signature = None
        if additional_properties not in (None, False):
            if additional_properties is True:
                index_signature = self.get_empty_schema_type()
            else:
                index_signature = self.get_type_from_schema(additional_properties, mode=mode)
        return object_type(members, index_signature)
