"""
Reference resolver for $ref resolution.

Resolves local `#/...` references against the bundled document held by the
generation context. Lookups are plain walks over the document; nothing is
cached.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, Any
from urllib.parse import unquote

from ..errors import UnresolvedReferenceError

if TYPE_CHECKING:
    from ..context import GenerationContext

_MISSING = object()


def is_reference(obj: Any) -> bool:
    """Return True for a `{"$ref": ...}` object."""
    return isinstance(obj, dict) and isinstance(obj.get("$ref"), str)


def ref_path_to_property_path(ref: str) -> list[str]:
    """
    Convert a local reference path into the list of property names it walks.

    Args:
        ref: A reference such as `#/components/schemas/Pet`

    Returns:
        The unescaped segments, e.g. `["components", "schemas", "Pet"]`

    Raises:
        UnresolvedReferenceError: For references that are not local
    """
    if not ref.startswith("#/"):
        raise UnresolvedReferenceError(
            ref,
            message=f"External refs are not supported ({ref}). Bundle the document first.",
        )
    return [unquote(s.replace("~1", "/").replace("~0", "~")) for s in ref[2:].split("/")]


def _get_path(document: Any, path: list[str]) -> Any:
    node = document
    for segment in path:
        if isinstance(node, dict):
            if segment not in node:
                return _MISSING
            node = node[segment]
        elif isinstance(node, list) and segment.isdigit() and int(segment) < len(node):
            node = node[int(segment)]
        else:
            return _MISSING
    return node


def resolve(obj: Any, ctx: GenerationContext) -> Any:
    """Follow `obj` if it is a reference, otherwise return it unchanged."""
    if not is_reference(obj):
        return obj
    ref = obj["$ref"]
    path = ref_path_to_property_path(ref)
    resolved = _get_path(ctx.spec, path)
    if resolved is _MISSING:
        raise UnresolvedReferenceError(ref, path, f"Can't find {'/'.join(path)} (from {ref})")
    return resolved


def resolve_array(ctx: GenerationContext, array: list | None) -> list:
    return [resolve(el, ctx) for el in array] if array else []


def get_ref_basename(ref: str) -> str:
    """Get the last path component of the given ref."""
    return re.sub(r".+/", "", ref)


def get_ref_name(ref: str) -> str:
    """
    Name usable as a basis for a type alias.

    This is the basename, unless the basename starts with a digit, in which
    case the whole path is joined with underscores.
    """
    base = get_ref_basename(ref)
    if re.match(r"\d", base):
        return "_".join(ref_path_to_property_path(ref))
    return base


def get_reference_name(obj: Any) -> str | None:
    if is_reference(obj):
        return get_ref_basename(obj["$ref"])
    return None


def find_available_ref(ref: str, ctx: GenerationContext) -> str:
    """Probe `ref`, `ref2`, `ref3`, ... and return the first path not in the document."""

    def available(candidate: str) -> bool:
        try:
            resolve({"$ref": candidate}, ctx)
        except UnresolvedReferenceError:
            return True
        return False

    if available(ref):
        return ref
    i = 2
    while not available(f"{ref}{i}"):
        i += 1
    return f"{ref}{i}"
