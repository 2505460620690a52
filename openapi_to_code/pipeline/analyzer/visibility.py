"""
Visibility classification of schemas.

Tells whether a schema, or anything reachable from it, carries
`readOnly` / `writeOnly` members. The answer decides whether a referenced
schema needs separate response ("Read") and request ("Write") variants.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any

from .reference_resolver import is_reference, resolve

if TYPE_CHECKING:
    from ..context import GenerationContext


class VisibilityMode(Enum):
    """Which view of a schema is being synthesized."""

    BASE = "base"  # Members with neither flag
    READ_ONLY = "readOnly"  # Response view: readOnly members included
    WRITE_ONLY = "writeOnly"  # Request view: writeOnly members included


@dataclass(frozen=True)
class OnlyModes:
    read_only: bool = False
    write_only: bool = False


NO_MODES = OnlyModes()


def check_visibility(schema: Any, ctx: GenerationContext, resolve_refs: bool = True) -> OnlyModes:
    """
    Check whether readOnly/writeOnly members are present in `schema`.

    Args:
        schema: Any schema node
        ctx: Generation context; its `refs_only_mode` memoizes per-$ref results
        resolve_refs: When False, references are not followed, so only
            directly declared flags count

    Returns:
        The flags found. Cycles terminate through a per-call visiting set.
    """
    if ctx.config.merge_read_write_only:
        return NO_MODES
    return _check(schema, ctx, resolve_refs, set())


def _check(schema: Any, ctx: GenerationContext, resolve_refs: bool, history: set[str]) -> OnlyModes:
    if is_reference(schema):
        ref = schema["$ref"]
        if not resolve_refs or ref in history:
            return NO_MODES

        cached = ctx.refs_only_mode.get(ref)
        if cached is not None:
            return cached

        history.add(ref)
        result = _check(resolve(schema, ctx), ctx, resolve_refs, history)
        history.discard(ref)

        ctx.refs_only_mode[ref] = result
        return result

    if not isinstance(schema, dict):
        return NO_MODES

    read_only = bool(schema.get("readOnly", False))
    write_only = bool(schema.get("writeOnly", False))

    if schema.get("items"):
        sub_schemas = [schema["items"]]
    else:
        sub_schemas = [
            *(schema.get("properties") or {}).values(),
            *(schema.get("allOf") or []),
            *(schema.get("anyOf") or []),
            *(schema.get("oneOf") or []),
        ]

    for sub_schema in sub_schemas:
        # Flags never flip back to False
        if read_only and write_only:
            break
        result = _check(sub_schema, ctx, resolve_refs, history)
        read_only = read_only or result.read_only
        write_only = write_only or result.write_only

    return OnlyModes(read_only, write_only)
