"""
Name resolver for identifiers, type alias names and operation names.

Turns arbitrary document strings (schema names, property names, operation
ids, paths) into identifiers of the generated program and keeps them unique
for the duration of a run.
"""

from __future__ import annotations

import re

from .visibility import VisibilityMode

# Words the generated program cannot use as plain identifiers
TS_RESERVED_KEYWORDS = {
    "abstract",
    "accessor",
    "any",
    "as",
    "asserts",
    "assert",
    "async",
    "await",
    "bigint",
    "boolean",
    "break",
    "case",
    "catch",
    "class",
    "const",
    "constructor",
    "continue",
    "debugger",
    "declare",
    "default",
    "delete",
    "do",
    "else",
    "enum",
    "export",
    "extends",
    "false",
    "finally",
    "for",
    "from",
    "function",
    "get",
    "global",
    "if",
    "implements",
    "import",
    "in",
    "infer",
    "instanceof",
    "interface",
    "intrinsic",
    "is",
    "keyof",
    "let",
    "module",
    "namespace",
    "never",
    "new",
    "null",
    "number",
    "object",
    "of",
    "out",
    "override",
    "package",
    "private",
    "protected",
    "public",
    "readonly",
    "require",
    "return",
    "satisfies",
    "set",
    "static",
    "string",
    "super",
    "switch",
    "symbol",
    "this",
    "throw",
    "true",
    "try",
    "type",
    "typeof",
    "undefined",
    "unique",
    "unknown",
    "using",
    "var",
    "void",
    "while",
    "with",
    "yield",
}

_MODE_SUFFIXES = {
    VisibilityMode.BASE: "",
    VisibilityMode.READ_ONLY: "Read",
    VisibilityMode.WRITE_ONLY: "Write",
}

# Acronyms stay together ("HTTPServer" -> "HTTP", "Server")
_WORD_PATTERN = re.compile(r"[A-Z]+(?=[A-Z][a-z])|[A-Z]?[a-z]+|[A-Z]+|[0-9]+")
_IDENTIFIER_PATTERN = re.compile(r"^[A-Za-z_$][A-Za-z0-9_$]*$")
_NON_WORD = re.compile(r"[^\w\s]", re.ASCII)


def upper_first(s: str) -> str:
    return s[:1].upper() + s[1:]


def lower_first(s: str) -> str:
    return s[:1].lower() + s[1:]


def camel_case(s: str) -> str:
    """Split into words and join them as `firstWordSecondWord`."""
    words = _WORD_PATTERN.findall(s)
    if not words:
        return ""
    return words[0].lower() + "".join(w.capitalize() for w in words[1:])


def is_valid_identifier(s: str) -> bool:
    return bool(_IDENTIFIER_PATTERN.match(s)) and s not in TS_RESERVED_KEYWORDS


def to_identifier(s: str, upper: bool = False, mode: VisibilityMode | None = None) -> str:
    """
    Normalize any string into a valid identifier.

    Args:
        s: Source string
        upper: Upper-case the first character (type names)
        mode: Appends "Read"/"Write" for the visibility variants

    Returns:
        The camel-cased identifier, prefixed with `$` when it would
        otherwise be invalid (leading digit, reserved word, empty).
    """
    cc = camel_case(s) + (_MODE_SUFFIXES[mode] if mode else "")
    if upper:
        cc = upper_first(cc)
    if is_valid_identifier(cc):
        return cc
    return "$" + cc


# ---------------------------------------------------------------------------
# Operation names
# ---------------------------------------------------------------------------


def get_fallback_name(verb: str, path: str) -> str:
    """`GET /users/{id}` -> `getUsersById`."""
    path = re.sub(r"\{(.+?)\}", r"by \1", path, count=1)
    path = re.sub(r"\{(.+?)\}", r"and \1", path, count=1)
    return to_identifier(f"{verb} {path}")


def get_operation_identifier(operation_id: str | None) -> str | None:
    """Relaxed normalization: punctuation becomes word separators."""
    if not operation_id:
        return None
    camel_cased = camel_case(_NON_WORD.sub(" ", operation_id))
    camel_cased = lower_first(re.sub(r"^[^a-zA-Z_$]+", "", camel_cased))
    if camel_cased and is_valid_identifier(camel_cased):
        return camel_cased
    return None


def get_legacy_operation_identifier(operation_id: str | None) -> str | None:
    """Strict normalization: any punctuation rejects the id."""
    if not operation_id or _NON_WORD.search(operation_id):
        return None
    camel_cased = camel_case(operation_id)
    return camel_cased if is_valid_identifier(camel_cased) else None


def reserve_operation_name(name: str, operation_names: dict[str, int]) -> str:
    """Make `name` unique by appending a counter."""
    count = operation_names.get(name, 0)
    if count == 0:
        operation_names[name] = 1
        return name

    count += 1
    deduped = f"{name}{count}"
    while deduped in operation_names:
        count += 1
        deduped = f"{name}{count}"

    operation_names[name] = count
    operation_names[deduped] = 1
    return deduped


def get_operation_names(
    verb: str,
    path: str,
    operation_id: str | None = None,
    operation_names: dict[str, int] | None = None,
) -> tuple[str, str | None]:
    """
    Name the function generated for an operation.

    Returns:
        `(primary_name, legacy_name)`. `legacy_name` is set when the relaxed
        rules accept an operation id the strict rules reject; older output
        used the verb + path name for such operations, so callers emit a
        deprecated function under that name.
    """
    if operation_names is None:
        operation_names = {}
    fallback = get_fallback_name(verb, path)
    legacy_id = get_legacy_operation_identifier(operation_id)
    new_id = get_operation_identifier(operation_id)

    if new_id and not legacy_id:
        primary = reserve_operation_name(new_id, operation_names)
        return primary, reserve_operation_name(fallback, operation_names)

    return reserve_operation_name(new_id or fallback, operation_names), None
