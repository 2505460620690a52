"""
IR (Intermediate Representation) node definitions.

These nodes describe the generated program: type descriptions, the few
expressions needed to build request calls, and top-level declarations.
They are handed to a printer, which turns them into source text.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class TypeKind(Enum):
    """Kind of type in the IR."""

    KEYWORD = "keyword"  # any, unknown, string, number, boolean, null, undefined, void, never
    REFERENCE = "reference"  # A named alias, enum or builtin (e.g. Blob)
    LITERAL = "literal"  # "a", 1, true
    ARRAY = "array"  # T[]
    TUPLE = "tuple"  # [T, U]
    UNION = "union"  # T | U
    INTERSECTION = "intersection"  # T & U
    OBJECT = "object"  # { a: T; [key: string]: U }
    QUALIFIED = "qualified"  # Enum.Member or typeof Enum.Member


@dataclass
class TypeRef:
    """A type description.

    TypeRefs returned for a `$ref` are shared: the same object is handed out
    every time that reference is synthesized in the same visibility mode.
    """

    kind: TypeKind = TypeKind.KEYWORD
    name: str = ""  # Keyword name, alias name, or enum name for QUALIFIED

    # Container members: array element, tuple/union/intersection members,
    # or generic arguments of a REFERENCE
    type_args: list[TypeRef] = field(default_factory=list)

    # For literal types; the kind keeps `true` and `1` apart when comparing
    literal_value: Any = None
    literal_kind: str = ""

    # For object types
    members: list[PropertySignature] = field(default_factory=list)
    index_signature: TypeRef | None = None

    # For qualified enum member references
    member: str = ""
    is_type_query: bool = False


@dataclass
class PropertySignature:
    """A member of an object type."""

    name: str = ""
    type_ref: TypeRef | None = None
    optional: bool = False
    comment: str | None = None


def keyword_type(name: str) -> TypeRef:
    return TypeRef(kind=TypeKind.KEYWORD, name=name)


def reference_type(name: str, type_args: list[TypeRef] | None = None) -> TypeRef:
    return TypeRef(kind=TypeKind.REFERENCE, name=name, type_args=type_args or [])


def literal_type(value: Any) -> TypeRef:
    if isinstance(value, bool):
        literal_kind = "boolean"
    elif isinstance(value, (int, float)):
        literal_kind = "number"
    elif value is None:
        literal_kind = "null"
    else:
        literal_kind = "string"
    return TypeRef(kind=TypeKind.LITERAL, literal_value=value, literal_kind=literal_kind)


def array_type(element: TypeRef) -> TypeRef:
    return TypeRef(kind=TypeKind.ARRAY, type_args=[element])


def tuple_type(elements: list[TypeRef]) -> TypeRef:
    return TypeRef(kind=TypeKind.TUPLE, type_args=elements)


def object_type(
    members: list[PropertySignature], index_signature: TypeRef | None = None
) -> TypeRef:
    return TypeRef(kind=TypeKind.OBJECT, members=members, index_signature=index_signature)


def qualified_type(enum_name: str, member: str, is_type_query: bool = False) -> TypeRef:
    return TypeRef(
        kind=TypeKind.QUALIFIED, name=enum_name, member=member, is_type_query=is_type_query
    )


def union_type(members: list[TypeRef]) -> TypeRef:
    """Create a union, collapsing structurally equal members.

    A single remaining member is returned unwrapped.
    """
    unique: list[TypeRef] = []
    for member in members:
        if member not in unique:
            unique.append(member)
    if len(unique) == 1:
        return unique[0]
    return TypeRef(kind=TypeKind.UNION, type_args=unique)


def intersection_type(members: list[TypeRef]) -> TypeRef:
    if len(members) == 1:
        return members[0]
    return TypeRef(kind=TypeKind.INTERSECTION, type_args=members)


def is_keyword(type_ref: TypeRef, name: str) -> bool:
    return type_ref.kind == TypeKind.KEYWORD and type_ref.name == name


# ---------------------------------------------------------------------------
# Expressions
# ---------------------------------------------------------------------------


@dataclass
class Expression:
    """Base class for expressions."""


@dataclass
class Identifier(Expression):
    name: str = ""


@dataclass
class StringLiteral(Expression):
    value: str = ""


@dataclass
class Literal(Expression):
    """A number, boolean or null literal."""

    value: Any = None


@dataclass
class Call(Expression):
    callee: Expression | None = None
    args: list[Expression] = field(default_factory=list)
    type_args: list[TypeRef] = field(default_factory=list)


@dataclass
class PropertyAccess(Expression):
    target: Expression | None = None
    name: str = ""
    optional_chain: bool = False  # target?.name


@dataclass
class PropertyAssignment:
    name: str = ""
    value: Expression | None = None


@dataclass
class Spread:
    expression: Expression | None = None


@dataclass
class ObjectLiteral(Expression):
    properties: list[PropertyAssignment | Spread] = field(default_factory=list)
    multiline: bool = False


@dataclass
class TemplateSpan:
    expression: Expression | None = None
    literal: str = ""


@dataclass
class TemplateString(Expression):
    head: str = ""
    spans: list[TemplateSpan] = field(default_factory=list)


@dataclass
class BindingElement:
    """One name of a destructuring pattern, optionally defaulted."""

    name: str = ""
    initializer: Expression | None = None


@dataclass
class Parameter:
    """A function parameter: a plain name or a destructured object."""

    name: str = ""
    binding: list[BindingElement] | None = None
    type_ref: TypeRef | None = None
    optional: bool = False
    initializer: Expression | None = None


@dataclass
class ArrowFunction(Expression):
    params: list[Parameter] = field(default_factory=list)
    body: Expression | None = None


def create_literal(value: Any) -> Expression:
    """Convert a plain Python value into an expression."""
    if isinstance(value, str):
        return StringLiteral(value)
    if isinstance(value, dict):
        return ObjectLiteral(
            [PropertyAssignment(str(k), create_literal(v)) for k, v in value.items()]
        )
    return Literal(value)


# ---------------------------------------------------------------------------
# Declarations
# ---------------------------------------------------------------------------


@dataclass
class Declaration:
    """Base class for top-level statements."""

    name: str = ""
    exported: bool = True
    comment: str | None = None  # Leading doc comment


@dataclass
class TypeAliasDecl(Declaration):
    type_ref: TypeRef | None = None


@dataclass
class EnumMember:
    name: str = ""
    value: Any = None


@dataclass
class EnumDecl(Declaration):
    members: list[EnumMember] = field(default_factory=list)
    style: str = "enum"  # "enum" or "as-const"


@dataclass
class FunctionDecl(Declaration):
    params: list[Parameter] = field(default_factory=list)
    body: Expression | None = None  # The returned expression
    return_type: TypeRef | None = None
    deprecated: str | None = None


@dataclass
class ImportDecl(Declaration):
    """An import statement; `name` holds the module specifier."""

    default: str | None = None
    names: list[str] = field(default_factory=list)
    namespace: str | None = None
    exported: bool = False


@dataclass
class VariableDecl(Declaration):
    type_ref: TypeRef | None = None
    initializer: Expression | None = None


@dataclass
class RawStatement(Declaration):
    """Verbatim source text, for plugins that need an escape hatch."""

    text: str = ""
    exported: bool = False


@dataclass
class SourceFile:
    """The complete declaration list handed to a printer."""

    statements: list[Declaration] = field(default_factory=list)
