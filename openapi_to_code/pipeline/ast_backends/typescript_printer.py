"""
TypeScript printer.

Follows the layout of the usual generated clients:
- 2-space indentation
- Object types on multiple lines, one member per line
- Imports grouped, other statements separated by a blank line
- Doc comments (`/** ... */`) for descriptions and `@deprecated` markers
"""

from __future__ import annotations

import json
import re
from typing import Any

from ..analyzer.ir_nodes import (
    ArrowFunction,
    Call,
    Declaration,
    EnumDecl,
    Expression,
    FunctionDecl,
    Identifier,
    ImportDecl,
    Literal,
    ObjectLiteral,
    Parameter,
    PropertyAccess,
    PropertyAssignment,
    RawStatement,
    SourceFile,
    Spread,
    StringLiteral,
    TemplateString,
    TypeAliasDecl,
    TypeKind,
    TypeRef,
    VariableDecl,
)
from .base import AstPrinter

_PROPERTY_NAME_PATTERN = re.compile(r"^[A-Za-z_$][A-Za-z0-9_$]*$")

# Declaration class -> template name
_TEMPLATES = {
    TypeAliasDecl: "type_alias",
    EnumDecl: "enum",
    FunctionDecl: "function",
    ImportDecl: "import",
    VariableDecl: "variable",
    RawStatement: "raw",
}


def format_literal(value: Any) -> str:
    """A JSON-like value as TypeScript literal text."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (int, float)):
        return str(value)
    return json.dumps(value, ensure_ascii=False)


def format_property_name(name: str) -> str:
    if _PROPERTY_NAME_PATTERN.match(name):
        return name
    return json.dumps(name, ensure_ascii=False)


def escape_template_literal(text: str) -> str:
    return text.replace("\\", "\\\\").replace("`", "\\`").replace("${", "\\${")


class TypeScriptPrinter(AstPrinter):
    """Prints declaration lists as TypeScript source."""

    TEMPLATE_LANG = "typescript"
    FILE_EXTENSION = "ts"
    INDENT = "  "

    def _setup_templates(self) -> None:
        super()._setup_templates()
        self.jinja_env.filters["render_params"] = self.render_params
        self.jinja_env.filters["doc_comment"] = self.doc_comment
        self.jinja_env.filters["literal"] = format_literal
        self.jinja_env.filters["property_name"] = format_property_name
        self.jinja_env.filters["string_literal"] = lambda s: json.dumps(s, ensure_ascii=False)

    def print_file(self, source_file: SourceFile) -> str:
        statements = []
        for i, statement in enumerate(source_file.statements):
            text = self.print_statement(statement)
            following = source_file.statements[i + 1 : i + 2]
            grouped = (
                isinstance(statement, ImportDecl)
                and bool(following)
                and isinstance(following[0], ImportDecl)
            )
            statements.append((text, "" if grouped or not following else "\n"))
        return self.get_template("source_file").render(statements=statements)

    def print_statement(self, statement: Declaration) -> str:
        template = _TEMPLATES.get(type(statement))
        if template is None:
            raise TypeError(f"Cannot print statement of type {type(statement).__name__}")
        return self.get_template(template).render(decl=statement).rstrip("\n")

    def doc_comment(self, node: Any, indent: int = 0) -> str:
        """`/** ... */` block for the comment (and deprecation) of a node, or ''."""
        comment = getattr(node, "comment", None)
        deprecated = getattr(node, "deprecated", None)
        if not comment and deprecated is None:
            return ""

        pad = self.INDENT * indent
        lines = comment.replace("*/", "*\\/").split("\n") if comment else []
        if len(lines) == 1 and deprecated is None:
            return f"{pad}/** {lines[0]} */\n"

        text = f"{pad}/**\n"
        for line in lines:
            line = line.rstrip()
            text += f"{pad} * {line}\n" if line else f"{pad} *\n"
        if deprecated is not None:
            text += f"{pad} * @deprecated {deprecated}".rstrip() + "\n"
        return text + f"{pad} */\n"

    # ------------------------------------------------------------------
    # Types
    # ------------------------------------------------------------------

    def render_type(self, type_ref: TypeRef | None, indent: int = 0) -> str:
        if type_ref is None:
            return "any"

        match type_ref.kind:
            case TypeKind.KEYWORD:
                return type_ref.name
            case TypeKind.REFERENCE:
                if type_ref.type_args:
                    args = ", ".join(self.render_type(t, indent) for t in type_ref.type_args)
                    return f"{type_ref.name}<{args}>"
                return type_ref.name
            case TypeKind.LITERAL:
                return format_literal(type_ref.literal_value)
            case TypeKind.ARRAY:
                element = type_ref.type_args[0]
                text = self.render_type(element, indent)
                if element.kind in (TypeKind.UNION, TypeKind.INTERSECTION) or (
                    element.kind == TypeKind.QUALIFIED and element.is_type_query
                ):
                    text = f"({text})"
                return f"{text}[]"
            case TypeKind.TUPLE:
                elements = ", ".join(self.render_type(t, indent) for t in type_ref.type_args)
                return f"[{elements}]"
            case TypeKind.UNION:
                if not type_ref.type_args:
                    return "never"
                return " | ".join(
                    self._render_member(t, indent, TypeKind.INTERSECTION)
                    for t in type_ref.type_args
                )
            case TypeKind.INTERSECTION:
                if not type_ref.type_args:
                    return "unknown"
                return " & ".join(
                    self._render_member(t, indent, TypeKind.UNION) for t in type_ref.type_args
                )
            case TypeKind.OBJECT:
                return self._render_object_type(type_ref, indent)
            case TypeKind.QUALIFIED:
                text = f"{type_ref.name}.{type_ref.member}"
                return f"typeof {text}" if type_ref.is_type_query else text
        raise TypeError(f"Cannot print type of kind {type_ref.kind}")

    def _render_member(self, type_ref: TypeRef, indent: int, parenthesized: TypeKind) -> str:
        text = self.render_type(type_ref, indent)
        return f"({text})" if type_ref.kind == parenthesized else text

    def _render_object_type(self, type_ref: TypeRef, indent: int) -> str:
        if not type_ref.members and type_ref.index_signature is None:
            return "{}"

        pad = self.INDENT * (indent + 1)
        lines = ["{"]
        for member in type_ref.members:
            if member.comment:
                lines.append(self.doc_comment(member, indent + 1).rstrip("\n"))
            optional = "?" if member.optional else ""
            member_type = self.render_type(member.type_ref, indent + 1)
            lines.append(f"{pad}{format_property_name(member.name)}{optional}: {member_type};")
        if type_ref.index_signature is not None:
            index_type = self.render_type(type_ref.index_signature, indent + 1)
            lines.append(f"{pad}[key: string]: {index_type};")
        lines.append(self.INDENT * indent + "}")
        return "\n".join(lines)

    # ------------------------------------------------------------------
    # Expressions
    # ------------------------------------------------------------------

    def render_expression(self, expression: Expression | None, indent: int = 0) -> str:
        match expression:
            case None:
                return "undefined"
            case Identifier(name=name):
                return name
            case StringLiteral(value=value):
                return json.dumps(value, ensure_ascii=False)
            case Literal(value=value):
                return format_literal(value)
            case Call():
                callee = self.render_expression(expression.callee, indent)
                if expression.type_args:
                    type_args = ", ".join(self.render_type(t, indent) for t in expression.type_args)
                    callee = f"{callee}<{type_args}>"
                args = ", ".join(self.render_expression(a, indent) for a in expression.args)
                return f"{callee}({args})"
            case PropertyAccess():
                target = self.render_expression(expression.target, indent)
                dot = "?." if expression.optional_chain else "."
                return f"{target}{dot}{expression.name}"
            case ObjectLiteral():
                return self._render_object_literal(expression, indent)
            case TemplateString():
                text = escape_template_literal(expression.head)
                for span in expression.spans:
                    text += "${" + self.render_expression(span.expression, indent) + "}"
                    text += escape_template_literal(span.literal)
                return f"`{text}`"
            case ArrowFunction():
                params = self.render_params(expression.params, indent)
                body = self.render_expression(expression.body, indent)
                if isinstance(expression.body, ObjectLiteral):
                    body = f"({body})"
                return f"({params}) => {body}"
        raise TypeError(f"Cannot print expression of type {type(expression).__name__}")

    def _render_object_literal(self, literal: ObjectLiteral, indent: int) -> str:
        if not literal.properties:
            return "{}"

        inner = indent + 1 if literal.multiline else indent
        properties = []
        for prop in literal.properties:
            if isinstance(prop, Spread):
                properties.append("..." + self.render_expression(prop.expression, inner))
            elif isinstance(prop, PropertyAssignment):
                name = format_property_name(prop.name)
                if isinstance(prop.value, Identifier) and prop.value.name == prop.name:
                    properties.append(name)
                else:
                    properties.append(f"{name}: {self.render_expression(prop.value, inner)}")
            else:
                raise TypeError(f"Cannot print object member of type {type(prop).__name__}")

        if not literal.multiline:
            return "{ " + ", ".join(properties) + " }"
        pad = self.INDENT * inner
        body = ",\n".join(pad + p for p in properties)
        return "{\n" + body + "\n" + self.INDENT * indent + "}"

    def render_params(self, params: list[Parameter], indent: int = 0) -> str:
        return ", ".join(self.render_param(p, indent) for p in params)

    def render_param(self, param: Parameter, indent: int = 0) -> str:
        if param.binding is not None:
            elements = []
            for element in param.binding:
                text = element.name
                if element.initializer is not None:
                    text += " = " + self.render_expression(element.initializer, indent)
                elements.append(text)
            text = "{ " + ", ".join(elements) + " }" if elements else "{}"
        else:
            text = param.name

        if param.optional and param.initializer is None:
            text += "?"
        if param.type_ref is not None:
            text += ": " + self.render_type(param.type_ref, indent)
        if param.initializer is not None:
            text += " = " + self.render_expression(param.initializer, indent)
        return text
