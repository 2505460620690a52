"""
Tests for the TypeScript printer: type rendering, expressions and the
declaration templates.
"""

from unittest import TestCase

import pytest

from openapi_to_code.pipeline.analyzer.ir_nodes import (
    ArrowFunction,
    Declaration,
    EnumDecl,
    EnumMember,
    FunctionDecl,
    Identifier,
    ImportDecl,
    Literal,
    ObjectLiteral,
    Parameter,
    PropertyAssignment,
    PropertySignature,
    RawStatement,
    SourceFile,
    TemplateSpan,
    TemplateString,
    TypeAliasDecl,
    VariableDecl,
    array_type,
    intersection_type,
    keyword_type,
    literal_type,
    object_type,
    qualified_type,
    reference_type,
    union_type,
)
from openapi_to_code.pipeline.ast_backends import TypeScriptPrinter
from openapi_to_code.pipeline.ast_backends.typescript_printer import (
    format_literal,
    format_property_name,
)

STRING = keyword_type("string")
NUMBER = keyword_type("number")


class TestTypes(TestCase):
    def setUp(self):
        self.printer = TypeScriptPrinter()

    def render(self, type_ref):
        return self.printer.render_type(type_ref)

    def test_arrays_parenthesize_compound_elements(self):
        self.assertEqual(self.render(array_type(STRING)), "string[]")
        self.assertEqual(
            self.render(array_type(union_type([STRING, NUMBER]))), "(string | number)[]"
        )
        self.assertEqual(
            self.render(array_type(qualified_type("Kind", "A", is_type_query=True))),
            "(typeof Kind.A)[]",
        )

    def test_empty_combinations(self):
        self.assertEqual(self.render(union_type([])), "never")
        self.assertEqual(self.render(intersection_type([])), "unknown")

    def test_nested_combinations(self):
        a, b, c = reference_type("A"), reference_type("B"), reference_type("C")
        self.assertEqual(self.render(union_type([intersection_type([a, b]), c])), "(A & B) | C")
        self.assertEqual(self.render(intersection_type([union_type([a, b]), c])), "(A | B) & C")

    def test_generic_references(self):
        self.assertEqual(
            self.render(reference_type("Oazapfts.Defaults", [reference_type("Headers")])),
            "Oazapfts.Defaults<Headers>",
        )

    def test_object_types(self):
        type_ref = object_type(
            [
                PropertySignature("id", NUMBER),
                PropertySignature("display-name", STRING, True, "The name"),
                PropertySignature("child", object_type([PropertySignature("x", STRING)]), True),
            ],
            keyword_type("any"),
        )
        self.assertEqual(
            self.render(type_ref),
            "{\n"
            "  id: number;\n"
            "  /** The name */\n"
            '  "display-name"?: string;\n'
            "  child?: {\n"
            "    x: string;\n"
            "  };\n"
            "  [key: string]: any;\n"
            "}",
        )
        self.assertEqual(self.render(object_type([])), "{}")

    def test_literals_and_qualified_names(self):
        self.assertEqual(self.render(literal_type("a")), '"a"')
        self.assertEqual(self.render(literal_type(False)), "false")
        self.assertEqual(self.render(qualified_type("Kind", "A")), "Kind.A")


class TestDeclarations(TestCase):
    def setUp(self):
        self.printer = TypeScriptPrinter()

    def print(self, statement):
        return self.printer.print_statement(statement)

    def test_type_alias(self):
        decl = TypeAliasDecl(name="Id", type_ref=NUMBER, comment="Identifier")
        self.assertEqual(self.print(decl), "/** Identifier */\nexport type Id = number;")

    def test_enum(self):
        decl = EnumDecl(
            name="Status", members=[EnumMember("Available", "available"), EnumMember("One", 1)]
        )
        self.assertEqual(
            self.print(decl),
            'export enum Status {\n  Available = "available",\n  One = 1,\n}',
        )

    def test_as_const_enum(self):
        decl = EnumDecl(name="Kind", members=[EnumMember("A", "a")], style="as-const")
        self.assertEqual(
            self.print(decl),
            "export const Kind = {\n"
            '  A: "a",\n'
            "} as const;\n"
            "export type Kind = (typeof Kind)[keyof typeof Kind];",
        )

    def test_imports(self):
        cases = [
            (
                ImportDecl(name="@oazapfts/runtime", namespace="Oazapfts"),
                'import * as Oazapfts from "@oazapfts/runtime";',
            ),
            (
                ImportDecl(name="lib", default="lib", names=["a", "b"]),
                'import lib, { a, b } from "lib";',
            ),
            (ImportDecl(name="lib", default="lib"), 'import lib from "lib";'),
            (ImportDecl(name="lib", names=["a"]), 'import { a } from "lib";'),
            (ImportDecl(name="polyfill"), 'import "polyfill";'),
        ]
        for decl, expected in cases:
            with self.subTest(expected=expected):
                self.assertEqual(self.print(decl), expected)

    def test_deprecated_function(self):
        decl = FunctionDecl(
            name="getPets",
            params=[
                Parameter("opts", type_ref=reference_type("Oazapfts.RequestOpts"), optional=True)
            ],
            body=Identifier("result"),
            comment="List pets",
            deprecated="Use `listPets` instead.",
        )
        self.assertEqual(
            self.print(decl),
            "/**\n"
            " * List pets\n"
            " * @deprecated Use `listPets` instead.\n"
            " */\n"
            "export function getPets(opts?: Oazapfts.RequestOpts) {\n"
            "  return result;\n"
            "}",
        )

    def test_multiline_comment(self):
        decl = VariableDecl(
            name="x", exported=False, initializer=Literal(1), comment="First\n\nThird */"
        )
        self.assertEqual(
            self.print(decl), "/**\n * First\n *\n * Third *\\/\n */\nconst x = 1;"
        )

    def test_function_body_is_indented(self):
        decl = FunctionDecl(
            name="f",
            body=ObjectLiteral([PropertyAssignment("a", Literal(1))], multiline=True),
        )
        self.assertEqual(self.print(decl), "export function f() {\n  return {\n    a: 1\n  };\n}")

    def test_unknown_statement(self):
        with self.assertRaises(TypeError):
            self.print(Declaration(name="x"))


class TestExpressions(TestCase):
    def setUp(self):
        self.printer = TypeScriptPrinter()

    def render(self, expression):
        return self.printer.render_expression(expression)

    def test_object_literals(self):
        literal = ObjectLiteral(
            [PropertyAssignment("id", Identifier("id")), PropertyAssignment("x-key", Literal(None))]
        )
        self.assertEqual(self.render(literal), '{ id, "x-key": null }')
        self.assertEqual(self.render(ObjectLiteral()), "{}")

    def test_template_strings_are_escaped(self):
        template = TemplateString("/a`b${c}", [TemplateSpan(Identifier("d"), "\\e")])
        self.assertEqual(self.render(template), "`/a\\`b\\${c}${d}\\\\e`")

    def test_arrow_function_with_object_body(self):
        body = ObjectLiteral([PropertyAssignment("x", Identifier("x"))])
        fn = ArrowFunction([Parameter("x")], body)
        self.assertEqual(self.render(fn), "(x) => ({ x })")


class TestSourceFile(TestCase):
    def test_imports_are_grouped(self):
        source = SourceFile(
            [
                ImportDecl(name="a", namespace="A"),
                ImportDecl(name="b", namespace="B"),
                VariableDecl(name="x", exported=False, initializer=Literal(1)),
                RawStatement(text="let y;"),
            ]
        )
        self.assertEqual(
            TypeScriptPrinter().print_file(source),
            'import * as A from "a";\n'
            'import * as B from "b";\n'
            "\n"
            "const x = 1;\n"
            "\n"
            "let y;\n",
        )

    def test_banner_comment(self):
        source = SourceFile([RawStatement(text="let y;", comment="Banner")])
        self.assertEqual(TypeScriptPrinter().print_file(source), "/** Banner */\nlet y;\n")


@pytest.mark.parametrize(
    "value,expected",
    [
        (None, "null"),
        (True, "true"),
        (2.0, "2"),
        (2.5, "2.5"),
        (-3, "-3"),
        ("é\"", '"é\\""'),
    ],
)
def test_format_literal(value, expected):
    assert format_literal(value) == expected


@pytest.mark.parametrize(
    "name,expected",
    [("name", "name"), ("$ref", "$ref"), ("x-id", '"x-id"'), ("1st", '"1st"')],
)
def test_format_property_name(name, expected):
    assert format_property_name(name) == expected
