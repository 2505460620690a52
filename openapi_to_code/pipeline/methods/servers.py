"""
Server list helpers: default base URL and the exported `servers` object.
"""

from __future__ import annotations

import re
from typing import Any

from ..analyzer.ir_nodes import (
    ArrowFunction,
    BindingElement,
    Identifier,
    ObjectLiteral,
    Parameter,
    PropertyAssignment,
    PropertySignature,
    StringLiteral,
    TemplateSpan,
    TemplateString,
    VariableDecl,
    create_literal,
    keyword_type,
    literal_type,
    object_type,
    reference_type,
    union_type,
)
from ..analyzer.name_resolver import camel_case


def _default_url(server: dict | None) -> str:
    if not server:
        return "/"
    url = server.get("url", "/")
    variables = server.get("variables")
    if not variables:
        return url

    def substitute(match: re.Match) -> str:
        variable = variables.get(match.group(1))
        return str(variable["default"]) if variable else match.group(0)

    return re.sub(r"\{(.+?)\}", substitute, url)


def default_base_url(servers: list[dict] | None) -> str:
    """URL of the first server with its variables set to their defaults, or `/`."""
    return _default_url(servers[0] if servers else None)


def _create_template(url: str) -> TemplateString:
    tokens = re.split(r"\{([\s\S]+?)\}", url)
    spans = [
        TemplateSpan(Identifier(tokens[i]), tokens[i + 1]) for i in range(1, len(tokens) - 1, 2)
    ]
    return TemplateString(tokens[0], spans)


def _create_server_function(url: str, variables: dict[str, Any]) -> ArrowFunction:
    binding = [
        BindingElement(name, create_literal(value.get("default")))
        for name, value in variables.items()
    ]
    members = [
        PropertySignature(
            name,
            union_type([literal_type(v) for v in value["enum"]])
            if value.get("enum")
            else union_type(
                [keyword_type("string"), keyword_type("number"), keyword_type("boolean")]
            ),
        )
        for name, value in variables.items()
    ]
    return ArrowFunction(
        [Parameter(binding=binding, type_ref=object_type(members))], _create_template(url)
    )


def _server_name(server: dict, index: int) -> str:
    description = server.get("description")
    if description:
        return camel_case(re.sub(r"\W+", " ", description, count=1))
    return f"server{index + 1}"


def generate_servers(servers: list[dict]) -> ObjectLiteral:
    """Object literal keyed by server name; servers with variables become functions."""
    properties = []
    for i, server in enumerate(servers):
        if server.get("variables"):
            value = _create_server_function(server["url"], server["variables"])
        else:
            value = StringLiteral(server["url"])
        properties.append(PropertyAssignment(_server_name(server, i), value))
    return ObjectLiteral(properties, multiline=True)


def create_servers_statement(servers: list[dict]) -> VariableDecl:
    return VariableDecl(name="servers", initializer=generate_servers(servers))


def create_defaults_statement(defaults: dict[str, Any]) -> VariableDecl:
    """`export const defaults: Oazapfts.Defaults<Oazapfts.CustomHeaders> = {...}`"""
    headers = {k: v for k, v in (defaults.get("headers") or {}).items() if v is not None}
    properties = [PropertyAssignment("headers", create_literal(headers))]
    if defaults.get("baseUrl") is not None:
        properties.append(PropertyAssignment("baseUrl", StringLiteral(defaults["baseUrl"])))
    for key in ("fetch", "FormData"):
        # Expression-valued defaults set by plugins
        if defaults.get(key) is not None:
            properties.append(PropertyAssignment(key, defaults[key]))
    return VariableDecl(
        name="defaults",
        type_ref=reference_type("Oazapfts.Defaults", [reference_type("Oazapfts.CustomHeaders")]),
        initializer=ObjectLiteral(properties, multiline=True),
    )
