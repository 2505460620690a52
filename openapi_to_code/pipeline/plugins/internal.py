"""
Built-in plugins.

They are appended after the user plugins. The ones producing the default
output are lazy and come last in their tier, so every user tap on the same
hook runs before them. User taps can start the value the default output is
appended to; `ast_generated` is where the finished output can be rewritten.
"""

from __future__ import annotations

from ..analyzer.ir_nodes import FunctionDecl, Identifier, PropertyAccess
from ..context import GenerationContext
from ..methods.method_synthesizer import generate_client_method
from ..methods.servers import create_defaults_statement, create_servers_statement
from .hooks import Endpoint, Hooks, Precedence, QueryContext, create_plugin


def skip_endpoint(ctx: GenerationContext, tags: list[str] | None) -> bool:
    """Tag filtering: exclusion wins, then an include list must match."""
    config = ctx.config
    if tags and any(t in config.exclude for t in tags):
        return True
    if config.include is not None:
        return not (tags and any(t in config.include for t in tags))
    return False


def dedupe_method_names(methods: list) -> list:
    """Append a counter to functions whose name is already taken."""
    method_names: dict[str, int] = {}
    result = []
    for method in methods:
        if isinstance(method, FunctionDecl) and method.name:
            if method.name in method_names:
                method_names[method.name] += 1
                method = FunctionDecl(
                    name=f"{method.name}{method_names[method.name]}",
                    exported=method.exported,
                    comment=method.comment,
                    params=method.params,
                    body=method.body,
                    return_type=method.return_type,
                    deprecated=method.deprecated,
                )
            else:
                method_names[method.name] = 1
        result.append(method)
    return result


@create_plugin(name="include-exclude-filter")
def include_exclude_filter_endpoint(hooks: Hooks) -> None:
    @hooks.filter_endpoint.tap("include-exclude-filter")
    def filter_endpoint(generate: bool, endpoint: Endpoint, ctx: GenerationContext) -> bool:
        if not generate:
            return False
        return not skip_endpoint(ctx, endpoint.operation.get("tags"))


@create_plugin(name="numeric-boolean-query-parameters", precedence=Precedence.LAZY)
def numeric_boolean_query_parameters(hooks: Hooks) -> None:
    @hooks.query_serializer_args.tap("numeric-boolean-query-parameters")
    def query_serializer_args(args: list, query: QueryContext, ctx: GenerationContext) -> list:
        if not ctx.config.numeric_boolean_query_parameters:
            return args
        has_boolean = any(
            isinstance(p.get("schema"), dict) and p["schema"].get("type") == "boolean"
            for p in query.query
        )
        if not has_boolean:
            return args
        return [*args, PropertyAccess(Identifier("QS"), "numericBooleanReserved")]


@create_plugin(name="default-generate-method", precedence=Precedence.LAZY)
def default_generate_method(hooks: Hooks) -> None:
    @hooks.generate_method.tap_promise("default-generate-method")
    async def generate_method(functions: list, endpoint: Endpoint, ctx: GenerationContext) -> list:
        return [*functions, *await generate_client_method(endpoint, ctx, hooks)]


@create_plugin(name="default-compose-source", precedence=Precedence.LAZY)
def default_compose_source(hooks: Hooks) -> None:
    @hooks.compose_source.tap("default-compose-source")
    def compose_source(statements: list, ctx: GenerationContext, methods: list) -> list:
        return [
            *statements,
            *ctx.imports,
            create_defaults_statement(ctx.defaults),
            *ctx.init,
            create_servers_statement(ctx.servers),
            *ctx.aliases,
            *dedupe_method_names(methods),
            *ctx.enum_aliases,
        ]


INTERNAL_PLUGINS = [
    include_exclude_filter_endpoint,
    numeric_boolean_query_parameters,
    default_generate_method,
    default_compose_source,
]
