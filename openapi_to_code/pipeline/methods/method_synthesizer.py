"""
Client method synthesis.

Builds the function declaration(s) calling one operation: the signature
from parameters and request body, the URL template with query string, the
request init object, and the typed response union.
"""

from __future__ import annotations

import logging
from typing import Any

from ..analyzer.ir_nodes import (
    BindingElement,
    Call,
    Expression,
    FunctionDecl,
    Identifier,
    ObjectLiteral,
    Parameter,
    PropertyAccess,
    PropertyAssignment,
    PropertySignature,
    Spread,
    StringLiteral,
    TemplateSpan,
    TemplateString,
    TypeRef,
    is_keyword,
    keyword_type,
    literal_type,
    object_type,
    reference_type,
    union_type,
)
from ..analyzer.name_resolver import get_operation_names, to_identifier, upper_first
from ..analyzer.reference_resolver import get_reference_name, is_reference, resolve, resolve_array
from ..analyzer.type_synthesizer import TypeSynthesizer
from ..analyzer.visibility import VisibilityMode
from ..config import ArgumentStyle
from ..context import GenerationContext
from ..plugins.hooks import Endpoint, Hooks, QueryContext
from .content import (
    get_body_formatter,
    get_formatter,
    get_response_type,
    get_schema_from_content,
    support_deep_objects,
)

logger = logging.getLogger(__name__)

FETCH_FUNCTIONS = {"json": "fetchJson", "text": "fetchText", "blob": "fetchBlob"}


def call_runtime_function(
    name: str, args: list[Expression], type_args: list[TypeRef] | None = None
) -> Call:
    """`oazapfts.<name>(...)`"""
    return Call(PropertyAccess(Identifier("oazapfts"), name), args, type_args or [])


def call_qs_function(name: str, args: list[Expression]) -> Call:
    """`QS.<name>(...)`"""
    return Call(PropertyAccess(Identifier("QS"), name), args)


def wrap_result(expression: Expression, ctx: GenerationContext) -> Expression:
    return call_runtime_function("ok", [expression]) if ctx.config.optimistic else expression


def create_url_expression(
    path: str, qs: Expression | None = None, path_args: dict[str, str] | None = None
) -> TemplateString:
    """
    Template string for an OpenAPI path template.

    `{name}` placeholders become `encodeURIComponent(arg)` spans, where `arg`
    is the argument `path_args` assigns to the placeholder (the identifier of
    the placeholder by default); the query string expression is appended last.
    """
    path_args = path_args or {}
    head, *rest = path.split("{")
    spans = []
    for chunk in rest:
        name, _, literal = chunk.partition("}")
        arg = path_args.get(name) or to_identifier(name)
        expression = Call(Identifier("encodeURIComponent"), [Identifier(arg)])
        spans.append(TemplateSpan(expression, literal))
    if qs is not None:
        spans.append(TemplateSpan(qs, ""))
    return TemplateString(head, spans)


def merge_parameters(ctx: GenerationContext, path_item: dict, operation: dict) -> list[dict]:
    """Path-item parameters, overridden by operation parameters with the same name and location."""
    parameters = resolve_array(ctx, path_item.get("parameters"))
    for param in resolve_array(ctx, operation.get("parameters")):
        for i, existing in enumerate(parameters):
            if existing.get("name") == param.get("name") and existing.get("in") == param.get("in"):
                parameters[i] = param
                break
        else:
            parameters.append(param)
    return parameters


def get_argument_names(parameters: list[dict]) -> list[str]:
    """
    Argument names for `parameters`, in the same order.

    Names are assigned by ascending parameter-name length; when a name is
    already taken, the parameter location is appended (`idQuery`).
    """
    names: dict[int, str] = {}
    order = sorted(range(len(parameters)), key=lambda i: len(parameters[i].get("name", "")))
    for i in order:
        param = parameters[i]
        identifier = to_identifier(param.get("name", ""))
        suffix = upper_first(param.get("in", "")) if identifier in names.values() else ""
        names[i] = identifier + suffix
    return [names[i] for i in range(len(parameters))]


class MethodSynthesizer:
    """Generates the client functions of one endpoint."""

    def __init__(self, endpoint: Endpoint, ctx: GenerationContext, hooks: Hooks):
        self.endpoint = endpoint
        self.ctx = ctx
        self.hooks = hooks
        self.types = TypeSynthesizer(ctx)

    def get_type_from_parameter(self, param: dict) -> TypeRef:
        if param.get("content"):
            return self.types.get_type_from_schema(get_schema_from_content(param["content"]))
        return self.types.get_type_from_schema(param.get("schema"))

    def get_type_from_responses(self, responses: dict, mode: VisibilityMode) -> TypeRef:
        """Union of `{status, data}` objects, one per declared response."""
        arms = []
        for code, response in responses.items():
            code = str(code)
            status = literal_type(int(code)) if code.isdigit() else keyword_type("number")
            members = [PropertySignature("status", status)]

            data_type = keyword_type("void")
            response = resolve(response, self.ctx)
            if response and response.get("content"):
                data_type = self.types.get_type_from_schema(
                    get_schema_from_content(response["content"]), mode=mode
                )
            if not is_keyword(data_type, "void"):
                members.append(PropertySignature("data", data_type))
            arms.append(object_type(members))
        return union_type(arms)

    async def generate(self) -> list[FunctionDecl]:
        endpoint, ctx = self.endpoint, self.ctx
        operation = endpoint.operation

        primary_name, legacy_name = get_operation_names(
            endpoint.method, endpoint.path, operation.get("operationId"), ctx.operation_names
        )
        logger.debug("Generating %s for %s %s", primary_name, endpoint.method, endpoint.path)

        parameters = merge_parameters(ctx, endpoint.path_item, operation)
        if ctx.is_converted:
            parameters = support_deep_objects(parameters)
        arg_names = get_argument_names(parameters)
        arg_name = {id(p): name for p, name in zip(parameters, arg_names)}

        body = None
        body_var = None
        body_type = None
        if operation.get("requestBody"):
            body = resolve(operation["requestBody"], ctx)
            schema = get_schema_from_content(body.get("content") or {})
            body_type = self.types.get_type_from_schema(schema, mode=VisibilityMode.WRITE_ONLY)
            # Named after the alias of a referenced schema, without visibility suffix
            alias = ctx.refs.get(schema["$ref"]) if is_reference(schema) else None
            alias_name = alias.base.name if alias else None
            body_var = to_identifier(alias_name or get_reference_name(schema) or "body")

        params = self._create_signature(parameters, arg_name, body, body_var, body_type)
        params.append(
            Parameter("opts", type_ref=reference_type("Oazapfts.RequestOpts"), optional=True)
        )

        call = await self._create_call(parameters, arg_name, body, body_var)

        comment = operation.get("summary") or operation.get("description")
        functions = [FunctionDecl(name=primary_name, params=params, body=call, comment=comment)]
        if legacy_name and not ctx.config.strip_legacy_methods:
            functions.append(
                FunctionDecl(
                    name=legacy_name,
                    params=params,
                    body=call,
                    comment=comment,
                    deprecated=f"Use `{primary_name}` instead.",
                )
            )
        return functions

    def _create_signature(
        self,
        parameters: list[dict],
        arg_name: dict[int, str],
        body: dict | None,
        body_var: str | None,
        body_type: TypeRef | None,
    ) -> list[Parameter]:
        params: list[Parameter] = []
        body_required = bool(body and body.get("required"))

        if self.ctx.config.argument_style == ArgumentStyle.OBJECT:
            members = [
                PropertySignature(
                    arg_name[id(p)], self.get_type_from_parameter(p), not p.get("required")
                )
                for p in parameters
            ]
            if body_var:
                members.append(PropertySignature(body_var, body_type, not body_required))
            if members:
                binding = [BindingElement(arg_name[id(p)]) for p in parameters]
                if body_var:
                    binding.append(BindingElement(body_var))
                params.append(Parameter(binding=binding, type_ref=object_type(members)))
            return params

        required = [p for p in parameters if p.get("required")]
        optional = [p for p in parameters if not p.get("required")]

        for p in required:
            params.append(Parameter(arg_name[id(p)], type_ref=self.get_type_from_parameter(p)))
        if body_var:
            params.append(Parameter(body_var, type_ref=body_type, optional=not body_required))
        if optional:
            params.append(
                Parameter(
                    binding=[BindingElement(arg_name[id(p)]) for p in optional],
                    type_ref=object_type(
                        [
                            PropertySignature(
                                arg_name[id(p)], self.get_type_from_parameter(p), True
                            )
                            for p in optional
                        ]
                    ),
                    initializer=ObjectLiteral(),
                )
            )
        return params

    async def _create_query_string(
        self, parameters: list[dict], arg_name: dict[int, str]
    ) -> Expression | None:
        query = [p for p in parameters if p.get("in") == "query"]
        if not query:
            return None

        groups: dict[str, list[dict]] = {}
        for param in query:
            groups.setdefault(get_formatter(param), []).append(param)

        endpoint = self.endpoint
        calls = []
        for formatter, group in groups.items():
            values = [PropertyAssignment(p["name"], Identifier(arg_name[id(p)])) for p in group]
            args: list[Any] = [ObjectLiteral(values)]
            query_context = QueryContext(
                method=endpoint.method,
                path=endpoint.path,
                operation=endpoint.operation,
                path_item=endpoint.path_item,
                formatter=formatter,
                parameters=parameters,
                query=group,
            )
            args = await self.hooks.query_serializer_args.promise(args, query_context, self.ctx)
            calls.append(call_qs_function(formatter, args))
        return call_qs_function("query", calls)

    async def _create_call(
        self,
        parameters: list[dict],
        arg_name: dict[int, str],
        body: dict | None,
        body_var: str | None,
    ) -> Expression:
        endpoint, ctx = self.endpoint, self.ctx
        operation = endpoint.operation

        qs = await self._create_query_string(parameters, arg_name)
        path_args = {p["name"]: arg_name[id(p)] for p in parameters if p.get("in") == "path"}
        url = create_url_expression(endpoint.path, qs, path_args)

        init: list[Any] = [Spread(Identifier("opts"))]
        if endpoint.method != "GET":
            init.append(PropertyAssignment("method", StringLiteral(endpoint.method)))
        if body_var:
            init.append(PropertyAssignment("body", Identifier(body_var)))

        headers = [p for p in parameters if p.get("in") == "header"]
        if headers:
            init.append(
                PropertyAssignment(
                    "headers",
                    call_runtime_function(
                        "mergeHeaders",
                        [
                            PropertyAccess(Identifier("opts"), "headers", optional_chain=True),
                            ObjectLiteral(
                                [
                                    PropertyAssignment(p["name"], Identifier(arg_name[id(p)]))
                                    for p in headers
                                ],
                                multiline=True,
                            ),
                        ],
                    ),
                )
            )

        init_obj = ObjectLiteral(init, multiline=True)
        formatter = get_body_formatter(body)
        args: list[Expression] = [
            url,
            call_runtime_function(formatter, [init_obj]) if formatter else init_obj,
        ]

        responses = operation.get("responses")
        response_type = get_response_type(ctx, responses)
        type_args = None
        if response_type in ("json", "blob"):
            type_args = [self.get_type_from_responses(responses, VisibilityMode.READ_ONLY)]

        return wrap_result(
            call_runtime_function(FETCH_FUNCTIONS[response_type], args, type_args), ctx
        )


async def generate_client_method(
    endpoint: Endpoint, ctx: GenerationContext, hooks: Hooks
) -> list[FunctionDecl]:
    return await MethodSynthesizer(endpoint, ctx, hooks).generate()
