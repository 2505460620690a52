"""
Generation driver.

Runs the phases of one generation:

1. Plugins are applied to a fresh set of hooks
2. `prepare` lets plugins edit the document and the template parts
3. Components are preprocessed (discriminating schemas, explicit mappings)
4. Every endpoint goes through `filter_endpoint` and `generate_method`
5. With `all_schemas`, every component schema gets an alias
6. `compose_source` assembles the statements, `ast_generated` sees the result
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterable
from typing import Any

from .analyzer.ir_nodes import SourceFile
from .analyzer.preprocess import SCHEMA_PREFIX, preprocess_components
from .analyzer.reference_resolver import resolve
from .analyzer.type_synthesizer import TypeSynthesizer
from .analyzer.visibility import VisibilityMode
from .ast_backends.typescript_printer import TypeScriptPrinter
from .config import CodeGeneratorConfig
from .context import GenerationContext, create_context
from .methods.content import is_http_method
from .plugins.hooks import Endpoint, Hooks, apply_plugins, create_hooks
from .plugins.internal import INTERNAL_PLUGINS

logger = logging.getLogger(__name__)

__all__ = [
    "PipelineGenerator",
    "create_context",
    "generate_api",
    "generate_ast",
    "print_ast",
]


def iter_endpoints(ctx: GenerationContext):
    """Yield an Endpoint per operation of the document, in document order."""
    for path, path_item in (ctx.spec.get("paths") or {}).items():
        path_item = resolve(path_item, ctx) or {}
        for verb, operation in path_item.items():
            method = verb.upper()
            if not is_http_method(method) or not isinstance(operation, dict):
                continue
            yield Endpoint(method=method, path=path, operation=operation, path_item=path_item)


async def generate_api(ctx: GenerationContext, hooks: Hooks) -> SourceFile:
    """Produce the source file for `ctx` using already tapped `hooks`."""
    await hooks.prepare.promise(ctx)
    preprocess_components(ctx)

    methods: list = []
    endpoint_count = 0
    for endpoint in iter_endpoints(ctx):
        if not await hooks.filter_endpoint.promise(True, endpoint, ctx):
            logger.debug("Skipping %s %s", endpoint.method, endpoint.path)
            continue
        endpoint_count += 1
        methods.extend(await hooks.generate_method.promise([], endpoint, ctx))

    if ctx.config.all_schemas:
        types = TypeSynthesizer(ctx)
        schemas = ((ctx.spec.get("components") or {}).get("schemas")) or {}
        for name in schemas:
            types.get_ref_alias({"$ref": f"{SCHEMA_PREFIX}{name}"}, VisibilityMode.BASE)

    statements = await hooks.compose_source.promise([], ctx, methods)
    if statements and ctx.banner:
        first = statements[0]
        first.comment = f"{ctx.banner}\n\n{first.comment}" if first.comment else ctx.banner

    source_file = await hooks.ast_generated.promise(SourceFile(statements), ctx)
    logger.info(
        "Generated %d endpoints, %d functions, %d aliases, %d enums",
        endpoint_count,
        len(methods),
        len(ctx.aliases),
        len(ctx.enum_aliases),
    )
    return source_file


async def generate_ast(ctx: GenerationContext, plugins: Iterable[Any] = ()) -> SourceFile:
    """Apply `plugins` followed by the built-in ones, then run the pipeline."""
    hooks = create_hooks()
    await apply_plugins(hooks, [*plugins, *INTERNAL_PLUGINS])
    return await generate_api(ctx, hooks)


def print_ast(source_file: SourceFile) -> str:
    return TypeScriptPrinter().print_file(source_file)


class PipelineGenerator:
    """
    Generate a TypeScript client from an OpenAPI document.

    Example:
        generator = PipelineGenerator(spec, CodeGeneratorConfig(optimistic=True))
        code = generator.generate()
    """

    def __init__(self, spec: dict, config: CodeGeneratorConfig | None = None):
        self.spec = spec
        self.config = config or CodeGeneratorConfig()

    async def run(self) -> tuple[SourceFile, GenerationContext]:
        """Run the pipeline on a fresh context; the context is handed to the caller."""
        ctx = create_context(self.spec, self.config)
        return await generate_ast(ctx, self.config.plugins), ctx

    async def generate_ast(self) -> SourceFile:
        source_file, _ = await self.run()
        return source_file

    def generate(self) -> str:
        """Run the pipeline and print the result."""
        return print_ast(asyncio.run(self.generate_ast()))
