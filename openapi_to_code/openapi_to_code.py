import json
import logging

import click

from .cli_utils import reconstruct_command_line
from .pipeline import (
    ArgumentStyle,
    CodeGenerationError,
    CodeGeneratorConfig,
    EnumStyle,
    PipelineGenerator,
    create_plugin,
    load_document,
)
from .pipeline.context import DEFAULT_BANNER


def banner_plugin(command_line: str):
    """Plugin adding the command line to the banner of the generated file."""

    @create_plugin(name="cli-banner")
    def apply(hooks):
        @hooks.prepare.tap("cli-banner")
        def prepare(ctx):
            ctx.banner = f"{DEFAULT_BANNER}\n\nGenerated with: {command_line}"

    return apply


@click.command()
@click.option("--include", "-i", multiple=True, help="Only generate operations with this tag")
@click.option("--exclude", "-e", multiple=True, help="Skip operations with this tag")
@click.option("--optimistic", is_flag=True, default=False, help="Wrap calls in `ok()`")
@click.option(
    "--union-undefined",
    is_flag=True,
    default=False,
    help="Type optional properties as `T | undefined`",
)
@click.option(
    "--enum-style",
    default=None,
    type=click.Choice([s.value for s in EnumStyle]),
    help="How enum schemas are rendered",
)
@click.option(
    "--merge-read-write-only",
    is_flag=True,
    default=False,
    help="Emit a single alias per schema, ignoring readOnly/writeOnly",
)
@click.option("--use-unknown", is_flag=True, default=False, help="Use `unknown` instead of `any`")
@click.option(
    "--argument-style",
    default=None,
    type=click.Choice([s.value for s in ArgumentStyle]),
    help="Positional arguments or a single object argument",
)
@click.option("--all-schemas", is_flag=True, default=False, help="Emit every component schema")
@click.option(
    "--strip-legacy-methods",
    is_flag=True,
    default=False,
    help="Do not emit deprecated functions under legacy operation names",
)
@click.option("--config", "-c", default=None, type=click.Path(exists=True, resolve_path=True))
@click.option("--verbose", "-v", is_flag=True, default=False)
@click.argument("spec", type=click.Path(exists=True, resolve_path=True))
@click.argument("output", type=click.Path(resolve_path=True))
def openapi_to_code(
    include,
    exclude,
    optimistic,
    union_undefined,
    enum_style,
    merge_read_write_only,
    use_unknown,
    argument_style,
    all_schemas,
    strip_legacy_methods,
    config,
    verbose,
    spec,
    output,
):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if config is not None:
        with open(config) as f:
            config = CodeGeneratorConfig.from_dict(json.load(f))
    else:
        config = CodeGeneratorConfig()

    # CLI flags override the config file when set
    if include:
        config.include = list(include)
    if exclude:
        config.exclude = list(exclude)
    if enum_style is not None:
        config.enum_style = EnumStyle(enum_style)
    if argument_style is not None:
        config.argument_style = ArgumentStyle(argument_style)
    for name, value in (
        ("optimistic", optimistic),
        ("union_undefined", union_undefined),
        ("merge_read_write_only", merge_read_write_only),
        ("use_unknown", use_unknown),
        ("all_schemas", all_schemas),
        ("strip_legacy_methods", strip_legacy_methods),
    ):
        if value:
            setattr(config, name, True)

    config.plugins = [banner_plugin(reconstruct_command_line(openapi_to_code)), *config.plugins]

    try:
        document = load_document(spec)
        out = PipelineGenerator(document, config).generate()
    except CodeGenerationError as e:
        raise click.ClickException(str(e)) from e

    with open(output, "w") as f:
        f.write(out)
