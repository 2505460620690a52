"""OpenAPI to Code Generator

A Python package for generating typed TypeScript API clients from
OpenAPI 3 documents. Types are synthesized from component schemas, one
client function is emitted per operation, and plugins can reshape every
stage of the generation through hooks.
"""

__version__ = "1.0.1"

from .pipeline import (
    ArgumentStyle,
    CodeGeneratorConfig,
    EnumStyle,
    PipelineGenerator,
    create_plugin,
    load_document,
)

__all__ = [
    "PipelineGenerator",
    "CodeGeneratorConfig",
    "EnumStyle",
    "ArgumentStyle",
    "create_plugin",
    "load_document",
]
