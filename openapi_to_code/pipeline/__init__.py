"""
Pipeline - hook-driven OpenAPI to TypeScript client generator.

This module provides a multi-phase architecture for generating a typed
client from an OpenAPI 3 document:

1. Phase 1 (Prepare): Plugins edit the document and the template parts
2. Phase 2 (Analyzer): Resolve references and synthesize types
3. Phase 3 (Methods): Build one client function per operation
4. Phase 4 (Compose): Assemble the declaration list
5. Phase 5 (Printer): Render the declarations to TypeScript source
"""

from __future__ import annotations

from .config import ArgumentStyle, CodeGeneratorConfig, EnumStyle
from .context import GenerationContext, create_context
from .errors import (
    CodeGenerationError,
    DiscriminatorError,
    EnumNamesError,
    EnumValueError,
    ParameterContentError,
    PluginError,
    UnresolvedReferenceError,
    UnsupportedDocumentError,
)
from .generator import PipelineGenerator, generate_api, generate_ast, print_ast
from .loader import load_document, parse_document
from .plugins.hooks import Hooks, Plugin, Precedence, create_hooks, create_plugin

__all__ = [
    "PipelineGenerator",
    "CodeGeneratorConfig",
    "EnumStyle",
    "ArgumentStyle",
    "GenerationContext",
    "create_context",
    "generate_api",
    "generate_ast",
    "print_ast",
    "load_document",
    "parse_document",
    "Hooks",
    "Plugin",
    "Precedence",
    "create_hooks",
    "create_plugin",
    "CodeGenerationError",
    "UnresolvedReferenceError",
    "DiscriminatorError",
    "ParameterContentError",
    "EnumNamesError",
    "EnumValueError",
    "PluginError",
    "UnsupportedDocumentError",
]
