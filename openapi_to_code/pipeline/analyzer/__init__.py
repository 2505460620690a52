"""
Analyzer module.

Contains reference resolution, naming, visibility classification and type
synthesis. Only the IR is re-exported here; the synthesis modules depend on
the generation context and are imported from their own modules.
"""

from __future__ import annotations

from .ir_nodes import (
    Declaration,
    EnumDecl,
    FunctionDecl,
    SourceFile,
    TypeAliasDecl,
    TypeKind,
    TypeRef,
)

__all__ = [
    "TypeRef",
    "TypeKind",
    "Declaration",
    "TypeAliasDecl",
    "EnumDecl",
    "FunctionDecl",
    "SourceFile",
]
