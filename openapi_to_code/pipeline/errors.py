"""
Exceptions raised by the generation pipeline.

Every fatal condition aborts the whole run; nothing is partially emitted.
"""

from __future__ import annotations


class CodeGenerationError(Exception):
    """Base class for all generation failures."""


class UnresolvedReferenceError(CodeGenerationError):
    """A $ref points at a path that does not exist in the document."""

    def __init__(self, ref: str, path: list[str] | None = None, message: str = ""):
        self.ref = ref
        self.path = path or []
        super().__init__(message or f"Can't resolve {ref}")


class DiscriminatorError(CodeGenerationError):
    """A discriminated union is malformed (missing propertyName, inline variant)."""


class ParameterContentError(CodeGenerationError):
    """A parameter's `content` declares zero, several, or non-JSON media types."""


class EnumNamesError(CodeGenerationError):
    """An enum name-override list is malformed."""


class EnumValueError(CodeGenerationError):
    """An enum value that cannot become a literal type."""


class PluginError(CodeGenerationError):
    """A plugin or hook tap misbehaved."""


class UnsupportedDocumentError(CodeGenerationError):
    """The input document is not an OpenAPI 3.x document."""
