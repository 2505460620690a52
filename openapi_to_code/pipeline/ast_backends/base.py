"""
Base class for printers.

A printer turns a `SourceFile` into source text. Declarations are rendered
through the jinja2 templates of the target language; types and expressions
are rendered in Python and exposed to the templates as filters.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path

import jinja2

from ..analyzer.ir_nodes import Expression, SourceFile, TypeRef


class AstPrinter(ABC):
    """Abstract base class for printers."""

    # Template directory name
    TEMPLATE_LANG: str = ""

    # File extension
    FILE_EXTENSION: str = ""

    def __init__(self):
        self._setup_templates()

    def _setup_templates(self) -> None:
        """Set up Jinja2 templates."""
        template_dir = Path(__file__).parent.parent.parent / "templates" / self.TEMPLATE_LANG
        self.jinja_env = jinja2.Environment(
            loader=jinja2.FileSystemLoader(str(template_dir)),
            lstrip_blocks=True,
            trim_blocks=True,
        )
        self.jinja_env.filters["render_type"] = self.render_type
        self.jinja_env.filters["render_expression"] = self.render_expression

    def get_template(self, name: str) -> jinja2.Template:
        return self.jinja_env.get_template(f"{name}.{self.FILE_EXTENSION}.jinja2")

    @abstractmethod
    def print_file(self, source_file: SourceFile) -> str:
        """
        Print a complete source file.

        Args:
            source_file: The declarations to print

        Returns:
            Source text
        """

    @abstractmethod
    def render_type(self, type_ref: TypeRef | None, indent: int = 0) -> str:
        """Render a type description at the given indentation level."""

    @abstractmethod
    def render_expression(self, expression: Expression | None, indent: int = 0) -> str:
        """Render an expression at the given indentation level."""
