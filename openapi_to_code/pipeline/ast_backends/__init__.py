"""
Printers turning declaration lists into source text.
"""

from __future__ import annotations

from .base import AstPrinter
from .typescript_printer import TypeScriptPrinter

__all__ = [
    "AstPrinter",
    "TypeScriptPrinter",
]
