"""
Plugins and the hooks they tap into.

The built-in plugins live in `internal` and are imported by the generator.
"""

from __future__ import annotations

from .hooks import (
    Endpoint,
    Hooks,
    Plugin,
    Precedence,
    QueryContext,
    SeriesHook,
    WaterfallHook,
    apply_plugins,
    create_hooks,
    create_plugin,
)

__all__ = [
    "Endpoint",
    "QueryContext",
    "Hooks",
    "SeriesHook",
    "WaterfallHook",
    "Plugin",
    "Precedence",
    "apply_plugins",
    "create_hooks",
    "create_plugin",
]
