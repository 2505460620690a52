"""
Hook pipeline: the extension points plugins tap into.

A plugin is a callable receiving the `Hooks` of a run. It registers taps on
the hooks it cares about. Taps run in precedence order (eager, default, lazy)
and, within a precedence, in registration order.

Two kinds of hooks exist:

- `SeriesHook`: every tap is called with the same arguments, for side effects.
- `WaterfallHook`: each tap receives the previous tap's result as its first
  argument and returns the value handed to the next one. Taps can therefore
  extend, refine or replace what earlier taps produced.

Taps may be plain functions or coroutines. Errors raised by a tap abort the run.
"""

from __future__ import annotations

import inspect
import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from enum import Enum
from typing import Any

from ..errors import PluginError

logger = logging.getLogger(__name__)


@dataclass
class Endpoint:
    """An operation of the document, as handed to endpoint hooks."""

    method: str  # Upper-case HTTP verb
    path: str
    operation: dict
    path_item: dict


@dataclass
class QueryContext:
    """Arguments describing one query formatter call."""

    method: str
    path: str
    operation: dict
    path_item: dict
    formatter: str
    parameters: list[dict]  # All parameters of the operation
    query: list[dict]  # Query parameters handled by this formatter call


class Precedence(str, Enum):
    EAGER = "eager"
    DEFAULT = "default"
    LAZY = "lazy"


PRECEDENCE_ORDER = (Precedence.EAGER, Precedence.DEFAULT, Precedence.LAZY)


@dataclass
class Tap:
    name: str
    fn: Callable[..., Any]
    is_async: bool = False


class Hook:
    """Base class keeping one tap list per precedence."""

    def __init__(self, name: str, arg_names: list[str], owner: Hooks | None = None):
        self.name = name
        self.arg_names = arg_names
        self._owner = owner
        self._taps: dict[Precedence, list[Tap]] = {p: [] for p in PRECEDENCE_ORDER}

    @property
    def taps(self) -> list[Tap]:
        return [tap for p in PRECEDENCE_ORDER for tap in self._taps[p]]

    def _register(self, tap: Tap, precedence: Precedence | None) -> None:
        if precedence is None:
            precedence = self._owner.active_precedence if self._owner else Precedence.DEFAULT
        self._taps[Precedence(precedence)].append(tap)

    def tap(self, name: str, fn: Callable | None = None, precedence: Precedence | None = None):
        """
        Register a tap. Usable directly or as a decorator:

            hooks.prepare.tap("my-plugin", fn)

            @hooks.prepare.tap("my-plugin")
            def fn(ctx): ...

        Without an explicit `precedence`, the tap inherits the precedence of
        the plugin being applied.
        """
        if fn is None:

            def decorator(f: Callable) -> Callable:
                self._register(Tap(name, f), precedence)
                return f

            return decorator
        self._register(Tap(name, fn), precedence)
        return fn

    def tap_promise(
        self, name: str, fn: Callable | None = None, precedence: Precedence | None = None
    ):
        """Register a coroutine function tap (same forms as `tap`)."""
        if fn is None:

            def decorator(f: Callable) -> Callable:
                self._register(Tap(name, f, is_async=True), precedence)
                return f

            return decorator
        self._register(Tap(name, fn, is_async=True), precedence)
        return fn

    async def _invoke(self, tap: Tap, *args: Any) -> Any:
        try:
            result = tap.fn(*args)
            if inspect.isawaitable(result):
                result = await result
        except Exception:
            logger.error("Tap %r on hook %r failed", tap.name, self.name)
            raise
        return result

    def _invoke_sync(self, tap: Tap, *args: Any) -> Any:
        try:
            result = tap.fn(*args)
        except Exception:
            logger.error("Tap %r on hook %r failed", tap.name, self.name)
            raise
        if inspect.isawaitable(result):
            if inspect.iscoroutine(result):
                result.close()
            raise PluginError(
                f"Tap {tap.name!r} on hook {self.name!r} is async; use promise() to call this hook"
            )
        return result


class SeriesHook(Hook):
    """All taps receive the same arguments; return values are ignored."""

    async def promise(self, *args: Any) -> None:
        for tap in self.taps:
            await self._invoke(tap, *args)

    def call(self, *args: Any) -> None:
        for tap in self.taps:
            self._invoke_sync(tap, *args)


class WaterfallHook(Hook):
    """Each tap transforms the value returned by the previous one."""

    def _check(self, tap: Tap, result: Any) -> Any:
        if result is None:
            raise PluginError(f"Tap {tap.name!r} on hook {self.name!r} returned None")
        return result

    async def promise(self, value: Any, *args: Any) -> Any:
        for tap in self.taps:
            value = self._check(tap, await self._invoke(tap, value, *args))
        return value

    def call(self, value: Any, *args: Any) -> Any:
        for tap in self.taps:
            value = self._check(tap, self._invoke_sync(tap, value, *args))
        return value


class Hooks:
    """The extension points of one generation run."""

    def __init__(self):
        # Precedence given to taps registered without an explicit one
        self.active_precedence = Precedence.DEFAULT

        # Called once, before any generation; the only place to edit ctx.spec
        # and the template parts. Args: ctx
        self.prepare = SeriesHook("prepare", ["ctx"], self)

        # Whether to generate an endpoint. Args: generate (bool), endpoint, ctx
        self.filter_endpoint = WaterfallHook(
            "filter_endpoint", ["generate", "endpoint", "ctx"], self
        )

        # Functions generated for an endpoint. Args: functions (list), endpoint, ctx
        self.generate_method = WaterfallHook(
            "generate_method", ["functions", "endpoint", "ctx"], self
        )

        # Arguments of one query formatter call. Args: args (list), query_context, ctx
        self.query_serializer_args = WaterfallHook(
            "query_serializer_args", ["args", "query_context", "ctx"], self
        )

        # Top-level statements of the output. Args: statements (list), ctx, methods
        self.compose_source = WaterfallHook(
            "compose_source", ["statements", "ctx", "methods"], self
        )

        # The finished source file, before printing. Args: source_file, ctx
        self.ast_generated = WaterfallHook("ast_generated", ["source_file", "ctx"], self)

    def all(self) -> list[Hook]:
        return [
            self.prepare,
            self.filter_endpoint,
            self.generate_method,
            self.query_serializer_args,
            self.compose_source,
            self.ast_generated,
        ]


def create_hooks() -> Hooks:
    return Hooks()


@dataclass
class Plugin:
    """A callable applied to the hooks of a run, with a name and a precedence."""

    fn: Callable[[Hooks], Any]
    name: str = ""
    precedence: Precedence = Precedence.DEFAULT

    def __call__(self, hooks: Hooks) -> Any:
        return self.fn(hooks)


def create_plugin(
    fn: Callable[[Hooks], Any] | None = None,
    *,
    name: str | None = None,
    precedence: Precedence = Precedence.DEFAULT,
):
    """Wrap a function into a Plugin; usable as a decorator with or without arguments."""
    if fn is None:
        return lambda f: create_plugin(f, name=name, precedence=precedence)
    return Plugin(fn, name or getattr(fn, "__name__", ""), Precedence(precedence))


def plugin_precedence(plugin: Any) -> Precedence:
    return Precedence(getattr(plugin, "precedence", None) or Precedence.DEFAULT)


def sort_plugins(plugins: Iterable[Any]) -> list[Any]:
    """Stable sort by precedence tier: eager, then default, then lazy."""
    plugins = list(plugins)
    return [p for tier in PRECEDENCE_ORDER for p in plugins if plugin_precedence(p) == tier]


async def apply_plugins(hooks: Hooks, plugins: Iterable[Any]) -> None:
    for plugin in sort_plugins(plugins):
        hooks.active_precedence = plugin_precedence(plugin)
        try:
            result = plugin(hooks)
            if inspect.isawaitable(result):
                await result
        finally:
            hooks.active_precedence = Precedence.DEFAULT
