"""
Generation context: the mutable state of a single generation run.

A context is created per run by `create_context` and never shared. It owns a
deep copy of the input document, the template parts plugins may edit in the
`prepare` hook, and the alias/enum identity registries filled while types are
synthesized.
"""

from __future__ import annotations

import copy
import logging
from dataclasses import dataclass, field
from typing import Any

from .analyzer.ir_nodes import (
    Call,
    Declaration,
    Identifier,
    ImportDecl,
    PropertyAccess,
    TypeRef,
    VariableDecl,
)
from .analyzer.visibility import OnlyModes, VisibilityMode
from .config import CodeGeneratorConfig
from .methods.servers import default_base_url

logger = logging.getLogger(__name__)

DEFAULT_BANNER = "DO NOT MODIFY - This file has been generated using openapi_to_code."


@dataclass
class RefVariants:
    """The alias types emitted for one `$ref`."""

    base: TypeRef
    read_only: TypeRef | None = None
    write_only: TypeRef | None = None

    def get(self, mode: VisibilityMode) -> TypeRef:
        """Variant for `mode`, falling back to `base` when none was emitted."""
        if mode == VisibilityMode.READ_ONLY and self.read_only is not None:
            return self.read_only
        if mode == VisibilityMode.WRITE_ONLY and self.write_only is not None:
            return self.write_only
        return self.base


@dataclass
class EnumIdentity:
    """A named enum already emitted: its allocated name, value signature and members."""

    name: str
    values: str
    type_ref: TypeRef
    member_names: dict[str, str] = field(default_factory=dict)  # signature part -> member


def enum_signature(values: list[Any]) -> str:
    return "_".join(signature_part(v) for v in values)


def signature_part(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def default_imports() -> list[ImportDecl]:
    return [
        ImportDecl(name="@oazapfts/runtime", namespace="Oazapfts"),
        ImportDecl(name="@oazapfts/runtime/query", namespace="QS"),
    ]


def default_init() -> list[Declaration]:
    """`const oazapfts = Oazapfts.runtime(defaults);`"""
    return [
        VariableDecl(
            name="oazapfts",
            exported=False,
            initializer=Call(
                PropertyAccess(Identifier("Oazapfts"), "runtime"), [Identifier("defaults")]
            ),
        )
    ]


@dataclass
class GenerationContext:
    """State of one generation run."""

    config: CodeGeneratorConfig
    spec: dict

    # Template parts, editable by plugins during `prepare`
    banner: str = DEFAULT_BANNER
    imports: list[ImportDecl] = field(default_factory=default_imports)
    defaults: dict[str, Any] = field(default_factory=dict)
    servers: list[dict] = field(default_factory=list)
    init: list[Declaration] = field(default_factory=default_init)

    # Set when the document was converted from an older format
    is_converted: bool = False

    # `$ref`s of schemas whose discriminator is used through allOf inheritance
    discriminating_schemas: set[str] = field(default_factory=set)

    # Emitted declarations
    aliases: list[Declaration] = field(default_factory=list)
    enum_aliases: list[Declaration] = field(default_factory=list)

    # Proposed enum name -> identities allocated from it, in allocation order
    enum_refs: dict[str, list[EnumIdentity]] = field(default_factory=dict)

    # `$ref` -> emitted alias variants
    refs: dict[str, RefVariants] = field(default_factory=dict)

    # `$ref` -> memoized visibility
    refs_only_mode: dict[str, OnlyModes] = field(default_factory=dict)

    # Name -> usage count, shared by aliases and enums
    type_aliases: dict[str, int] = field(default_factory=dict)

    # Function name -> usage count
    operation_names: dict[str, int] = field(default_factory=dict)

    def get_unique_alias(self, name: str) -> str:
        """Reserve `name`, appending a counter (`Foo2`, `Foo3`, ...) when it is taken."""
        used = self.type_aliases.get(name, 0)
        if used:
            used += 1
            self.type_aliases[name] = used
            name = f"{name}{used}"
        self.type_aliases[name] = 1
        return name

    def find_enum(self, proposed_name: str, values: str) -> EnumIdentity | None:
        """Identity previously allocated from `proposed_name` with the same value signature."""
        for identity in self.enum_refs.get(proposed_name, []):
            if identity.values == values:
                return identity
        return None

    def register_enum(self, proposed_name: str, identity: EnumIdentity) -> None:
        logger.debug("Allocated enum %s (proposed %s)", identity.name, proposed_name)
        self.enum_refs.setdefault(proposed_name, []).append(identity)


def create_context(spec: dict, config: CodeGeneratorConfig | None = None) -> GenerationContext:
    """Create the state for a run; the input document is deep-copied and never modified."""
    spec = copy.deepcopy(spec)
    servers = spec.get("servers") or []
    return GenerationContext(
        config=config or CodeGeneratorConfig(),
        spec=spec,
        defaults={"baseUrl": default_base_url(servers), "headers": {}},
        servers=servers,
    )
