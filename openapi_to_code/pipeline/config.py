"""
Configuration for the OpenAPI client generator.

The options are read-only for the whole run; plugins receive them through
the generation context.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class EnumStyle(str, Enum):
    """How enum schemas are rendered."""

    UNION = "union"  # Inline literal unions, no named declarations
    ENUM = "enum"  # Nominal enum declarations
    AS_CONST = "as-const"  # Frozen object map plus a derived union type


class ArgumentStyle(str, Enum):
    """How operation parameters become function arguments."""

    POSITIONAL = "positional"
    OBJECT = "object"


@dataclass
class CodeGeneratorConfig:
    """Configuration options for code generation."""

    # Only generate operations carrying one of these tags (None = no filter)
    include: list[str] | None = None

    # Skip operations carrying one of these tags
    exclude: list[str] = field(default_factory=list)

    # Wrap every call in the runtime's `ok` helper
    optimistic: bool = False

    # Optional properties are additionally typed as `| undefined`
    union_undefined: bool = False

    # Legacy switch, equivalent to enum_style=enum when enum_style is unset
    use_enum_type: bool = False

    # Rendering style for enums (None = derive from use_enum_type)
    enum_style: EnumStyle | None = None

    # Ignore readOnly/writeOnly and emit a single alias per schema
    merge_read_write_only: bool = False

    # Use `unknown` instead of `any` for unconstrained schemas
    use_unknown: bool = False

    # Shape of the generated function signatures
    argument_style: ArgumentStyle = ArgumentStyle.POSITIONAL

    # Emit an alias for every component schema, referenced or not
    all_schemas: bool = False

    # Do not emit deprecated functions under legacy operation names
    strip_legacy_methods: bool = False

    # Serialize boolean query parameters as 1/0
    numeric_boolean_query_parameters: bool = False

    # User plugins, applied before the built-in ones
    plugins: list[Any] = field(default_factory=list)

    @property
    def effective_enum_style(self) -> EnumStyle:
        if self.enum_style is not None:
            return self.enum_style
        return EnumStyle.ENUM if self.use_enum_type else EnumStyle.UNION

    @classmethod
    def from_dict(cls, config_dict: dict) -> CodeGeneratorConfig:
        """Create config from dictionary, ignoring unknown keys."""
        known = {k: v for k, v in config_dict.items() if k in cls.__dataclass_fields__}
        if known.get("enum_style") is not None:
            known["enum_style"] = EnumStyle(known["enum_style"])
        if "argument_style" in known:
            known["argument_style"] = ArgumentStyle(known["argument_style"])
        for key in ("include", "exclude"):
            if known.get(key) is not None:
                known[key] = list(known[key])
        return cls(**known)

    def to_dict(self) -> dict:
        """Convert config to dictionary (plugins are not serializable and are left out)."""
        return {
            "include": self.include,
            "exclude": self.exclude,
            "optimistic": self.optimistic,
            "union_undefined": self.union_undefined,
            "use_enum_type": self.use_enum_type,
            "enum_style": self.enum_style.value if self.enum_style else None,
            "merge_read_write_only": self.merge_read_write_only,
            "use_unknown": self.use_unknown,
            "argument_style": self.argument_style.value,
            "all_schemas": self.all_schemas,
            "strip_legacy_methods": self.strip_legacy_methods,
            "numeric_boolean_query_parameters": self.numeric_boolean_query_parameters,
        }
