"""Configuration classes for ABX decoding and rendering.

Component configurations validate themselves in ``__post_init__``; the frozen
``ConverterConfig`` combines them and adds serialization, overrides and presets.
"""

import codecs
import json
from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Optional

DEFAULT_DECLARATION = "<?xml version='1.0' encoding='UTF-8' standalone='yes' ?>"
DEFAULT_WRAPPER_TAG = "root"
VALID_LOGGING_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


@dataclass
class DecoderConfig:
    """Configuration for the binary decoding layer."""

    multi_root: bool = False
    wrapper_tag: str = DEFAULT_WRAPPER_TAG
    text_encoding: str = "utf-8"
    text_errors: str = "surrogateescape"
    max_depth: Optional[int] = None

    def __post_init__(self) -> None:
        """Validate decoder configuration."""
        if not self.wrapper_tag:
            raise ValueError("wrapper_tag cannot be empty")
        try:
            codecs.lookup(self.text_encoding)
        except LookupError as e:
            raise ValueError(f"Unknown text_encoding: {self.text_encoding}") from e
        try:
            codecs.lookup_error(self.text_errors)
        except LookupError as e:
            raise ValueError(f"Unknown text_errors handler: {self.text_errors}") from e
        if self.max_depth is not None and self.max_depth <= 0:
            raise ValueError("max_depth must be > 0 or None")


@dataclass
class RenderConfig:
    """Configuration for markup rendering."""

    indent: int = 2
    include_declaration: bool = True
    declaration: str = DEFAULT_DECLARATION
    escape_markup: bool = False  # abx2xml output is unescaped
    newline: str = "\n"

    def __post_init__(self) -> None:
        """Validate render configuration."""
        if self.indent < 0:
            raise ValueError("indent must be >= 0")
        if self.newline not in ("\n", "\r\n"):
            raise ValueError("newline must be '\\n' or '\\r\\n'")
        if self.include_declaration and not self.declaration:
            raise ValueError("declaration cannot be empty when include_declaration is set")


class ConfigError(Exception):
    """Base exception for configuration errors."""


class ConfigValidationError(ConfigError):
    """Exception raised when configuration validation fails."""

    def __init__(self, message: str, field_name: Optional[str] = None,
                 suggestions: Optional[List[str]] = None):
        super().__init__(message)
        self.field_name = field_name
        self.suggestions = suggestions or []


_COMPONENTS = {"decoder": DecoderConfig, "render": RenderConfig}


@dataclass(frozen=True)
class ConverterConfig:
    """Complete configuration for decoding ABX and rendering markup.

    Immutable; use ``override`` to derive variants.
    """

    decoder: DecoderConfig = field(default_factory=DecoderConfig)
    render: RenderConfig = field(default_factory=RenderConfig)
    logging_level: str = "INFO"

    name: Optional[str] = None
    description: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate the complete configuration."""
        try:
            self.decoder.__post_init__()
            self.render.__post_init__()
        except ValueError as e:
            raise ConfigValidationError(str(e)) from e

        if self.logging_level not in VALID_LOGGING_LEVELS:
            raise ConfigValidationError(
                f"logging_level must be one of {VALID_LOGGING_LEVELS}",
                field_name="logging_level",
            )

    def override(self, **kwargs: Any) -> "ConverterConfig":
        """Create a new configuration with specific overrides.

        Nested fields use double-underscore notation.

        Example:
            >>> config = ConverterConfig().override(decoder__multi_root=True)
            >>> config.decoder.multi_root
            True
        """
        nested_overrides: Dict[str, Dict[str, Any]] = {}
        top_level: Dict[str, Any] = {}
        for key, value in kwargs.items():
            if "__" in key:
                component, field_name = key.split("__", 1)
                if component not in _COMPONENTS:
                    raise ConfigValidationError(
                        f"Unknown configuration component: {component}",
                        field_name=key,
                        suggestions=sorted(_COMPONENTS),
                    )
                nested_overrides.setdefault(component, {})[field_name] = value
            else:
                top_level[key] = value

        new_fields: Dict[str, Any] = dict(top_level)
        try:
            for component, overrides in nested_overrides.items():
                new_fields[component] = replace(getattr(self, component), **overrides)
        except (TypeError, ValueError) as e:
            raise ConfigValidationError(str(e)) from e

        return replace(self, **new_fields)

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary format."""
        return {
            "decoder": dict(vars(self.decoder)),
            "render": dict(vars(self.render)),
            "logging_level": self.logging_level,
            "name": self.name,
            "description": self.description,
        }

    def to_json(self, indent: int = 2) -> str:
        """Convert configuration to JSON string."""
        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ConverterConfig":
        """Create configuration from dictionary.

        Unknown keys are rejected so typos in config files surface early.
        """
        values: Dict[str, Any] = {}
        try:
            for key, value in data.items():
                if key in _COMPONENTS:
                    values[key] = _COMPONENTS[key](**value)
                elif key in ("logging_level", "name", "description"):
                    values[key] = value
                else:
                    raise ConfigValidationError(
                        f"Unknown configuration key: {key}", field_name=key
                    )
        except (TypeError, ValueError) as e:
            raise ConfigValidationError(str(e)) from e
        return cls(**values)

    @classmethod
    def from_json(cls, json_str: str) -> "ConverterConfig":
        """Create configuration from JSON string."""
        try:
            data = json.loads(json_str)
        except json.JSONDecodeError as e:
            raise ConfigValidationError(f"Invalid configuration JSON: {e}") from e
        if not isinstance(data, dict):
            raise ConfigValidationError("Configuration JSON must be an object")
        return cls.from_dict(data)

    # Preset factory methods
    @classmethod
    def default(cls) -> "ConverterConfig":
        """Single-root decoding with unescaped output, as abx2xml prints it."""
        return cls(name="default")

    @classmethod
    def multi_root(cls) -> "ConverterConfig":
        """Tolerate several top-level elements under a synthetic wrapper."""
        return cls(
            decoder=DecoderConfig(multi_root=True),
            name="multi_root",
            description="Wraps multiple top-level elements in a synthetic root",
        )

    @classmethod
    def strict_xml(cls) -> "ConverterConfig":
        """Escape reserved characters so output is always well-formed XML."""
        return cls(
            decoder=DecoderConfig(text_errors="strict"),
            render=RenderConfig(escape_markup=True),
            name="strict_xml",
            description="Strict UTF-8 decoding with escaped markup output",
        )
