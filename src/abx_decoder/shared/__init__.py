"""Shared utilities for ABX decoding.

This module provides the error hierarchy, configuration objects, diagnostic and
metrics types, and logging helpers used across all layers.
"""

from .config import (
    ConfigError,
    ConfigValidationError,
    ConverterConfig,
    DecoderConfig,
    RenderConfig,
)
from .errors import (
    AbxDecodeError,
    AttributeOutsideElement,
    EmptyDocumentError,
    ErrorKind,
    InputExhaustedError,
    InvalidInternReference,
    InvalidMagic,
    InvalidTextEncoding,
    InvalidTokenDataType,
    MalformedHeaderExtension,
    MaxDepthExceeded,
    MismatchedEndTag,
    MultipleRootElements,
    NoRootElement,
    SourceReadError,
    StructuralError,
    TextOutsideElement,
    UnclosedElements,
    UnexpectedEndOfInput,
    UnexpectedEndTag,
    UnexpectedTokenType,
    UnsupportedEncodingError,
    UnsupportedValueType,
)
from .logging import (
    CorrelationLogger,
    configure_logging,
    get_logger,
)
from .result import (
    DecodeMetrics,
    DiagnosticEntry,
    DiagnosticSeverity,
)

__all__ = [
    "ConfigError",
    "ConfigValidationError",
    "ConverterConfig",
    "DecoderConfig",
    "RenderConfig",
    "AbxDecodeError",
    "AttributeOutsideElement",
    "EmptyDocumentError",
    "ErrorKind",
    "InputExhaustedError",
    "InvalidInternReference",
    "InvalidMagic",
    "InvalidTextEncoding",
    "InvalidTokenDataType",
    "MalformedHeaderExtension",
    "MaxDepthExceeded",
    "MismatchedEndTag",
    "MultipleRootElements",
    "NoRootElement",
    "SourceReadError",
    "StructuralError",
    "TextOutsideElement",
    "UnclosedElements",
    "UnexpectedEndOfInput",
    "UnexpectedEndTag",
    "UnexpectedTokenType",
    "UnsupportedEncodingError",
    "UnsupportedValueType",
    "CorrelationLogger",
    "configure_logging",
    "get_logger",
    "DecodeMetrics",
    "DiagnosticEntry",
    "DiagnosticSeverity",
]
