"""Error types for ABX decoding.

Every failure raised by the decoding layers is an ``AbxDecodeError`` carrying an
``ErrorKind`` category, the byte offset where it was detected (when known) and a
details mapping for diagnostics. The API layer turns these into ``DecodeResult``
outcomes; nothing below it catches and continues.
"""

from enum import Enum, auto
from typing import Any, Dict, Optional


class ErrorKind(Enum):
    """Failure categories surfaced to callers."""

    IO_EXHAUSTION = auto()         # Fewer bytes than a field declares
    STRUCTURAL = auto()            # Tag nesting, document boundary, magic, interning
    UNSUPPORTED_ENCODING = auto()  # Type tag not valid in its context
    EMPTY_RESULT = auto()          # Clean stream with no root element
    SOURCE_UNAVAILABLE = auto()    # The byte source could not be opened or read


class AbxDecodeError(Exception):
    """Base class for all ABX decoding failures."""

    kind: ErrorKind = ErrorKind.STRUCTURAL

    def __init__(
        self,
        message: str,
        offset: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.offset = offset
        self.details = details or {}

    def __str__(self) -> str:
        if self.offset is None:
            return self.message
        return f"{self.message} (at byte offset {self.offset})"

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary representation."""
        return {
            "error": type(self).__name__,
            "kind": self.kind.name,
            "message": self.message,
            "offset": self.offset,
            "details": dict(self.details),
        }


class InputExhaustedError(AbxDecodeError):
    """The byte source ran out in the middle of a field."""

    kind = ErrorKind.IO_EXHAUSTION


class UnexpectedEndOfInput(InputExhaustedError):
    """A read needed more bytes than remain in the source."""


class StructuralError(AbxDecodeError):
    """The token stream violates the document structure."""

    kind = ErrorKind.STRUCTURAL


class InvalidMagic(StructuralError):
    """The stream does not start with the ``ABX\\0`` preamble."""


class MalformedHeaderExtension(StructuralError):
    """A header extension record is truncated."""


class InvalidInternReference(StructuralError):
    """An interned string reference points at an undefined entry."""


class UnclosedElements(StructuralError):
    """End of document reached with elements still open."""


class UnexpectedEndTag(StructuralError):
    """End tag with no matching open element."""


class MismatchedEndTag(StructuralError):
    """End tag name differs from the innermost open element."""


class MultipleRootElements(StructuralError):
    """A second top-level element outside multi-root mode."""


class TextOutsideElement(StructuralError):
    """Non-whitespace text with no open element to hold it."""


class AttributeOutsideElement(StructuralError):
    """Attribute token with no open element to hold it."""


class MaxDepthExceeded(StructuralError):
    """Element nesting deeper than the configured limit."""


class UnsupportedEncodingError(AbxDecodeError):
    """A type tag is not valid where it appears."""

    kind = ErrorKind.UNSUPPORTED_ENCODING


class UnsupportedValueType(UnsupportedEncodingError):
    """The value decoder does not know the type tag."""


class InvalidTokenDataType(UnsupportedEncodingError):
    """A structural token carries the wrong value type."""


class UnexpectedTokenType(UnsupportedEncodingError):
    """An unknown token kind whose payload cannot be skipped."""


class InvalidTextEncoding(UnsupportedEncodingError):
    """A text run is not valid in the configured text encoding."""


class SourceReadError(AbxDecodeError):
    """The byte source could not be opened or read."""

    kind = ErrorKind.SOURCE_UNAVAILABLE


class EmptyDocumentError(AbxDecodeError):
    """The stream decoded cleanly but produced nothing."""

    kind = ErrorKind.EMPTY_RESULT


class NoRootElement(EmptyDocumentError):
    """No root element was ever opened."""
