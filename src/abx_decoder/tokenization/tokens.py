"""Token vocabulary of the ABX stream.

Each token starts with one byte: the low nibble names the structural kind and
the high nibble names the type of the value that follows.
"""

from dataclasses import dataclass
from enum import IntEnum
from typing import Optional

KIND_MASK = 0x0F
TYPE_MASK = 0xF0


class TokenKind(IntEnum):
    """Structural token kinds (low nibble)."""

    START_DOCUMENT = 0
    END_DOCUMENT = 1
    START_TAG = 2
    END_TAG = 3
    TEXT = 4
    ATTRIBUTE = 15


class ValueType(IntEnum):
    """Value encodings (high nibble, already shifted into place)."""

    NULL = 1 << 4
    STRING = 2 << 4
    STRING_INTERNED = 3 << 4
    BYTES_HEX = 4 << 4
    BYTES_BASE64 = 5 << 4
    INT = 6 << 4
    INT_HEX = 7 << 4
    LONG = 8 << 4
    LONG_HEX = 9 << 4
    FLOAT = 10 << 4
    DOUBLE = 11 << 4
    BOOLEAN_TRUE = 12 << 4
    BOOLEAN_FALSE = 13 << 4


def _describe_type(raw_type: int) -> str:
    try:
        return ValueType(raw_type).name
    except ValueError:
        return f"0x{raw_type:02x}"


@dataclass(frozen=True)
class Token:
    """A decoded token header byte and where it was read."""

    raw: int
    offset: int

    @property
    def raw_kind(self) -> int:
        """Low nibble of the token byte."""
        return self.raw & KIND_MASK

    @property
    def raw_type(self) -> int:
        """High nibble of the token byte, unshifted."""
        return self.raw & TYPE_MASK

    @property
    def kind(self) -> Optional[TokenKind]:
        """Known token kind, or None for kinds the decoder only skips."""
        try:
            return TokenKind(self.raw_kind)
        except ValueError:
            return None

    @property
    def value_type(self) -> Optional[ValueType]:
        """Known value type, or None for an unassigned high nibble."""
        try:
            return ValueType(self.raw_type)
        except ValueError:
            return None

    def describe(self) -> str:
        """Human-readable form used in error messages."""
        kind = self.kind.name if self.kind is not None else f"kind {self.raw_kind}"
        return f"{kind}/{_describe_type(self.raw_type)}"
