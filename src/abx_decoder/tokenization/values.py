"""Typed value decoding for attribute payloads.

Every supported value type is turned into the text the markup renderer writes
into the attribute.
"""

import base64
import math
import struct
from typing import Callable, Dict, Optional

from abx_decoder.binary import ByteReader, StringInternTable
from abx_decoder.shared.errors import UnexpectedTokenType, UnsupportedValueType
from abx_decoder.tokenization.tokens import ValueType

_INT_MASK = 0xFFFFFFFF
_LONG_MASK = 0xFFFFFFFFFFFFFFFF

# Nine significant digits always identify a single-precision value
_FLOAT_DIGITS = 9


def format_float32(value: float) -> str:
    """Shortest text that reads back as the same single-precision value."""
    if not math.isfinite(value):
        return repr(value)
    packed = struct.pack(">f", value)
    for digits in range(1, _FLOAT_DIGITS + 1):
        text = format(value, f".{digits}g")
        if struct.pack(">f", float(text)) == packed:
            break
    return repr(float(text))


class ValueDecoder:
    """Consumes the payload for a value type and renders it as text."""

    def __init__(self, reader: ByteReader, interns: StringInternTable) -> None:
        self.reader = reader
        self.interns = interns
        self._decoders: Dict[int, Callable[[], str]] = {
            ValueType.NULL: lambda: "null",
            ValueType.BOOLEAN_TRUE: lambda: "true",
            ValueType.BOOLEAN_FALSE: lambda: "false",
            ValueType.INT: lambda: str(self.reader.read_int()),
            ValueType.INT_HEX: lambda: format(self.reader.read_int() & _INT_MASK, "x"),
            ValueType.LONG: lambda: str(self.reader.read_long()),
            ValueType.LONG_HEX: lambda: format(self.reader.read_long() & _LONG_MASK, "x"),
            ValueType.FLOAT: lambda: format_float32(self.reader.read_float()),
            ValueType.DOUBLE: lambda: repr(self.reader.read_double()),
            ValueType.STRING: self.reader.read_text_run,
            ValueType.STRING_INTERNED: lambda: self.interns.resolve_or_define(self.reader),
            ValueType.BYTES_HEX: lambda: self.reader.read_byte_run().hex(),
            ValueType.BYTES_BASE64: self._decode_base64,
        }

    def _decode_base64(self) -> str:
        return base64.b64encode(self.reader.read_byte_run()).decode("ascii")

    def decode(self, raw_type: int, offset: Optional[int] = None) -> str:
        """Read the payload for ``raw_type`` and return its text form.

        Args:
            raw_type: High nibble of the token byte (``token & 0xF0``)
            offset: Offset of the token byte, for error reporting

        Raises:
            UnsupportedValueType: If ``raw_type`` is not a known value type
        """
        decoder = self._decoders.get(raw_type)
        if decoder is None:
            raise UnsupportedValueType(
                f"Unsupported value type 0x{raw_type:02x}",
                offset=offset,
                details={"value_type": raw_type},
            )
        return decoder()

    def skip_payload(self, raw_type: int, offset: Optional[int] = None) -> None:
        """Discard the payload of a token kind the decoder does not interpret.

        Only payload shapes that the ABX writer emits for such tokens are
        skippable; a string-typed payload is read as a plain text run.

        Raises:
            UnexpectedTokenType: If the payload shape cannot be determined
        """
        if raw_type in (0, ValueType.NULL):
            return
        if raw_type == ValueType.INT:
            self.reader.skip(4)
        elif raw_type in (ValueType.STRING, ValueType.STRING_INTERNED):
            self.reader.read_byte_run()
        else:
            raise UnexpectedTokenType(
                f"Cannot skip token with value type 0x{raw_type:02x}",
                offset=offset,
                details={"value_type": raw_type},
            )
