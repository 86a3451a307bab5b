"""Tests for token vocabulary and typed value decoding."""

import math
import struct

import pytest

from abx_decoder.binary import ByteReader, StringInternTable
from abx_decoder.shared import UnexpectedTokenType, UnsupportedValueType
from abx_decoder.tokenization import Token, TokenKind, ValueDecoder, ValueType
from abx_decoder.tokenization.values import format_float32


def _decoder(payload: bytes) -> ValueDecoder:
    return ValueDecoder(ByteReader(payload), StringInternTable())


class TestToken:
    """Test token byte splitting."""

    def test_kind_and_type_nibbles(self) -> None:
        """Test the low nibble is the kind and the high nibble the type."""
        token = Token(0x2F, offset=4)
        assert token.kind is TokenKind.ATTRIBUTE
        assert token.value_type is ValueType.STRING
        assert token.raw_type == 0x20

    def test_unknown_kind_and_type(self) -> None:
        """Test unassigned nibbles map to None but keep their raw values."""
        token = Token(0xE7, offset=0)
        assert token.kind is None
        assert token.raw_kind == 7
        assert token.value_type is None

    def test_describe(self) -> None:
        """Test describe names known parts and shows unknown ones in hex."""
        assert Token(0x32, 0).describe() == "START_TAG/STRING_INTERNED"
        assert Token(0x07, 0).describe() == "kind 7/0x00"


class TestValueDecoderScalars:
    """Test fixed-width value types."""

    @pytest.mark.parametrize(
        "value_type, expected",
        [
            (ValueType.NULL, "null"),
            (ValueType.BOOLEAN_TRUE, "true"),
            (ValueType.BOOLEAN_FALSE, "false"),
        ],
    )
    def test_payload_free_types(self, value_type: ValueType, expected: str) -> None:
        """Test types with no payload consume nothing."""
        decoder = _decoder(b"")
        assert decoder.decode(value_type) == expected
        assert decoder.reader.offset == 0

    def test_int(self) -> None:
        """Test signed decimal int."""
        assert _decoder(struct.pack(">i", -42)).decode(ValueType.INT) == "-42"

    def test_int_hex(self) -> None:
        """Test hex int without prefix or padding."""
        assert _decoder(struct.pack(">i", 255)).decode(ValueType.INT_HEX) == "ff"

    def test_negative_int_hex_is_twos_complement(self) -> None:
        """Test negative hex ints render as their unsigned 32-bit pattern."""
        assert _decoder(struct.pack(">i", -1)).decode(ValueType.INT_HEX) == "ffffffff"

    def test_long_and_long_hex(self) -> None:
        """Test 64-bit decimal and hex forms."""
        assert _decoder(struct.pack(">q", 2 ** 40)).decode(ValueType.LONG) == str(2 ** 40)
        assert _decoder(struct.pack(">q", -2)).decode(ValueType.LONG_HEX) == "f" * 15 + "e"

    def test_float_is_shortest_single_precision_text(self) -> None:
        """Test float text is not widened to double-precision digits."""
        text = _decoder(struct.pack(">f", 0.1)).decode(ValueType.FLOAT)
        assert text == "0.1"
        assert struct.pack(">f", float(text)) == struct.pack(">f", 0.1)

    @pytest.mark.parametrize(
        "value, expected",
        [
            (1.5, "1.5"),
            (-2.0, "-2.0"),
            (3.14159274, "3.1415927"),
            (1e-45, "1e-45"),
            (3.4028234663852886e38, "3.4028235e+38"),
            (float("inf"), "inf"),
        ],
    )
    def test_format_float32(self, value: float, expected: str) -> None:
        """Test shortest round-trip text across magnitudes."""
        stored = struct.unpack(">f", struct.pack(">f", value))[0]
        assert format_float32(stored) == expected

    def test_double_round_trips_numerically(self) -> None:
        """Test double text parses back to the same value."""
        text = _decoder(struct.pack(">d", math.pi)).decode(ValueType.DOUBLE)
        assert float(text) == math.pi


class TestValueDecoderRuns:
    """Test string and byte value types."""

    def test_string(self) -> None:
        """Test plain strings are read as text runs."""
        assert _decoder(b"\x00\x03abc").decode(ValueType.STRING) == "abc"

    def test_interned_string_defines_then_resolves(self) -> None:
        """Test interned values share the table with tag names."""
        decoder = _decoder(b"\xff\xff\x00\x02on" + b"\x00\x00")
        assert decoder.decode(ValueType.STRING_INTERNED) == "on"
        assert decoder.decode(ValueType.STRING_INTERNED) == "on"
        assert list(decoder.interns) == ["on"]

    def test_bytes_hex(self) -> None:
        """Test bytes render as lowercase hex."""
        assert _decoder(b"\x00\x02\xde\xad").decode(ValueType.BYTES_HEX) == "dead"

    def test_bytes_base64(self) -> None:
        """Test bytes render as padded standard base64."""
        assert _decoder(b"\x00\x02\xde\xad").decode(ValueType.BYTES_BASE64) == "3q0="

    def test_empty_bytes(self) -> None:
        """Test zero-length byte runs render as empty text."""
        assert _decoder(b"\x00\x00").decode(ValueType.BYTES_HEX) == ""


class TestValueDecoderErrors:
    """Test unsupported types and payload skipping."""

    def test_unknown_type_raises(self) -> None:
        """Test an unassigned high nibble is rejected."""
        with pytest.raises(UnsupportedValueType, match="0xe0") as exc_info:
            _decoder(b"").decode(0xE0, offset=12)
        assert exc_info.value.offset == 12

    def test_type_zero_raises(self) -> None:
        """Test the zero type nibble is not a value type."""
        with pytest.raises(UnsupportedValueType):
            _decoder(b"").decode(0x00)

    def test_skip_null_payload(self) -> None:
        """Test type 0 and NULL have nothing to skip."""
        decoder = _decoder(b"")
        decoder.skip_payload(0x00)
        decoder.skip_payload(ValueType.NULL)
        assert decoder.reader.offset == 0

    def test_skip_int_payload(self) -> None:
        """Test INT payloads skip four bytes."""
        decoder = _decoder(bytes(4))
        decoder.skip_payload(ValueType.INT)
        assert decoder.reader.offset == 4

    def test_skip_string_payload(self) -> None:
        """Test string payloads skip a length-prefixed run."""
        decoder = _decoder(b"\x00\x03xyz")
        decoder.skip_payload(ValueType.STRING)
        assert decoder.reader.at_end()

    def test_skip_other_payload_raises(self) -> None:
        """Test payload shapes that cannot be sized are rejected."""
        with pytest.raises(UnexpectedTokenType):
            _decoder(bytes(8)).skip_payload(ValueType.DOUBLE, offset=3)
