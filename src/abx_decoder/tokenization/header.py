"""Magic preamble validation and header extension skipping."""

from abx_decoder.binary import ByteReader
from abx_decoder.shared.errors import (
    InvalidMagic,
    MalformedHeaderExtension,
    UnexpectedEndOfInput,
)
from abx_decoder.tokenization.tokens import KIND_MASK, TYPE_MASK, TokenKind, ValueType

MAGIC = b"ABX\x00"

# Fixed payload widths of header extension records
_FIXED_WIDTHS = {
    ValueType.NULL: 0,
    ValueType.INT: 4,
    ValueType.LONG: 8,
    ValueType.FLOAT: 4,
    ValueType.DOUBLE: 8,
}
_RUN_TYPES = (
    ValueType.STRING,
    ValueType.STRING_INTERNED,
    ValueType.BYTES_HEX,
    ValueType.BYTES_BASE64,
)


class HeaderExtensionSkipper:
    """Validates the magic and discards vendor records up to the first document token."""

    def __init__(self, reader: ByteReader) -> None:
        self.reader = reader

    def read_magic(self) -> None:
        """Consume the 4-byte preamble.

        Raises:
            InvalidMagic: If the preamble is missing or wrong
        """
        try:
            magic = self.reader.read_bytes(len(MAGIC))
        except UnexpectedEndOfInput as e:
            raise InvalidMagic(
                "Input is too short to contain the ABX magic", offset=0
            ) from e
        if magic != MAGIC:
            raise InvalidMagic(
                f"Invalid magic number {magic!r}, expected {MAGIC!r}",
                offset=0,
                details={"found": magic.hex()},
            )

    def skip(self) -> int:
        """Skip extension records, leaving the start-of-document token unread.

        Returns:
            Number of extension records skipped

        Raises:
            MalformedHeaderExtension: If a record runs past the end of input
        """
        skipped = 0
        while True:
            record_offset = self.reader.offset
            try:
                token = self.reader.read_byte()
                if token & KIND_MASK == TokenKind.START_DOCUMENT:
                    self.reader.unread_byte()
                    return skipped
                self._skip_record(token)
            except UnexpectedEndOfInput as e:
                raise MalformedHeaderExtension(
                    f"Header extension record truncated: {e.message}",
                    offset=record_offset,
                    details={"records_skipped": skipped},
                ) from e
            skipped += 1

    def _skip_record(self, token: int) -> None:
        value_type = token & TYPE_MASK
        if value_type in _FIXED_WIDTHS:
            self.reader.skip(_FIXED_WIDTHS[value_type])
        elif value_type in _RUN_TYPES:
            self.reader.read_byte_run()
        else:
            # Unassigned types carry their payload width in the low nibble
            self.reader.skip(token & KIND_MASK)
