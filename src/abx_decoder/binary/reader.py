"""Sequential big-endian reader over an ABX byte source.

The reader advances a single cursor and keeps at most one byte of pushback,
which is all the header skipper needs to hand the start-of-document token back
to the document decoder.
"""

import io
import struct
from typing import BinaryIO, Optional, Union

from abx_decoder.shared.errors import InvalidTextEncoding, UnexpectedEndOfInput

ByteSource = Union[bytes, bytearray, memoryview, BinaryIO]

_SHORT = struct.Struct(">h")
_UNSIGNED_SHORT = struct.Struct(">H")
_INT = struct.Struct(">i")
_LONG = struct.Struct(">q")
_FLOAT = struct.Struct(">f")
_DOUBLE = struct.Struct(">d")


class ByteReader:
    """Forward-only reader for fixed-width values and length-prefixed runs.

    Every read either returns exactly the requested width and advances the
    cursor by that much, or raises ``UnexpectedEndOfInput``.
    """

    def __init__(
        self,
        source: ByteSource,
        text_encoding: str = "utf-8",
        text_errors: str = "surrogateescape",
    ) -> None:
        """Initialize the reader.

        Args:
            source: Raw bytes or a binary file-like object positioned at the magic
            text_encoding: Codec used to turn text runs into ``str``
            text_errors: Codec error handler for text runs
        """
        if isinstance(source, (bytes, bytearray, memoryview)):
            self._stream: BinaryIO = io.BytesIO(bytes(source))
        elif hasattr(source, "read"):
            self._stream = source
        else:
            raise TypeError(
                f"ByteReader source must be bytes or a binary stream, "
                f"not {type(source).__name__}"
            )

        self.text_encoding = text_encoding
        self.text_errors = text_errors
        self._offset = 0
        self._pushback: Optional[bytes] = None
        self._last_byte: Optional[bytes] = None

    @property
    def offset(self) -> int:
        """Number of bytes consumed so far."""
        return self._offset

    def _read_exact(self, count: int) -> bytes:
        chunks = []
        remaining = count
        while remaining > 0:
            chunk = self._stream.read(remaining)
            if not chunk:
                break
            chunks.append(chunk)
            remaining -= len(chunk)
        return b"".join(chunks)

    def read_bytes(self, count: int) -> bytes:
        """Read exactly ``count`` bytes."""
        if count < 0:
            raise ValueError("count must be >= 0")
        if count == 0:
            return b""

        data = b""
        if self._pushback is not None:
            data = self._pushback
            self._pushback = None
        if len(data) < count:
            data += self._read_exact(count - len(data))

        if len(data) < count:
            raise UnexpectedEndOfInput(
                f"Unexpected end of input: wanted {count} bytes, "
                f"{len(data)} available",
                offset=self._offset,
                details={"wanted": count, "available": len(data)},
            )

        self._offset += count
        self._last_byte = data[-1:]
        return data

    def skip(self, count: int) -> None:
        """Consume and discard ``count`` bytes."""
        self.read_bytes(count)

    def read_byte(self) -> int:
        """Read one unsigned byte."""
        return self.read_bytes(1)[0]

    def peek_byte(self) -> Optional[int]:
        """Return the next byte without consuming it, or None at end of input."""
        if self._pushback is None:
            chunk = self._read_exact(1)
            if not chunk:
                return None
            self._pushback = chunk
        return self._pushback[0]

    def at_end(self) -> bool:
        """Check whether the source is exhausted."""
        return self.peek_byte() is None

    def unread_byte(self) -> None:
        """Rewind the cursor over the byte returned by the last read."""
        if self._pushback is not None or self._last_byte is None:
            raise RuntimeError("Only the last byte read can be unread, and only once")
        self._pushback = self._last_byte
        self._last_byte = None
        self._offset -= 1

    def read_short(self) -> int:
        """Read a signed 16-bit integer."""
        return _SHORT.unpack(self.read_bytes(2))[0]

    def read_unsigned_short(self) -> int:
        """Read an unsigned 16-bit integer."""
        return _UNSIGNED_SHORT.unpack(self.read_bytes(2))[0]

    def read_int(self) -> int:
        """Read a signed 32-bit integer."""
        return _INT.unpack(self.read_bytes(4))[0]

    def read_long(self) -> int:
        """Read a signed 64-bit integer."""
        return _LONG.unpack(self.read_bytes(8))[0]

    def read_float(self) -> float:
        """Read an IEEE 754 single-precision float."""
        return _FLOAT.unpack(self.read_bytes(4))[0]

    def read_double(self) -> float:
        """Read an IEEE 754 double-precision float."""
        return _DOUBLE.unpack(self.read_bytes(8))[0]

    def read_byte_run(self) -> bytes:
        """Read an unsigned 16-bit length followed by that many bytes."""
        return self.read_bytes(self.read_unsigned_short())

    def read_text_run(self) -> str:
        """Read a length-prefixed byte run and decode it as text."""
        start = self._offset
        raw = self.read_byte_run()
        try:
            return raw.decode(self.text_encoding, self.text_errors)
        except UnicodeDecodeError as e:
            raise InvalidTextEncoding(
                f"Text run is not valid {self.text_encoding}: {e.reason}",
                offset=start,
                details={"encoding": self.text_encoding, "length": len(raw)},
            ) from e
